# Copyright 2026 PParser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML loader for declarative command-tree definitions.

A definition file describes one root command::

    name: git
    help: A version control tool
    subcommands:
      - name: commit
        aliases: [ci]
        options:
          - name: message
            short-name: -m
            long-name: --message
            type: single
            required: true
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, StrictBool, StrictFloat, StrictInt, StrictStr, ValidationError
from pydantic import Field as _Field

from pparser.parser.arguments import ArgType
from pparser.parser.command import Command, CommandDefinitionError
from pparser.parser.values import ValueKind

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DefaultValue = StrictBool | StrictInt | StrictFloat | StrictStr | list[StrictStr] | None
ValueTypeName = Literal["bool", "int", "float", "string"]


class CommandConfigError(Exception):
    """Raised when a command definition file is invalid or cannot be loaded."""


class ArgumentDefinition(BaseModel):
    """A keyword argument (flag or option) entry of a command definition."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    short_name: str | None = _Field(default=None, alias="short-name")
    long_name: str | None = _Field(default=None, alias="long-name")
    help: str = ""
    type: Literal["flag", "single", "multiple"] = "flag"
    required: bool = False
    default: DefaultValue = None
    value_type: ValueTypeName | None = _Field(default=None, alias="value-type")


class PositionalDefinition(BaseModel):
    """A positional argument entry of a command definition."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    help: str = ""
    type: Literal["single", "multiple"] = "single"
    required: bool = True
    default: DefaultValue = None
    value_type: ValueTypeName | None = _Field(default=None, alias="value-type")


class CommandDefinition(BaseModel):
    """A command and, recursively, its subcommands."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    help: str = ""
    aliases: list[str] = _Field(default_factory=list)
    options: list[ArgumentDefinition] = _Field(default_factory=list)
    positionals: list[PositionalDefinition] = _Field(default_factory=list)
    subcommands: list[CommandDefinition] = _Field(default_factory=list)


def load_command_definition(path: Path) -> Command:
    """Load a YAML command definition file and build its command tree.

    Args:
        path: Path to the YAML definition.

    Returns:
        The root Command of the described tree.

    Raises:
        CommandConfigError: If the file cannot be read, is not valid YAML,
            does not match the definition schema, or describes an invalid tree.
    """
    path = Path(path)
    logger.debug("Loading command definition from %s", path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise CommandConfigError(f"Command definition file not found: {path}") from None
    except OSError as exc:
        raise CommandConfigError(f"Cannot read command definition file: {exc}") from exc

    return parse_command_definition(text, source_label=str(path))


def parse_command_definition(text: str, source_label: str = "<string>") -> Command:
    """Parse YAML definition text into a command tree.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages (e.g. the file path).

    Raises:
        CommandConfigError: If the YAML, the schema or the tree is invalid.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise CommandConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if not isinstance(data, dict):
        raise CommandConfigError(f"{source_label}: command definition must be a YAML mapping")

    try:
        definition = CommandDefinition.model_validate(data)
    except ValidationError as exc:
        raise CommandConfigError(f"{source_label}: invalid command definition: {exc}") from exc

    try:
        command = build_command(definition)
    except CommandDefinitionError as exc:
        raise CommandConfigError(f"{source_label}: {exc}") from exc
    logger.debug("Built command tree '%s' from %s", command.name, source_label)
    return command


def build_command(definition: CommandDefinition) -> Command:
    """Build a Command tree from a validated definition.

    Raises:
        CommandDefinitionError: If the definition violates a naming invariant.
    """
    command = Command(definition.name, definition.help, aliases=definition.aliases)
    for option in definition.options:
        command.add_keyword_arg(
            option.name,
            short_name=option.short_name,
            long_name=option.long_name,
            help=option.help,
            type=_ARG_TYPES[option.type],
            required=option.required,
            default=option.default,
            value_type=_value_kind(option.value_type),
        )
    for positional in definition.positionals:
        command.add_positional_arg(
            positional.name,
            help=positional.help,
            type=_ARG_TYPES[positional.type],
            required=positional.required,
            default=positional.default,
            value_type=_value_kind(positional.value_type),
        )
    for sub in definition.subcommands:
        command.add_subcommand(build_command(sub))
    return command


# ################
# Implementation
# ################

_ARG_TYPES: dict[str, ArgType] = {
    "flag": ArgType.FLAG,
    "single": ArgType.SINGLE,
    "multiple": ArgType.MULTIPLE,
}


def _value_kind(name: str | None) -> ValueKind | None:
    return None if name is None else ValueKind(name)
