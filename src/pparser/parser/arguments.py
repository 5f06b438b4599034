# Copyright 2026 PParser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Declarations of keyword and positional arguments."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from pparser.parser.values import ArgValue, ValueKind

# ###############
# Public Interface
# ###############

HELP_ARGUMENT_NAME = "help"
NEGATION_NAME_PREFIX = "no_"
NEGATION_FLAG_PREFIX = "--no-"


class ArgType(enum.Enum):
    """How an argument consumes command-line tokens."""

    FLAG = "flag"  # boolean switch, e.g. --verbose
    SINGLE = "single"  # one value, e.g. --output file.txt
    MULTIPLE = "multiple"  # one or more values, e.g. --input a.txt b.txt
    POSITIONAL = "positional"  # one value determined by position


@dataclass
class ArgumentDef:
    """The declared schema of one flag or positional argument.

    Attributes:
        name: Key under which the parsed value is stored.
        short_name: Short flag including its dash (e.g. ``-f``), if any.
        long_name: Long flag including its dashes (e.g. ``--file``), if any.
        help: Help text shown in the usage listing.
        type: How the argument consumes tokens.
        required: Whether parsing fails when the argument is absent.
        default: Value used when the argument is absent.
        value_type: Expected value kind for typed SINGLE/POSITIONAL arguments,
            or STRING to keep the literal text; None keeps the token's own type.
        is_help_flag: Marks the automatic ``-h/--help`` argument.
        negated_flag_name: For an auto-generated ``--no-X`` flag, the name of
            the flag it negates.
    """

    name: str
    short_name: str | None = None
    long_name: str | None = None
    help: str = ""
    type: ArgType = ArgType.FLAG
    required: bool = False
    default: ArgValue = field(default_factory=ArgValue.none)
    value_type: ValueKind | None = None
    is_help_flag: bool = False
    negated_flag_name: str | None = None

    @property
    def takes_value(self) -> bool:
        return self.type is not ArgType.FLAG

    @property
    def display_name(self) -> str:
        """Flag spelling for messages and help, e.g. ``-f, --file <value>``."""
        display = ", ".join(flag for flag in (self.short_name, self.long_name) if flag)
        if not display:
            display = self.name
        if self.type is ArgType.SINGLE:
            display += " <value>"
        elif self.type is ArgType.MULTIPLE:
            display += " <value>..."
        return display

    def matches_flag(self, flag_name: str, short: bool) -> bool:
        """Check a flag token's name (without dashes) against this argument."""
        spelling = self.short_name if short else self.long_name
        prefix = "-" if short else "--"
        return spelling is not None and spelling == prefix + flag_name


def help_argument() -> ArgumentDef:
    """Build the automatic ``-h/--help`` argument every command carries."""
    return ArgumentDef(
        name=HELP_ARGUMENT_NAME,
        short_name="-h",
        long_name="--help",
        help="Show this help message and exit",
        type=ArgType.FLAG,
        default=ArgValue.of_bool(False),
        is_help_flag=True,
    )
