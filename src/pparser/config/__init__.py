# Copyright 2026 PParser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Declarative YAML definitions of command trees."""

from pparser.config.definition import (
    ArgumentDefinition,
    CommandConfigError,
    CommandDefinition,
    PositionalDefinition,
    build_command,
    load_command_definition,
    parse_command_definition,
)

__all__ = [
    "ArgumentDefinition",
    "CommandConfigError",
    "CommandDefinition",
    "PositionalDefinition",
    "build_command",
    "load_command_definition",
    "parse_command_definition",
]
