# Copyright 2026 PParser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Command trees, argument declarations and the command-line matcher."""

from pparser.parser.argument_parser import ArgumentParser, join_argv
from pparser.parser.arguments import ArgType, ArgumentDef
from pparser.parser.command import ArgumentError, Command, CommandDefinitionError, TokenCursor, coerce_token
from pparser.parser.help import render_error, render_help
from pparser.parser.result import ParseResult, ParseStatus
from pparser.parser.values import ArgValue, ValueKind

__all__ = [
    "ArgType",
    "ArgValue",
    "ArgumentDef",
    "ArgumentError",
    "ArgumentParser",
    "Command",
    "CommandDefinitionError",
    "ParseResult",
    "ParseStatus",
    "TokenCursor",
    "ValueKind",
    "coerce_token",
    "join_argv",
    "render_error",
    "render_help",
]
