# Copyright 2026 PParser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Top-level facade that tokenizes command lines and drives the root command."""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from typing import TextIO

from pparser.lexer.errors import LexError
from pparser.lexer.scanner import tokenize
from pparser.lexer.source import Source
from pparser.lexer.token import FLAG_KINDS, KEYWORD_KINDS, TokenKind, quote_string
from pparser.parser.command import Command, TokenCursor
from pparser.parser.help import render_error
from pparser.parser.result import ParseResult, ParseStatus

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

CLI_SOURCE_NAME = "<cli>"


class ArgumentParser:
    """Owns a root command and parses whole command lines against it.

    ``parse`` accepts either a single command-line string, which is scanned
    as is, or an argv-style list, whose elements are joined into one command
    line. Argv elements that would not scan back as a single plain token
    (spaces, quotes, punctuation, empty strings) are quoted first so each
    element stays one value.
    """

    def __init__(
        self,
        prog: str,
        description: str = "",
        *,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self._root = Command(prog, description)
        self._stdout = stdout
        self._stderr = stderr

    @classmethod
    def for_command(
        cls,
        command: Command,
        *,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> ArgumentParser:
        """Wrap an already built command tree."""
        parser = cls(command.name, command.help, stdout=stdout, stderr=stderr)
        parser._root = command
        return parser

    @property
    def root_command(self) -> Command:
        return self._root

    def parse(self, args: str | Sequence[str]) -> ParseResult:
        """Parse a command line and return the result of the deepest matched command.

        Lexical errors and tokens left over after a successful match are
        reported as PARSE_ERROR results with exit code 1, with the message
        and the root command's help written to the error stream.
        """
        text = args if isinstance(args, str) else join_argv(args)
        logger.debug("Parsing command line for '%s': %s", self._root.name, text)
        try:
            tokens = tokenize(Source.from_string(text, CLI_SOURCE_NAME))
        except LexError as exc:
            return self._fail(str(exc), self._root.name)

        cursor = TokenCursor()
        result = self._root.match(tokens, cursor, stdout=self._stdout, stderr=self._stderr)
        if result.status is ParseStatus.SUCCESS and tokens[cursor.index].kind is not TokenKind.EOF:
            return self._fail(f"Unexpected arguments starting from: {tokens[cursor.index]}", result.command_path)
        logger.debug("Parsed '%s' with status %s", result.command_path, result.status.name)
        return result

    def run(self, args: str | Sequence[str]) -> int:
        """Parse a command line (running any handler) and return the exit code."""
        return self.parse(args).exit_code

    def format_help(self) -> str:
        return self._root.format_help()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _fail(self, message: str, command_path: str) -> ParseResult:
        logger.debug("Parse error: %s", message)
        (self._stderr or sys.stderr).write(render_error(message, self._root))
        return ParseResult(
            status=ParseStatus.PARSE_ERROR,
            exit_code=1,
            error_message=message,
            command_path=command_path,
        )


def join_argv(argv: Sequence[str]) -> str:
    """Join argv elements into one command line, quoting where needed."""
    return " ".join(_quote_argument(arg) for arg in argv)


# ################
# Implementation
# ################

_PLAIN_KINDS = frozenset(
    {TokenKind.IDENTIFIER, TokenKind.INT_LITERAL, TokenKind.FLOAT_LITERAL, TokenKind.DOUBLE_MINUS}
    | FLAG_KINDS
    | KEYWORD_KINDS
)


def _quote_argument(arg: str) -> str:
    """Keep an argument verbatim if it scans to exactly one plain token covering all of it."""
    try:
        tokens = tokenize(arg)
    except LexError:
        return quote_string(arg)
    if len(tokens) == 2 and tokens[0].kind in _PLAIN_KINDS and len(tokens[0].span) == len(arg):
        return arg
    return quote_string(arg)
