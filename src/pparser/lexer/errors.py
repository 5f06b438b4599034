# Copyright 2026 PParser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical error reporting."""

import enum

from pparser.lexer.source import Location

# ###############
# Public Interface
# ###############


class LexErrorKind(enum.Enum):
    """The categories of lexical failure, valued by their diagnostic text."""

    INVALID_CHAR = "invalid character"
    UNCLOSED_STRING = "unclosed string literal"
    UNKNOWN_ESCAPE = "unknown escape character"
    INT_OUT_OF_RANGE = "integer literal out of 64-bit range"
    INCOMPLETE_INT = "incomplete integer literal"
    FLOAT_OUT_OF_RANGE = "floating-point literal out of range"
    INVALID_FLOAT = "invalid floating-point literal"


class LexError(Exception):
    """Raised when the scanner cannot produce a token.

    Lexical errors are fatal to the tokenize call that raised them; there is
    no recovery or resynchronization.

    Attributes:
        kind: The category of the failure.
        location: Location of the offending character.
    """

    def __init__(self, kind: LexErrorKind, location: Location) -> None:
        super().__init__(f"{location}: {kind.value}")
        self.kind = kind
        self.location = location

    @property
    def line(self) -> int:
        return self.location.line

    @property
    def column(self) -> int:
        return self.location.column
