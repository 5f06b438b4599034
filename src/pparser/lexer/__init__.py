# Copyright 2026 PParser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Source handling and lexical scanning for command lines."""

from pparser.lexer.errors import LexError, LexErrorKind
from pparser.lexer.scanner import tokenize
from pparser.lexer.source import Location, Source, SourceCursor
from pparser.lexer.token import (
    Base,
    FloatLiteral,
    IntLiteral,
    Span,
    Token,
    TokenKind,
    decode_escapes,
    format_token,
    quote_string,
)

__all__ = [
    "Base",
    "FloatLiteral",
    "IntLiteral",
    "LexError",
    "LexErrorKind",
    "Location",
    "Source",
    "SourceCursor",
    "Span",
    "Token",
    "TokenKind",
    "decode_escapes",
    "format_token",
    "quote_string",
    "tokenize",
]
