# Copyright 2026 PParser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Token kinds, spans and token values produced by the scanner."""

import enum
from dataclasses import dataclass, field
from decimal import Decimal

from pparser.lexer.source import Source

# ###############
# Public Interface
# ###############


class TokenKind(enum.Enum):
    """All token kinds produced by the scanner.

    Keyword and punctuation kinds are valued by their spelling, which is also
    how they print.
    """

    # End of input
    EOF = "<EOF>"

    # Keywords
    IF = "if"
    ELSE = "else"
    FOR = "for"
    IN = "in"
    WHILE = "while"
    BREAK = "break"
    RETURN = "return"
    INT = "int"
    BOOL = "bool"
    STRING = "string"
    AND = "and"
    OR = "or"
    NOT = "not"
    TRUE = "true"
    FALSE = "false"

    # Operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    DOUBLE_MINUS = "--"
    TIMES = "*"
    DIVIDE = "/"
    MODULO = "%"
    SHL = "<<"
    SHR = ">>"
    LESS = "<"
    GREATER = ">"
    LESS_EQ = "<="
    GREATER_EQ = ">="
    EQ = "=="
    NOT_EQ = "!="

    # Punctuation
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    SEMI = ";"
    COLON = ":"
    COMMA = ","
    DOT = "."

    # Literals, identifiers and command-line flags
    IDENTIFIER = "IDENTIFIER"
    INT_LITERAL = "INT_LITERAL"
    FLOAT_LITERAL = "FLOAT_LITERAL"
    STRING_LITERAL = "STRING_LITERAL"
    SHORT_FLAG = "SHORT_FLAG"
    LONG_FLAG = "LONG_FLAG"


KEYWORD_KINDS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.IF,
        TokenKind.ELSE,
        TokenKind.FOR,
        TokenKind.IN,
        TokenKind.WHILE,
        TokenKind.BREAK,
        TokenKind.RETURN,
        TokenKind.INT,
        TokenKind.BOOL,
        TokenKind.STRING,
        TokenKind.AND,
        TokenKind.OR,
        TokenKind.NOT,
        TokenKind.TRUE,
        TokenKind.FALSE,
    }
)

FLAG_KINDS: frozenset[TokenKind] = frozenset({TokenKind.SHORT_FLAG, TokenKind.LONG_FLAG})


class Base(enum.IntEnum):
    """Radix of an integer literal."""

    BIN = 2
    DEC = 10
    HEX = 16


@dataclass(frozen=True)
class Span:
    """A half-open character range ``[start, end)`` into a source buffer."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if not 0 <= self.start <= self.end:
            raise ValueError(f"Invalid span [{self.start}, {self.end})")

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class IntLiteral:
    """Payload of an INT_LITERAL token."""

    value: int
    base: Base


@dataclass(frozen=True)
class FloatLiteral:
    """Payload of a FLOAT_LITERAL token.

    ``has_exponent`` records that the literal was written in exponent form so
    printing can reproduce that form.
    """

    value: float
    has_exponent: bool


TokenPayload = IntLiteral | FloatLiteral | Span | None


@dataclass(frozen=True)
class Token:
    """One lexical unit.

    Attributes:
        kind: The token kind.
        span: Range of the whole token (including quotes and dashes).
        source: The buffer the token was scanned from.
        payload: Kind-dependent data. IntLiteral/FloatLiteral for numbers; for
            identifiers, flags and string literals a Span referring to the name
            or the raw, still-escaped string content inside ``source``.
    """

    kind: TokenKind
    span: Span
    source: Source = field(repr=False)
    payload: TokenPayload = None

    def __post_init__(self) -> None:
        if self.span.end > len(self.source):
            raise ValueError(f"Span {self.span} exceeds source length {len(self.source)}")

    def __str__(self) -> str:
        return format_token(self)

    @property
    def text(self) -> str:
        """The exact source text covered by the token's span."""
        return self.source.code[self.span.start : self.span.end]

    @property
    def is_flag(self) -> bool:
        return self.kind in FLAG_KINDS

    @property
    def name(self) -> str:
        """Identifier text, or a flag's name without its leading dashes."""
        if self.kind not in (TokenKind.IDENTIFIER, TokenKind.SHORT_FLAG, TokenKind.LONG_FLAG):
            raise ValueError(f"Token is not an identifier or flag: {self.kind.name}")
        return self._slice()

    @property
    def raw_string(self) -> str:
        """String literal content exactly as written, escapes not processed."""
        if self.kind is not TokenKind.STRING_LITERAL:
            raise ValueError(f"Token is not a string literal: {self.kind.name}")
        return self._slice()

    @property
    def string_value(self) -> str:
        """String literal content with escape sequences decoded."""
        return decode_escapes(self.raw_string)

    @property
    def int_value(self) -> int:
        return self._int_payload().value

    @property
    def int_base(self) -> Base:
        return self._int_payload().base

    @property
    def float_value(self) -> float:
        return self._float_payload().value

    @property
    def has_exponent(self) -> bool:
        return self._float_payload().has_exponent

    # ------------------------------------------------------------------
    # Payload access helpers
    # ------------------------------------------------------------------

    def _slice(self) -> str:
        if not isinstance(self.payload, Span):
            raise ValueError(f"Token has no source text payload: {self.kind.name}")
        return self.source.code[self.payload.start : self.payload.end]

    def _int_payload(self) -> IntLiteral:
        if not isinstance(self.payload, IntLiteral):
            raise ValueError(f"Token is not an integer literal: {self.kind.name}")
        return self.payload

    def _float_payload(self) -> FloatLiteral:
        if not isinstance(self.payload, FloatLiteral):
            raise ValueError(f"Token is not a float literal: {self.kind.name}")
        return self.payload


def decode_escapes(raw: str) -> str:
    """Decode the escape sequences accepted by the scanner.

    Unknown escapes cannot survive scanning; if one is seen anyway the escaped
    character is kept literally, and a dangling backslash is kept as is.
    """
    chars: list[str] = []
    i = 0
    while i < len(raw):
        ch = raw[i]
        if ch == "\\":
            i += 1
            if i >= len(raw):
                chars.append("\\")
                break
            esc = raw[i]
            chars.append(_DECODED_ESCAPES.get(esc, esc))
        else:
            chars.append(ch)
        i += 1
    return "".join(chars)


def format_token(token: Token) -> str:
    """Render a token in a printable form that re-scans to an equal token.

    Flags keep their dashes, string literals are re-quoted with escapes,
    integers keep their base prefix, and floats keep exponent form only when
    they were written with one.
    """
    kind = token.kind
    if kind is TokenKind.SHORT_FLAG:
        return f"-{token.name}"
    if kind is TokenKind.LONG_FLAG:
        return f"--{token.name}"
    if kind is TokenKind.IDENTIFIER:
        return token.name
    if kind is TokenKind.STRING_LITERAL:
        return quote_string(token.string_value)
    if kind is TokenKind.INT_LITERAL:
        return _format_int(token.int_value, token.int_base)
    if kind is TokenKind.FLOAT_LITERAL:
        return _format_float(token.float_value, token.has_exponent)
    return kind.value


def quote_string(value: str) -> str:
    """Wrap a string in double quotes, escaping it the way the scanner expects.

    Only the characters with an escape sequence are rewritten; every other
    character, printable or not, is kept as is.
    """
    parts = ['"']
    for ch in value:
        parts.append(_ENCODED_ESCAPES.get(ch, ch))
    parts.append('"')
    return "".join(parts)


# ################
# Implementation
# ################

_DECODED_ESCAPES: dict[str, str] = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    '"': '"',
    "0": "\0",
}

_ENCODED_ESCAPES: dict[str, str] = {decoded: "\\" + esc for esc, decoded in _DECODED_ESCAPES.items()}


def _format_int(value: int, base: Base) -> str:
    if base is Base.HEX:
        return f"0x{value:x}"
    if base is Base.BIN:
        return f"0b{value:b}"
    return str(value)


def _format_float(value: float, has_exponent: bool) -> str:
    """Format a float from its shortest round-trip digits.

    Decimal keeps exactly the digits of repr() with trailing zeros dropped,
    so neither form loses precision, and the positional form always carries
    a '.' so it scans back as a float.
    """
    digits = Decimal(repr(value)).normalize()
    if has_exponent:
        return f"{digits:e}"
    text = f"{digits:f}"
    if "." not in text:
        text += ".0"
    return text
