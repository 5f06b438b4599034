# Copyright 2026 PParser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for command lines and small expression sources.

Converts a Source into a sequence of tokens for the argument matcher.
"""

from pparser.lexer.errors import LexError, LexErrorKind
from pparser.lexer.source import Location, Source
from pparser.lexer.token import Base, FloatLiteral, IntLiteral, Span, Token, TokenKind, TokenPayload

# ###############
# Public Interface
# ###############

INT64_MAX = 2**63 - 1


def tokenize(source: Source | str, filename: str = "<string>") -> list[Token]:
    """Tokenize source text into a sequence of tokens.

    Whitespace and ``//`` line comments are consumed and not included in the
    output. The final token is always a single EOF token.

    Args:
        source: A Source, or raw text to wrap in one.
        filename: Name used in Locations when ``source`` is raw text.

    Returns:
        A list of Token objects ending with an EOF token.

    Raises:
        LexError: On invalid characters, malformed string literals or
            malformed/out-of-range numeric literals.
    """
    if isinstance(source, str):
        source = Source.from_string(source, filename)
    return _Lexer(source).tokenize()


# ################
# Implementation
# ################

_KEYWORDS: dict[str, TokenKind] = {
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "for": TokenKind.FOR,
    "in": TokenKind.IN,
    "while": TokenKind.WHILE,
    "break": TokenKind.BREAK,
    "return": TokenKind.RETURN,
    "int": TokenKind.INT,
    "bool": TokenKind.BOOL,
    "string": TokenKind.STRING,
    "and": TokenKind.AND,
    "or": TokenKind.OR,
    "not": TokenKind.NOT,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
}

_SINGLE_CHAR_TOKENS: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "*": TokenKind.TIMES,
    "%": TokenKind.MODULO,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ";": TokenKind.SEMI,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
    ".": TokenKind.DOT,
}

# First character -> (kind alone, {second character: two-character kind}).
_TWO_CHAR_TOKENS: dict[str, tuple[TokenKind, dict[str, TokenKind]]] = {
    "<": (TokenKind.LESS, {"<": TokenKind.SHL, "=": TokenKind.LESS_EQ}),
    ">": (TokenKind.GREATER, {">": TokenKind.SHR, "=": TokenKind.GREATER_EQ}),
    "=": (TokenKind.ASSIGN, {"=": TokenKind.EQ}),
    "!": (TokenKind.NOT, {"=": TokenKind.NOT_EQ}),
}

_VALID_ESCAPES = frozenset('nrt\\"0')

_DIGITS: dict[Base, frozenset[str]] = {
    Base.BIN: frozenset("01"),
    Base.DEC: frozenset("0123456789"),
    Base.HEX: frozenset("0123456789abcdefABCDEF"),
}


def _is_digit(ch: str) -> bool:
    return ch in _DIGITS[Base.DEC]


def _is_ident_start(ch: str) -> bool:
    return ch != "" and ((ch.isascii() and ch.isalpha()) or ch in "_$/")


def _is_ident_cont(ch: str) -> bool:
    return _is_ident_start(ch) or _is_digit(ch) or ch == "."


class _Lexer:
    """Internal scanner state machine."""

    def __init__(self, source: Source) -> None:
        self._source = source
        self._cursor = source.cursor()
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Run the scanner and return all tokens including the terminal EOF."""
        while True:
            self._skip_whitespace_and_comments()
            if not self._cursor.has_more():
                break
            self._tokens.append(self._scan_token())
        end = self._cursor.position
        self._tokens.append(Token(TokenKind.EOF, Span(end, end), self._source))
        return self._tokens

    # ------------------------------------------------------------------
    # Low-level character access helpers
    # ------------------------------------------------------------------

    def _current(self) -> str:
        return self._cursor.current()

    def _peek(self) -> str:
        return self._cursor.peek()

    def _advance(self) -> str:
        return self._cursor.advance()

    def _location(self) -> Location:
        return self._cursor.location()

    def _make(self, kind: TokenKind, start: int, payload: TokenPayload = None) -> Token:
        """Build a token spanning from ``start`` to the current position."""
        return Token(kind, Span(start, self._cursor.position), self._source, payload)

    # ------------------------------------------------------------------
    # Whitespace and comment skipping
    # ------------------------------------------------------------------

    def _skip_whitespace_and_comments(self) -> None:
        """Skip all whitespace and ``//`` comment runs at the current position."""
        while self._cursor.has_more():
            ch = self._current()
            if ch in " \t\r\n":
                self._advance()
            elif ch == "/" and self._peek() == "/":
                while self._cursor.has_more() and self._current() != "\n":
                    self._advance()
            else:
                break

    # ------------------------------------------------------------------
    # Token scanning dispatcher
    # ------------------------------------------------------------------

    def _scan_token(self) -> Token:
        """Dispatch to the appropriate handler based on the current character."""
        start = self._cursor.position
        ch = self._current()

        if ch in _SINGLE_CHAR_TOKENS:
            self._advance()
            return self._make(_SINGLE_CHAR_TOKENS[ch], start)
        if ch in _TWO_CHAR_TOKENS:
            single, pairs = _TWO_CHAR_TOKENS[ch]
            self._advance()
            kind = pairs.get(self._current())
            if kind is None:
                return self._make(single, start)
            self._advance()
            return self._make(kind, start)
        if ch == "-":
            return self._scan_dash(start)
        if ch == "/" and not _is_ident_cont(self._peek()):
            self._advance()
            return self._make(TokenKind.DIVIDE, start)
        if ch == '"':
            return self._scan_string(start)
        if _is_digit(ch):
            return self._scan_number(start)
        if _is_ident_start(ch):
            return self._scan_identifier_or_keyword(start)
        raise LexError(LexErrorKind.INVALID_CHAR, self._location())

    def _scan_dash(self, start: int) -> Token:
        """Scan ``-``, ``--``, a short flag or a long flag."""
        if self._peek() == "-":
            self._cursor.advance2()  # --
            if _is_ident_start(self._current()):
                return self._scan_flag_name(TokenKind.LONG_FLAG, start, allow_dash=True)
            if not _is_ident_cont(self._current()):
                return self._make(TokenKind.DOUBLE_MINUS, start)
            # e.g. '--1' or '--.'
            raise LexError(LexErrorKind.INVALID_CHAR, self._location())
        self._advance()  # -
        if _is_ident_start(self._current()) or _is_digit(self._current()):
            return self._scan_flag_name(TokenKind.SHORT_FLAG, start, allow_dash=False)
        return self._make(TokenKind.MINUS, start)

    # ------------------------------------------------------------------
    # Name scanners
    # ------------------------------------------------------------------

    def _scan_flag_name(self, kind: TokenKind, start: int, allow_dash: bool) -> Token:
        """Scan the name following a flag's dashes; the span keeps the dashes."""
        name_start = self._cursor.position
        while _is_ident_cont(self._current()) or (allow_dash and self._current() == "-"):
            self._advance()
        return self._make(kind, start, Span(name_start, self._cursor.position))

    def _scan_identifier_or_keyword(self, start: int) -> Token:
        """Scan an identifier and map it to a keyword kind if applicable."""
        self._advance()
        while _is_ident_cont(self._current()):
            self._advance()
        name = self._source.code[start : self._cursor.position]
        kind = _KEYWORDS.get(name)
        if kind is not None:
            return self._make(kind, start)
        return self._make(TokenKind.IDENTIFIER, start, Span(start, self._cursor.position))

    # ------------------------------------------------------------------
    # Literal scanners
    # ------------------------------------------------------------------

    def _scan_string(self, start: int) -> Token:
        """Scan a double-quoted string literal, validating but not decoding escapes."""
        open_location = self._location()
        self._advance()  # opening "
        content_start = self._cursor.position
        while True:
            ch = self._current()
            if ch == "":
                raise LexError(LexErrorKind.UNCLOSED_STRING, open_location)
            if ch == "\n":
                raise LexError(LexErrorKind.UNCLOSED_STRING, self._location())
            if ch == '"':
                break
            if ch == "\\":
                backslash_location = self._location()
                self._advance()
                esc = self._current()
                if esc in ("", "\n"):
                    raise LexError(LexErrorKind.UNCLOSED_STRING, backslash_location)
                if esc not in _VALID_ESCAPES:
                    raise LexError(LexErrorKind.UNKNOWN_ESCAPE, self._location())
            self._advance()
        content = Span(content_start, self._cursor.position)
        self._advance()  # closing "
        return self._make(TokenKind.STRING_LITERAL, start, content)

    def _scan_number(self, start: int) -> Token:
        """Scan an integer (decimal, 0x hex, 0b binary) or a decimal float.

        Underscores separate digit groups and are dropped. A '.' only extends
        a decimal number when a digit follows it, and 'e'/'E' only when a
        digit or a sign and a digit follow; otherwise the number ends there
        and scanning resumes at that character.
        """
        start_location = self._location()
        base = Base.DEC
        if self._current() == "0" and self._peek() in ("x", "X", "b", "B"):
            base = Base.HEX if self._peek() in ("x", "X") else Base.BIN
            self._cursor.advance2()  # 0x or 0b
            if self._current() not in _DIGITS[base]:
                raise LexError(LexErrorKind.INCOMPLETE_INT, self._location())

        digits = self._scan_digits(base)

        if base is not Base.DEC:
            if self._current() in (".", "e", "E"):
                raise LexError(LexErrorKind.INVALID_CHAR, self._location())
            return self._make_int(digits, base, start, start_location)

        is_float = False
        has_exponent = False
        if self._current() == "." and _is_digit(self._peek()):
            is_float = True
            self._advance()  # .
            digits += "." + self._scan_digits(Base.DEC)

        if self._current() in ("e", "E"):
            sign = self._peek()
            after_sign = self._cursor.peek2()
            if _is_digit(sign) or (sign in ("+", "-") and _is_digit(after_sign)):
                is_float = True
                has_exponent = True
                self._advance()  # e
                exponent = ""
                if self._current() in ("+", "-"):
                    exponent = self._advance()
                digits += "e" + exponent + self._scan_digits(Base.DEC)

        if is_float:
            return self._make_float(digits, has_exponent, start, start_location)
        return self._make_int(digits, base, start, start_location)

    def _scan_digits(self, base: Base) -> str:
        """Consume a run of digits and underscores, returning the digits only."""
        valid = _DIGITS[base]
        chars: list[str] = []
        while self._current() in valid or self._current() == "_":
            if self._current() != "_":
                chars.append(self._current())
            self._advance()
        return "".join(chars)

    def _make_int(self, digits: str, base: Base, start: int, start_location: Location) -> Token:
        if not digits:
            raise LexError(LexErrorKind.INCOMPLETE_INT, start_location)
        value = int(digits, int(base))
        if value > INT64_MAX:
            raise LexError(LexErrorKind.INT_OUT_OF_RANGE, start_location)
        return self._make(TokenKind.INT_LITERAL, start, IntLiteral(value, base))

    def _make_float(self, text: str, has_exponent: bool, start: int, start_location: Location) -> Token:
        try:
            value = float(text)
        except ValueError:
            raise LexError(LexErrorKind.INVALID_FLOAT, start_location) from None
        mantissa = text.partition("e")[0]
        underflow = value == 0.0 and any(d in "123456789" for d in mantissa)
        if value in (float("inf"), float("-inf")) or underflow:
            raise LexError(LexErrorKind.FLOAT_OUT_OF_RANGE, start_location)
        return self._make(TokenKind.FLOAT_LITERAL, start, FloatLiteral(value, has_exponent))
