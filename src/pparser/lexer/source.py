# Copyright 2026 PParser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Source buffers, character cursors and diagnostic locations."""

from dataclasses import dataclass
from pathlib import Path

# ###############
# Public Interface
# ###############

TAB_WIDTH = 4


@dataclass(frozen=True)
class Location:
    """A position inside a source buffer, used for diagnostics.

    Attributes:
        filename: Name of the originating file (may be empty).
        line: 1-based line number.
        column: 1-based column number (tabs count as TAB_WIDTH columns).
    """

    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.filename or '<string>'} ({self.line}:{self.column})"


@dataclass(frozen=True)
class Source:
    """An immutable character buffer together with the name it came from.

    Tokens produced from a Source refer back into ``code`` instead of
    copying their text, so a Source must outlive the tokens built from it.
    """

    code: str
    filename: str = "<string>"

    @classmethod
    def from_string(cls, code: str, filename: str = "<string>") -> "Source":
        """Wrap an in-memory string."""
        return cls(code=code, filename=filename)

    @classmethod
    def from_file(cls, path: Path) -> "Source":
        """Read a UTF-8 file into a Source named after its path.

        Raises:
            OSError: If the file cannot be read.
        """
        return cls(code=Path(path).read_text(encoding="utf-8"), filename=str(path))

    def __len__(self) -> int:
        return len(self.code)

    def cursor(self) -> "SourceCursor":
        """Return a fresh cursor positioned at the start of the buffer."""
        return SourceCursor(self)

    def location_at(self, offset: int) -> Location:
        """Compute the Location of a character offset.

        Walks the buffer from the start, so it is meant for diagnostics and
        tooling rather than for the scanner's hot path.
        """
        cursor = SourceCursor(self)
        while cursor.position < offset and cursor.has_more():
            cursor.advance()
        return cursor.location()


class SourceCursor:
    """Stateful position/line/column tracker over a Source.

    Reading past the end yields the empty string rather than raising.
    """

    def __init__(self, source: Source) -> None:
        self._source = source
        self._code = source.code
        self._pos = 0
        self._line = 1
        self._column = 1

    @property
    def position(self) -> int:
        return self._pos

    @property
    def source(self) -> Source:
        return self._source

    def has_more(self) -> bool:
        return self._pos < len(self._code)

    def current(self) -> str:
        """Return the character at the current position, or '' at end of input."""
        return self._char_at(self._pos)

    def peek(self) -> str:
        """Return the character one position ahead, or '' at end of input."""
        return self._char_at(self._pos + 1)

    def peek2(self) -> str:
        """Return the character two positions ahead, or '' at end of input."""
        return self._char_at(self._pos + 2)

    def advance(self) -> str:
        """Consume the current character, update line/column, and return it."""
        if self._pos >= len(self._code):
            return ""
        ch = self._code[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._column = 1
        elif ch == "\t":
            self._column += TAB_WIDTH
        else:
            self._column += 1
        return ch

    def advance2(self) -> None:
        """Consume the current and the next character."""
        self.advance()
        self.advance()

    def location(self) -> Location:
        """Materialize the Location of the current position."""
        return Location(self._source.filename, self._line, self._column)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _char_at(self, index: int) -> str:
        if index < len(self._code):
            return self._code[index]
        return ""
