"""Input cursor and span tracking for parsers and diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple


class Location(NamedTuple):
    """A 1-based row/column position."""

    row: int
    col: int

    def __str__(self) -> str:
        return f"{self.row}:{self.col}"


@dataclass(frozen=True)
class Span:
    """A range within a source text."""

    file: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    @classmethod
    def between(cls, start: Location, end: Location, file: str = "<input>") -> Span:
        return cls(file, start.row, start.col, end.row, end.col)

    def __str__(self) -> str:
        return f"{self.file}:{self.start_line}:{self.start_col}"


@dataclass(frozen=True, eq=False)
class Cursor:
    """Immutable view over the unconsumed part of a source text.

    Advancing never mutates a cursor; it returns a new one.
    """

    text: str
    offset: int = 0
    row: int = 1
    col: int = 1

    @classmethod
    def start(cls, text: str) -> Cursor:
        return cls(text)

    @property
    def location(self) -> Location:
        return Location(self.row, self.col)

    @property
    def remaining(self) -> str:
        return self.text[self.offset:]

    @property
    def at_end(self) -> bool:
        return self.offset >= len(self.text)

    def advance(self) -> tuple[str, Cursor] | None:
        """Consume one character. Returns None at end of input."""
        if self.at_end:
            return None
        ch = self.text[self.offset]
        if ch == "\n":
            row, col = self.row + 1, 1
        else:
            row, col = self.row, self.col + 1
        return ch, Cursor(self.text, self.offset + 1, row, col)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cursor):
            return NotImplemented
        return (
            self.row == other.row
            and self.col == other.col
            and self.remaining == other.remaining
        )

    def __hash__(self) -> int:
        return hash((self.row, self.col, self.remaining))

    def __repr__(self) -> str:
        return f"Cursor({self.row}:{self.col}, {self.remaining!r})"
