"""Primitive parsers: single characters, literals, classifiers and tokens.

Character classes are ASCII only.
"""

from __future__ import annotations

from typing import Callable

from combinator.core import (
    Parseable,
    Parser,
    ParserOf,
    T,
    discard_left,
    discard_right,
    fmap,
    repeat_many,
    repeat_one_or_more,
    sequence,
    sequence_all,
    success,
    void,
)
from combinator.source import Cursor, Location

# ── Character predicates ────────────────────────────────────────


def is_upper(c: str) -> bool:
    return "A" <= c <= "Z"


def is_lower(c: str) -> bool:
    return "a" <= c <= "z"


def is_letter(c: str) -> bool:
    return is_upper(c) or is_lower(c)


def is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def is_alphanum(c: str) -> bool:
    return is_letter(c) or is_digit(c)


def is_space(c: str) -> bool:
    return c in " \t\n\r"


# ── Single characters ───────────────────────────────────────────

item: Parser[str] = ParserOf(lambda cursor: cursor.advance(), "item")


def satisfy(predicate: Callable[[str], bool]) -> Parser[str]:
    """Consume one character if ``predicate`` holds for it."""

    def run(cursor: Cursor) -> tuple[str, Cursor] | None:
        step = cursor.advance()
        if step is None or not predicate(step[0]):
            return None
        return step

    return ParserOf(run, "satisfy")


def char(c: str) -> Parser[str]:
    return satisfy(lambda x: x == c)


def literal(s: str) -> Parser[str]:
    """Match ``s`` exactly. The empty string always matches."""
    if not s:
        return success("")

    def run(cursor: Cursor) -> tuple[str, Cursor] | None:
        rest = cursor
        for expected in s:
            step = rest.advance()
            if step is None or step[0] != expected:
                return None
            rest = step[1]
        return s, rest

    return ParserOf(run, f"literal {s!r}")


letter = satisfy(is_letter)
digit = satisfy(is_digit)
upper = satisfy(is_upper)
lower = satisfy(is_lower)
alphanum = satisfy(is_alphanum)

# ── Whitespace and tokens ───────────────────────────────────────

space: Parser[None] = void(repeat_many(satisfy(is_space)))


def token(parser: Parseable[T]) -> Parser[T]:
    """Skip whitespace on both sides of ``parser``."""
    return discard_right(discard_left(space, parser), space)


def symbol(s: str) -> Parser[str]:
    return token(literal(s))


ident: Parser[str] = sequence(letter, repeat_many(alphanum), lambda c, cs: c + "".join(cs))
nat: Parser[int] = fmap(repeat_one_or_more(digit), lambda ds: int("".join(ds)))

identifier = token(ident)
natural = token(nat)

# ── Position ────────────────────────────────────────────────────

current_row: Parser[int] = ParserOf(lambda cursor: (cursor.row, cursor), "current_row")
current_col: Parser[int] = ParserOf(lambda cursor: (cursor.col, cursor), "current_col")
current_location: Parser[Location] = ParserOf(
    lambda cursor: (cursor.location, cursor), "current_location"
)


def with_location(parser: Parseable[T]) -> Parser[tuple[T, Location, Location]]:
    """Pair the token with the locations before and after it."""
    return sequence_all(
        [current_location, parser, current_location],
        lambda start, tok, end: (tok, start, end),
    )
