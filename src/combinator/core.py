"""Parser abstraction and the combinators that compose parsers.

A parser is anything with a ``parse_at(cursor)`` method returning either
``(token, cursor)`` on success or ``None`` when the input does not match.
There is exactly one failure kind. Choice between alternatives is ordered
and left-biased; each alternative starts from the same cursor.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, Iterable, Protocol, TypeVar, overload

from combinator.source import Cursor

T = TypeVar("T")
U = TypeVar("U")
V = TypeVar("V")
T_co = TypeVar("T_co", covariant=True)


class Parseable(Protocol[T_co]):
    """Structural type of everything that can attempt a parse."""

    def parse_at(self, cursor: Cursor) -> tuple[T_co, Cursor] | None:
        ...


class Parser(Generic[T]):
    """Base class giving parsers the combinator methods and operator sugar.

    ``a | b`` is ordered choice, ``a >> b`` keeps the right token and
    ``a << b`` keeps the left token.
    """

    def parse_at(self, cursor: Cursor) -> tuple[T, Cursor] | None:
        raise NotImplementedError

    @overload
    def parse(self, source: str) -> tuple[T, str] | None: ...

    @overload
    def parse(self, source: Cursor) -> tuple[T, Cursor] | None: ...

    def parse(self, source: str | Cursor) -> tuple[T, Any] | None:
        """Run the parser.

        Given a plain string the input starts at row 1, column 1 and the
        remainder comes back as a string; given a cursor, a cursor comes back.
        """
        if isinstance(source, Cursor):
            return self.parse_at(source)
        result = self.parse_at(Cursor.start(source))
        if result is None:
            return None
        token, rest = result
        return token, rest.remaining

    # ── Combinator methods ──────────────────────────────────────

    def map(self, f: Callable[[T], U]) -> Parser[U]:
        return fmap(self, f)

    def bind(self, f: Callable[[T], Parseable[U]]) -> Parser[U]:
        return bind(self, f)

    def then(self, other: Parseable[U]) -> Parser[U]:
        return then(self, other)

    def or_else(self, other: Parseable[T]) -> Parser[T]:
        return or_else(self, other)

    def repeat_many(self) -> Parser[tuple[T, ...]]:
        return repeat_many(self)

    def repeat_one_or_more(self) -> Parser[tuple[T, ...]]:
        return repeat_one_or_more(self)

    def optional(self, default: T) -> Parser[T]:
        return optional(self, default)

    def void(self) -> Parser[None]:
        return void(self)

    def token(self) -> Parser[T]:
        from combinator.primitives import token

        return token(self)

    def __or__(self, other: Parseable[T]) -> Parser[T]:
        return or_else(self, other)

    def __rshift__(self, other: Parseable[U]) -> Parser[U]:
        return discard_left(self, other)

    def __lshift__(self, other: Parseable[Any]) -> Parser[T]:
        return discard_right(self, other)


class ParserOf(Parser[T]):
    """A parser backed by a plain function of a cursor."""

    def __init__(
        self,
        run: Callable[[Cursor], tuple[T, Cursor] | None],
        name: str = "parser",
    ) -> None:
        self._run = run
        self.name = name

    def parse_at(self, cursor: Cursor) -> tuple[T, Cursor] | None:
        return self._run(cursor)

    def __repr__(self) -> str:
        return f"<ParserOf {self.name}>"


class LazyParser(Parser[T]):
    """A parser produced on demand by a zero-argument thunk.

    The thunk is called on every parse, so a grammar rule may refer to a
    rule that does not exist yet when the referring rule is built.
    """

    def __init__(self, thunk: Callable[[], Parseable[T]]) -> None:
        self._thunk = thunk

    def parse_at(self, cursor: Cursor) -> tuple[T, Cursor] | None:
        return self._thunk().parse_at(cursor)

    def __repr__(self) -> str:
        return "<LazyParser>"


def lift(parser: Parseable[T]) -> Parser[T]:
    """Adapt any object with ``parse_at`` into a full ``Parser``."""
    if isinstance(parser, Parser):
        return parser
    return ParserOf(parser.parse_at, type(parser).__name__)


# ── Trivial parsers ─────────────────────────────────────────────


def success(value: T) -> Parser[T]:
    """Always succeed with ``value``, consuming nothing."""
    return ParserOf(lambda cursor: (value, cursor), "success")


def failure() -> Parser[Any]:
    """Always fail."""
    return ParserOf(lambda cursor: None, "failure")


# ── Combinators ─────────────────────────────────────────────────


def fmap(parser: Parseable[T], f: Callable[[T], U]) -> Parser[U]:
    """Transform the token of a successful parse."""

    def run(cursor: Cursor) -> tuple[U, Cursor] | None:
        result = parser.parse_at(cursor)
        if result is None:
            return None
        token, rest = result
        return f(token), rest

    return ParserOf(run, "map")


def bind(parser: Parseable[T], f: Callable[[T], Parseable[U]]) -> Parser[U]:
    """Choose the next parser from the token of the previous one."""

    def run(cursor: Cursor) -> tuple[U, Cursor] | None:
        result = parser.parse_at(cursor)
        if result is None:
            return None
        token, rest = result
        return f(token).parse_at(rest)

    return ParserOf(run, "bind")


def then(first: Parseable[Any], second: Parseable[U]) -> Parser[U]:
    return bind(first, lambda _: second)


def sequence(
    first: Parseable[T],
    second: Parseable[U],
    combine: Callable[[T, U], V],
) -> Parser[V]:
    """Run two parsers one after the other and combine their tokens.

    If the second parser fails the whole sequence fails; the caller still
    holds its original cursor and may try something else from there.
    """

    def run(cursor: Cursor) -> tuple[V, Cursor] | None:
        left = first.parse_at(cursor)
        if left is None:
            return None
        a, rest = left
        right = second.parse_at(rest)
        if right is None:
            return None
        b, rest = right
        return combine(a, b), rest

    return ParserOf(run, "sequence")


def sequence_all(
    parsers: Iterable[Parseable[Any]],
    combine: Callable[..., V],
) -> Parser[V]:
    """Run any number of parsers in order; ``combine`` gets every token."""
    parsers = list(parsers)

    def run(cursor: Cursor) -> tuple[V, Cursor] | None:
        tokens = []
        for parser in parsers:
            result = parser.parse_at(cursor)
            if result is None:
                return None
            token, cursor = result
            tokens.append(token)
        return combine(*tokens), cursor

    return ParserOf(run, "sequence_all")


def discard_left(first: Parseable[Any], second: Parseable[U]) -> Parser[U]:
    return sequence(first, second, lambda a, b: b)


def discard_right(first: Parseable[T], second: Parseable[Any]) -> Parser[T]:
    return sequence(first, second, lambda a, b: a)


def or_else(first: Parseable[T], second: Parseable[T]) -> Parser[T]:
    """Ordered choice. Both branches start from the same cursor."""

    def run(cursor: Cursor) -> tuple[T, Cursor] | None:
        result = first.parse_at(cursor)
        if result is not None:
            return result
        return second.parse_at(cursor)

    return ParserOf(run, "or_else")


def choice(*parsers: Parseable[T]) -> Parser[T]:
    """Ordered choice over several alternatives; the first success wins."""
    if not parsers:
        return failure()

    def run(cursor: Cursor) -> tuple[T, Cursor] | None:
        for parser in parsers:
            result = parser.parse_at(cursor)
            if result is not None:
                return result
        return None

    return ParserOf(run, "choice")


def lazy(thunk: Callable[[], Parseable[T]]) -> LazyParser[T]:
    return LazyParser(thunk)


class InfiniteRepetitionError(Exception):
    """A repeated parser succeeded without consuming any input."""


def repeat_one_or_more(parser: Parseable[T]) -> Parser[tuple[T, ...]]:
    """One or more applications of ``parser``, tokens collected in order.

    Repetition is greedy and runs until ``parser`` fails. ``parser`` must
    consume input whenever it succeeds; a success that consumes nothing
    raises ``InfiniteRepetitionError``.
    """

    def run(cursor: Cursor) -> tuple[tuple[T, ...], Cursor] | None:
        tokens: list[T] = []
        while True:
            result = parser.parse_at(cursor)
            if result is None:
                break
            token, rest = result
            if rest.offset == cursor.offset:
                raise InfiniteRepetitionError(
                    f"repeated parser consumed nothing at {cursor.location}"
                )
            tokens.append(token)
            cursor = rest
        if not tokens:
            return None
        return tuple(tokens), cursor

    return ParserOf(run, "repeat_one_or_more")


def repeat_many(parser: Parseable[T]) -> Parser[tuple[T, ...]]:
    """Zero or more applications of ``parser``."""
    return or_else(repeat_one_or_more(parser), success(()))


def optional(parser: Parseable[T], default: T) -> Parser[T]:
    return or_else(parser, success(default))


def optional_string(parser: Parseable[str]) -> Parser[str]:
    return optional(parser, "")


def void(parser: Parseable[Any]) -> Parser[None]:
    return fmap(parser, lambda _: None)
