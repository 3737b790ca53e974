"""Regular expressions: grammar, parse tree, and compilation into parsers.

    reg_expr   := reg_term ('|' reg_term)*
    reg_term   := reg_factor reg_factor*
    reg_factor := reg_basic '*'?
    reg_basic  := '(' reg_expr ')' | any character except ( ) * |

Sequences and alternatives nest to the right in the tree. A compiled regex
is an ordinary parser over strings whose success means the pattern matched
a prefix of the input. Repetition is greedy and never gives characters
back, and alternation takes the first branch that matches.
"""

from __future__ import annotations

from typing import Callable

from combinator.ast_nodes import Alternation, CharNode, Concat, Group, Regex, Repeat
from combinator.core import (
    Parser,
    choice,
    discard_left,
    discard_right,
    fmap,
    lazy,
    optional,
    or_else,
    repeat_many,
    sequence,
    sequence_all,
)
from combinator.errors import CompileError, error
from combinator.primitives import char, satisfy
from combinator.source import Cursor, Location, Span

SPECIAL_CHARS = frozenset("()*|")


def _nest_right(build: type) -> Callable[[Regex, tuple[Regex, ...]], Regex]:
    """Fold ``first, rest...`` into ``build(first, build(...))``."""

    def fold(first: Regex, rest: tuple[Regex, ...]) -> Regex:
        nodes = (first,) + rest
        tree = nodes[-1]
        for node in reversed(nodes[:-1]):
            tree = build(node, tree)
        return tree

    return fold


reg_char: Parser[Regex] = fmap(satisfy(lambda c: c not in SPECIAL_CHARS), CharNode)

reg_basic: Parser[Regex] = or_else(
    fmap(discard_right(discard_left(char("("), lazy(lambda: reg_expr)), char(")")), Group),
    reg_char,
)

reg_factor: Parser[Regex] = sequence(
    reg_basic,
    optional(char("*"), None),
    lambda basic, star: Repeat(basic) if star is not None else basic,
)

reg_term: Parser[Regex] = sequence(reg_factor, repeat_many(reg_factor), _nest_right(Concat))

reg_expr: Parser[Regex] = sequence(
    reg_term,
    repeat_many(discard_left(char("|"), reg_term)),
    _nest_right(Alternation),
)


def parse_regex_at(pattern: str) -> tuple[Regex | None, Cursor]:
    start = Cursor.start(pattern)
    result = reg_expr.parse_at(start)
    if result is None:
        return None, start
    tree, rest = result
    if not rest.at_end:
        return None, rest
    return tree, rest


def parse_regex(pattern: str) -> Regex | None:
    """Parse the whole pattern into a tree, or None if it is malformed."""
    return parse_regex_at(pattern)[0]


def _spine(node: Regex, kind: type) -> list[Regex]:
    # Right-nested chain of ``kind`` nodes, flattened.
    parts = []
    while isinstance(node, kind):
        parts.append(node.left)
        node = node.right
    parts.append(node)
    return parts


def matches_empty(node: Regex) -> bool:
    """Whether ``node`` can match without consuming any characters."""
    if isinstance(node, CharNode):
        return False
    if isinstance(node, Concat):
        return all(matches_empty(part) for part in _spine(node, Concat))
    if isinstance(node, Alternation):
        return any(matches_empty(part) for part in _spine(node, Alternation))
    if isinstance(node, Repeat):
        return True
    if isinstance(node, Group):
        return matches_empty(node.node)
    raise TypeError(f"not a regex node: {type(node).__name__}")


def _empty_repeat(node: Regex) -> Repeat | None:
    """The first starred sub-pattern whose body can match nothing."""
    if isinstance(node, Repeat):
        if matches_empty(node.node):
            return node
        return _empty_repeat(node.node)
    if isinstance(node, Group):
        return _empty_repeat(node.node)
    if isinstance(node, (Concat, Alternation)):
        for part in _spine(node, type(node)):
            found = _empty_repeat(part)
            if found is not None:
                return found
    return None


def compile_regex(node: Regex) -> Parser[str]:
    """Interpret a regex tree as a parser returning the matched text.

    Starring a sub-pattern that can match nothing, such as ``(a*)*``,
    yields a parser that raises ``InfiniteRepetitionError`` when run.
    """
    if isinstance(node, CharNode):
        return char(node.char)
    if isinstance(node, Concat):
        parts = [compile_regex(part) for part in _spine(node, Concat)]
        return sequence_all(parts, lambda *matched: "".join(matched))
    if isinstance(node, Alternation):
        return choice(*(compile_regex(part) for part in _spine(node, Alternation)))
    if isinstance(node, Repeat):
        return fmap(repeat_many(compile_regex(node.node)), "".join)
    if isinstance(node, Group):
        return compile_regex(node.node)
    raise TypeError(f"not a regex node: {type(node).__name__}")


def compile_pattern(pattern: str) -> Parser[str]:
    """Parse and compile ``pattern``. Raises CompileError if it is malformed.

    E200 is a syntax error, E201 a pattern nested too deeply to handle, and
    E202 a star over a sub-pattern that can match nothing.
    """
    try:
        tree, stopped = parse_regex_at(pattern)
        empty = _empty_repeat(tree) if tree is not None else None
        compiled = compile_regex(tree) if tree is not None else None
    except RecursionError:
        diag = error("E201", "regular expression is nested too deeply")
        raise CompileError([diag]) from None

    if compiled is None:
        at = stopped.location
        span = Span.between(at, Location(at.row, at.col + 1), file="<pattern>")
        diag = error(
            "E200",
            f"malformed regular expression {pattern!r}",
            span,
            "unexpected character" if not stopped.at_end else "pattern ends here",
        )
        if not pattern:
            diag.notes.append("the empty pattern is not a regular expression")
        raise CompileError([diag])

    if empty is not None:
        diag = error("E202", f"{pattern!r} repeats a sub-pattern that can match nothing")
        diag.notes.append("a star over an empty match never stops repeating")
        raise CompileError([diag])

    return compiled


def match(pattern: str, text: str) -> tuple[str, str] | None:
    """Match ``pattern`` against a prefix of ``text``.

    Returns the matched text and the remainder, or None.
    """
    return compile_pattern(pattern).parse(text)
