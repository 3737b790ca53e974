"""Recursive-descent grammar for integer arithmetic.

    expression   := term term_tail
    term_tail    := '+' term term_tail | '-' term term_tail | epsilon
    term         := factor factor_tail
    factor_tail  := '*' factor factor_tail | '/' factor factor_tail | epsilon
    factor       := operand operand_tail
    operand_tail := '^' operand operand_tail | epsilon
    operand      := '(' expression ')' | natural | identifier
                  | '-' operand | '+' operand

Rules that refer to rules defined further down go through ``lazy``. Tails
are read as a flat run of ``op head`` steps and then nested to the right,
so long operator chains do not deepen the parse.
"""

from __future__ import annotations

from typing import Callable

from combinator.ast_nodes import (
    AddTail,
    DivTail,
    Epsilon,
    ExpTail,
    Expression,
    Factor,
    Identifier,
    MulTail,
    Negate,
    NumberLit,
    Operand,
    OpTail,
    Paren,
    SubTail,
    Term,
)
from combinator.core import (
    Parseable,
    Parser,
    choice,
    discard_left,
    discard_right,
    fmap,
    lazy,
    repeat_many,
    sequence,
)
from combinator.primitives import ident, nat, space, symbol, token, with_location
from combinator.source import Cursor, Span

_lparen = symbol("(")
_rparen = symbol(")")
_plus = symbol("+")
_minus = symbol("-")
_times = symbol("*")
_divide = symbol("/")
_power = symbol("^")


def _located(parser: Parseable, build: Callable) -> Parser:
    return fmap(
        with_location(parser),
        lambda r: build(r[0], span=Span.between(r[1], r[2])),
    )


def _step(op: Parser, head: Parseable, node: type) -> Parser:
    """``op head`` as ``(node, head, span)``, spanning ``op head``."""
    return fmap(
        with_location(discard_left(op, head)),
        lambda r: (node, r[0], Span.between(r[1], r[2])),
    )


def _chain(steps: tuple) -> OpTail | Epsilon:
    """Nest ``op head`` steps to the right, ending in Epsilon."""
    rest: OpTail | Epsilon = Epsilon()
    for node, head, span in reversed(steps):
        rest = node(head, rest, span=span)
    return rest


def _tail(*steps: Parser) -> Parser:
    """``(op head)*`` built into a right-nested tail chain."""
    return fmap(repeat_many(choice(*steps)), _chain)


number = token(_located(nat, NumberLit))
variable = token(_located(ident, Identifier))

operand: Parser[Operand] = choice(
    fmap(discard_right(discard_left(_lparen, lazy(lambda: expression)), _rparen), Paren),
    number,
    variable,
    fmap(discard_left(_minus, lazy(lambda: operand)), Negate),
    discard_left(_plus, lazy(lambda: operand)),
)

operand_tail = _tail(_step(_power, operand, ExpTail))

factor: Parser[Factor] = sequence(operand, operand_tail, Factor)

factor_tail = _tail(
    _step(_times, factor, MulTail),
    _step(_divide, factor, DivTail),
)

term: Parser[Term] = sequence(factor, factor_tail, Term)

term_tail = _tail(
    _step(_plus, term, AddTail),
    _step(_minus, term, SubTail),
)

expression: Parser[Expression] = sequence(term, term_tail, Expression)

# Whole input, surrounding whitespace allowed.
program: Parser[Expression] = discard_left(space, expression)


def parse_expression_at(text: str) -> tuple[Expression | None, Cursor]:
    """Parse all of ``text``.

    Returns the tree (or None) and the cursor where parsing stopped, which
    is the start of the input on outright failure.
    """
    start = Cursor.start(text)
    result = program.parse_at(start)
    if result is None:
        return None, start
    tree, rest = result
    if not rest.at_end:
        return None, rest
    return tree, rest


def parse_expression(text: str) -> Expression | None:
    return parse_expression_at(text)[0]
