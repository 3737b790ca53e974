"""Parse tree definitions for arithmetic expressions and regular expressions.

Trees are immutable and built bottom-up by the grammars. Source spans are
carried for diagnostics only and take no part in equality.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from combinator.source import Span

# ── Arithmetic operands ─────────────────────────────────────────


@dataclass(frozen=True)
class Identifier:
    name: str
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class NumberLit:
    value: int
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Negate:
    operand: Operand


@dataclass(frozen=True)
class Paren:
    expr: Expression


Operand = Union[Identifier, NumberLit, Negate, Paren]


# ── Arithmetic tails ────────────────────────────────────────────
#
# Each precedence level is `head tail` where a tail is either an operator
# node holding the next operand and the rest of the chain, or Epsilon.
# The chain nests to the right; evaluation folds it left to right.


@dataclass(frozen=True)
class Epsilon:
    pass


@dataclass(frozen=True)
class AddTail:
    operand: Term
    rest: TermTail
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class SubTail:
    operand: Term
    rest: TermTail
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class MulTail:
    operand: Factor
    rest: FactorTail
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class DivTail:
    operand: Factor
    rest: FactorTail
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class ExpTail:
    operand: Operand
    rest: OperandTail
    span: Span | None = field(default=None, compare=False, repr=False)


TermTail = Union[AddTail, SubTail, Epsilon]
FactorTail = Union[MulTail, DivTail, Epsilon]
OperandTail = Union[ExpTail, Epsilon]
OpTail = Union[AddTail, SubTail, MulTail, DivTail, ExpTail]


# ── Arithmetic precedence levels ────────────────────────────────


@dataclass(frozen=True)
class Factor:
    head: Operand
    tail: OperandTail


@dataclass(frozen=True)
class Term:
    head: Factor
    tail: FactorTail


@dataclass(frozen=True)
class Expression:
    head: Term
    tail: TermTail


ArithNode = Union[Expression, Term, Factor, Operand, OpTail, Epsilon]


# ── Regular expressions ─────────────────────────────────────────


@dataclass(frozen=True)
class CharNode:
    char: str


@dataclass(frozen=True)
class Concat:
    left: Regex
    right: Regex


@dataclass(frozen=True)
class Alternation:
    left: Regex
    right: Regex


@dataclass(frozen=True)
class Repeat:
    node: Regex


@dataclass(frozen=True)
class Group:
    node: Regex


Regex = Union[CharNode, Concat, Alternation, Repeat, Group]
