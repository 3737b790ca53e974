"""Tree-walking evaluator for arithmetic parse trees.

Each precedence level holds a head and a right-nested chain of operator
tails. The evaluator starts from the head's value and folds the chain left
to right, so ``10 - 3 - 2`` is ``(10 - 3) - 2`` even though the tree nests
the other way.

Problems are reported as diagnostics on an ``EvalResult``; evaluation never
raises for bad input. Nesting too deep for the interpreter stack is reported
as E105.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import NoReturn

from combinator.arithmetic import parse_expression_at
from combinator.ast_nodes import (
    AddTail,
    ArithNode,
    DivTail,
    Epsilon,
    ExpTail,
    Expression,
    Factor,
    Identifier,
    MulTail,
    Negate,
    NumberLit,
    OpTail,
    Paren,
    SubTail,
    Term,
)
from combinator.config import EvaluationConfig, UnboundPolicy
from combinator.errors import Diagnostic, error
from combinator.source import Location, Span


@dataclass
class EvalResult:
    """Outcome of an evaluation."""

    ok: bool
    value: int | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)


class EvaluationError(Exception):
    """Stops a walk once a diagnostic has been recorded."""

    def __init__(self, diagnostic: Diagnostic) -> None:
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)


class Evaluator:
    """Evaluates arithmetic trees against a name -> integer store."""

    def __init__(
        self,
        store: Mapping[str, int] | None = None,
        *,
        unbound: UnboundPolicy = UnboundPolicy.ERROR,
        integer_bits: int = 64,
    ) -> None:
        self.store = dict(store or {})
        self.unbound = unbound
        self.integer_bits = integer_bits

    @classmethod
    def from_config(
        cls, config: EvaluationConfig, store: Mapping[str, int] | None = None,
    ) -> Evaluator:
        return cls(store, unbound=config.unbound, integer_bits=config.integer_bits)

    # ── Public API ──────────────────────────────────────────────

    def evaluate(self, tree: ArithNode) -> EvalResult:
        try:
            value = self._eval(tree)
        except EvaluationError as e:
            return EvalResult(ok=False, diagnostics=[e.diagnostic])
        except RecursionError:
            return EvalResult(ok=False, diagnostics=[_too_deep()])
        return EvalResult(ok=True, value=value)

    # ── Error helpers ───────────────────────────────────────────

    def _fail(
        self, code: str, message: str, span: Span | None, label: str = "",
    ) -> NoReturn:
        raise EvaluationError(error(code, message, span, label))

    def _checked(self, value: int, span: Span | None) -> int:
        if self.integer_bits:
            limit = 1 << (self.integer_bits - 1)
            if not -limit <= value < limit:
                self._fail(
                    "E103",
                    f"value {value} does not fit in {self.integer_bits} bits",
                    span,
                    "overflows here",
                )
        return value

    # ── Walk ────────────────────────────────────────────────────

    def _eval(self, node: ArithNode) -> int:
        if isinstance(node, NumberLit):
            return self._checked(node.value, node.span)
        if isinstance(node, Identifier):
            return self._lookup(node)
        if isinstance(node, Negate) and isinstance(node.operand, NumberLit):
            # Checked after the sign so the minimum value can be written.
            return self._checked(-node.operand.value, node.operand.span)
        if isinstance(node, Negate):
            return self._checked(-self._eval(node.operand), None)
        if isinstance(node, Paren):
            return self._eval(node.expr)
        if isinstance(node, (Expression, Term, Factor)):
            return self._fold(self._eval(node.head), node.tail)
        raise TypeError(f"cannot evaluate {type(node).__name__} on its own")

    def _fold(self, accumulator: int, tail: OpTail | Epsilon) -> int:
        while not isinstance(tail, Epsilon):
            rhs = self._eval(tail.operand)
            accumulator = self._checked(self._apply(tail, accumulator, rhs), tail.span)
            tail = tail.rest
        return accumulator

    def _apply(self, tail: OpTail, lhs: int, rhs: int) -> int:
        if isinstance(tail, AddTail):
            return lhs + rhs
        if isinstance(tail, SubTail):
            return lhs - rhs
        if isinstance(tail, MulTail):
            return lhs * rhs
        if isinstance(tail, DivTail):
            if rhs == 0:
                self._fail("E102", "division by zero", tail.span, "divisor is zero")
            return _truncating_div(lhs, rhs)
        if isinstance(tail, ExpTail):
            return self._power(lhs, rhs, tail.span)
        raise TypeError(f"unknown operator node {type(tail).__name__}")

    def _power(self, base: int, exponent: int, span: Span | None) -> int:
        try:
            return int(float(base) ** float(exponent))
        except ZeroDivisionError:
            self._fail(
                "E102",
                "zero cannot be raised to a negative power",
                span,
                "negative exponent of zero",
            )
        except OverflowError:
            self._fail("E104", f"{base} ^ {exponent} is not representable", span)

    def _lookup(self, node: Identifier) -> int:
        if node.name in self.store:
            return self._checked(self.store[node.name], node.span)
        if self.unbound == UnboundPolicy.ZERO:
            return 0
        self._fail(
            "E101",
            f"unbound identifier '{node.name}'",
            node.span,
            "not defined",
        )


def _truncating_div(lhs: int, rhs: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(lhs) // abs(rhs)
    return quotient if (lhs < 0) == (rhs < 0) else -quotient


def _too_deep() -> Diagnostic:
    diag = error("E105", "expression is nested too deeply")
    diag.notes.append("reduce the nesting of parentheses or unary signs")
    return diag


def evaluate(
    tree: ArithNode,
    store: Mapping[str, int] | None = None,
    *,
    config: EvaluationConfig | None = None,
) -> EvalResult:
    return Evaluator.from_config(config or EvaluationConfig(), store).evaluate(tree)


def evaluate_source(
    text: str,
    store: Mapping[str, int] | None = None,
    *,
    config: EvaluationConfig | None = None,
) -> EvalResult:
    """Parse and evaluate ``text``. A parse failure becomes diagnostic E100."""
    try:
        tree, stopped = parse_expression_at(text)
    except RecursionError:
        return EvalResult(ok=False, diagnostics=[_too_deep()])
    if tree is None:
        at = stopped.location
        span = Span.between(at, Location(at.row, at.col + 1))
        diag = error(
            "E100",
            "not a valid arithmetic expression",
            span,
            "expected an expression" if stopped.offset == 0 else "unexpected input",
        )
        if stopped.offset:
            diag.notes.append(f"parsing stopped at {at}")
        return EvalResult(ok=False, diagnostics=[diag])
    return evaluate(tree, store, config=config)
