"""Shared test helpers for the combinator test suite."""

from __future__ import annotations

from combinator.ast_nodes import Epsilon, Expression, Factor, NumberLit, Term
from combinator.evaluator import evaluate_source


def evaluates(source: str, store: dict[str, int] | None = None, **kwargs) -> int:
    """Evaluate source, asserting no diagnostics. Returns the value."""
    result = evaluate_source(source, store, **kwargs)
    assert result.ok, [f"{d.code}: {d.message}" for d in result.diagnostics]
    return result.value


def eval_fails(source: str, error_code: str, store: dict[str, int] | None = None, **kwargs):
    """Evaluate source, asserting it fails with the given diagnostic code."""
    result = evaluate_source(source, store, **kwargs)
    assert not result.ok, f"Expected {error_code} but got value {result.value}"
    matching = [d for d in result.diagnostics if d.code == error_code]
    assert matching, (
        f"Expected error {error_code} but got: "
        f"{[f'{d.code}: {d.message}' for d in result.diagnostics]}"
    )
    return matching[0]


def number_term(n: int) -> Term:
    """The tree of a bare integer at term level."""
    return Term(Factor(NumberLit(n), Epsilon()), Epsilon())


def number_expression(n: int) -> Expression:
    return Expression(number_term(n), Epsilon())
