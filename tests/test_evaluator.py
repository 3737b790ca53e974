"""Tests for arithmetic evaluation."""

from __future__ import annotations

import pytest

from combinator.arithmetic import parse_expression
from combinator.ast_nodes import Epsilon, Negate, NumberLit
from combinator.config import EvaluationConfig, UnboundPolicy
from combinator.errors import Severity
from combinator.evaluator import Evaluator, evaluate, evaluate_source
from tests.helpers import eval_fails, evaluates


class TestArithmetic:
    def test_parenthesized_product(self):
        assert evaluates("(8 + 4) * 12") == 144

    def test_multiplication_before_addition(self):
        assert evaluates("3 + 52 * 4") == 211

    def test_power(self):
        assert evaluates("2 ^ 3") == 8

    def test_parens_override_precedence(self):
        assert evaluates("(3 + 52) * 4") == 220

    def test_single_number(self):
        assert evaluates("7") == 7


class TestAssociativity:
    def test_subtraction_folds_left(self):
        assert evaluates("10 - 3 - 2") == 5

    def test_division_folds_left(self):
        assert evaluates("100 / 10 / 5") == 2

    def test_mixed_additive(self):
        assert evaluates("1 - 2 + 3") == 2

    def test_mixed_multiplicative(self):
        assert evaluates("8 / 2 * 4") == 16

    def test_power_folds_left(self):
        assert evaluates("2 ^ 3 ^ 2") == 64


class TestUnaryAndDivision:
    def test_negation(self):
        assert evaluates("-3 + 5") == 2
        assert evaluates("2 * -3") == -6

    def test_double_negation(self):
        assert evaluates("- - 4") == 4

    def test_unary_plus(self):
        assert evaluates("+7") == 7

    def test_division_truncates_toward_zero(self):
        assert evaluates("7 / 2") == 3
        assert evaluates("-7 / 2") == -3
        assert evaluates("7 / -2") == -3
        assert evaluates("-7 / -2") == 3

    def test_negative_exponent_truncates(self):
        assert evaluates("2 ^ -1") == 0

    def test_power_of_negative_base(self):
        assert evaluates("-2 ^ 3") == -8


class TestIdentifiers:
    def test_lookup(self):
        assert evaluates("x * y + 1", {"x": 3, "y": 4}) == 13

    def test_negative_binding(self):
        assert evaluates("x - 1", {"x": -5}) == -6

    def test_unbound_fails_by_default(self):
        diag = eval_fails("z + 1", "E101")
        assert diag.severity == Severity.ERROR
        assert "'z'" in diag.message
        assert diag.labels[0].span.start_col == 1

    def test_unbound_zero_policy(self):
        config = EvaluationConfig(unbound=UnboundPolicy.ZERO)
        assert evaluates("z + 1", config=config) == 1

    def test_evaluator_object(self):
        result = Evaluator({"a": 2}).evaluate(parse_expression("a ^ 10"))
        assert result.ok
        assert result.value == 1024


class TestEvaluationErrors:
    def test_division_by_zero(self):
        eval_fails("1 / 0", "E102")

    def test_division_by_computed_zero(self):
        eval_fails("5 / (2 - 2)", "E102")

    def test_zero_to_negative_power(self):
        eval_fails("0 ^ -1", "E102")

    def test_result_overflows_default_width(self):
        eval_fails("9223372036854775807 + 1", "E103")

    def test_literal_overflows_default_width(self):
        eval_fails("9223372036854775808", "E103")

    def test_width_check_disabled(self):
        config = EvaluationConfig(integer_bits=0)
        assert evaluates("2 ^ 64", config=config) == 2 ** 64

    def test_power_overflows_default_width(self):
        eval_fails("2 ^ 64", "E103")

    def test_unrepresentable_power(self):
        eval_fails("10 ^ 400", "E104", config=EvaluationConfig(integer_bits=0))

    def test_store_value_too_wide(self):
        eval_fails("x", "E103", {"x": 2 ** 70})

    def test_first_error_stops_evaluation(self):
        result = evaluate_source("a / 0", {})
        assert [d.code for d in result.diagnostics] == ["E101"]

    def test_division_by_zero_span(self):
        diag = eval_fails("8 / 0", "E102")
        span = diag.labels[0].span
        assert (span.start_line, span.start_col) == (1, 3)


class TestParseErrors:
    def test_trailing_operator(self):
        diag = eval_fails("1 +", "E100")
        assert diag.labels[0].span.start_col == 3
        assert diag.notes == ["parsing stopped at 1:3"]

    def test_empty_source(self):
        diag = eval_fails("", "E100")
        assert diag.labels[0].message == "expected an expression"

    def test_garbage(self):
        eval_fails("1 + * 2", "E100")


class TestDirectEvaluation:
    def test_evaluate_tree(self):
        result = evaluate(parse_expression("n * 2"), {"n": 21})
        assert result.ok
        assert result.value == 42
        assert result.diagnostics == []

    def test_tail_nodes_are_not_evaluable_alone(self):
        with pytest.raises(TypeError):
            Evaluator().evaluate(Epsilon())


class TestLargeInputs:
    def test_long_additive_chain(self):
        assert evaluates(" + ".join(["1"] * 3000)) == 3000

    def test_long_mixed_chain(self):
        assert evaluates(" * ".join(["2"] * 40) + " - 1" * 2000) == 2 ** 40 - 2000

    def test_long_whitespace_run(self):
        assert evaluates("1" + " " * 5000 + "+ 2") == 3

    def test_long_identifier(self):
        name = "x" * 4000
        assert evaluates(f"{name} * 2", {name: 21}) == 42

    def test_moderate_nesting(self):
        assert evaluates("(" * 20 + "7" + ")" * 20) == 7

    def test_deep_nesting_is_a_diagnostic(self):
        diag = eval_fails("(" * 500 + "1" + ")" * 500, "E105")
        assert diag.notes

    def test_deep_tree_is_a_diagnostic(self):
        tree = NumberLit(1)
        for _ in range(5000):
            tree = Negate(tree)
        result = Evaluator().evaluate(tree)
        assert not result.ok
        assert result.diagnostics[0].code == "E105"


class TestIntegerWidthEdges:
    def test_minimum_literal(self):
        assert evaluates("-9223372036854775808") == -(2 ** 63)

    def test_maximum_literal(self):
        assert evaluates("9223372036854775807") == 2 ** 63 - 1

    def test_one_below_minimum(self):
        eval_fails("-9223372036854775809", "E103")

    def test_negating_the_minimum_overflows(self):
        eval_fails("- -9223372036854775808", "E103")
