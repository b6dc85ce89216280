"""Tests for the shuntexpr evaluator."""

from __future__ import annotations

import math
from typing import Any

import pytest

from shuntexpr.builtins import FunctionSpec
from shuntexpr.errors import ErrorKind, ExpressionEvalError, ExpressionParseError
from shuntexpr.evaluator import evaluate
from shuntexpr.parser import parse


def parse_eval(source: str, *args: Any) -> float:
    return evaluate(parse(source), *args)


class TestEvaluatorArithmetic:
    """Arithmetic operators."""

    def test_happy_path(self) -> None:
        assert parse_eval("1 + 2") == 3

    def test_order_of_operations(self) -> None:
        assert parse_eval("5+3.12*2^4/1+3*(19-3)") == 102.92

    def test_left_associative_subtraction(self) -> None:
        assert parse_eval("1 - 2 - 3") == -4

    def test_left_associative_division(self) -> None:
        assert parse_eval("8 / 4 * 2") == 4
        assert parse_eval("64 / 4 / 2") == 8

    def test_right_associative_power(self) -> None:
        assert parse_eval("2 ^ 3 ^ 2") == 512

    def test_unary_minus(self) -> None:
        assert parse_eval("-3 + 5") == 2
        assert parse_eval("--3") == 3
        assert parse_eval("-2 ^ 2") == 4
        assert parse_eval("2 ^ -1") == 0.5

    def test_numerals(self) -> None:
        assert parse_eval(".5 + 1.") == 1.5

    def test_division_by_zero(self) -> None:
        with pytest.raises(ExpressionEvalError, match="Division by zero") as exc_info:
            parse_eval("1 / 0")
        assert exc_info.value.kind == ErrorKind.EVAL

    def test_division_by_computed_zero(self) -> None:
        with pytest.raises(ExpressionEvalError, match="Division by zero"):
            parse_eval("1 / (2 - 2)")

    def test_power_outside_reals(self) -> None:
        with pytest.raises(ExpressionEvalError, match="Cannot compute"):
            parse_eval("(-8) ^ (1 / 3)")

    def test_power_overflow(self) -> None:
        with pytest.raises(ExpressionEvalError, match="Cannot compute"):
            parse_eval("10 ^ 400")

    def test_invalid_numeral(self) -> None:
        with pytest.raises(ExpressionEvalError, match="Invalid number"):
            parse_eval(". + 1")


class TestEvaluatorVariables:
    """Variable bindings."""

    def test_variables(self) -> None:
        pi = 3.14159265358979
        tree = parse("a * pi^2")
        assert evaluate(tree, {"a": 3, "pi": pi}) == 3 * math.pow(pi, 2)

    def test_same_tree_different_bindings(self) -> None:
        tree = parse("x * 2 + y")
        assert evaluate(tree, {"x": 1, "y": 1}) == 3
        assert evaluate(tree, {"x": 10, "y": -5}) == 15

    def test_repeated_evaluation_is_stable(self) -> None:
        tree = parse("sin(x) / 3 + x ^ 0.5")
        values = {"x": 2.0}
        assert evaluate(tree, values) == evaluate(tree, values)

    def test_names_are_case_insensitive(self) -> None:
        assert parse_eval("X + y", {"x": 1, "Y": 2}) == 3

    def test_numeric_strings_are_accepted(self) -> None:
        assert parse_eval("x * 2", {"x": "2.5"}) == 5

    def test_unknown_variable_without_context(self) -> None:
        with pytest.raises(ExpressionEvalError, match='Unknown variable: "a"'):
            parse_eval("a")

    def test_unknown_variable_with_context(self) -> None:
        with pytest.raises(ExpressionEvalError, match='Unknown variable: "b"'):
            parse_eval("a + b", {"a": 1})

    def test_non_numeric_value(self) -> None:
        with pytest.raises(ExpressionEvalError, match="Invalid number: x"):
            parse_eval("x + 1", {"x": "abc"})
        with pytest.raises(ExpressionEvalError, match="Invalid number: x"):
            parse_eval("x + 1", {"x": None})
        with pytest.raises(ExpressionEvalError, match="Invalid number: x"):
            parse_eval("x + 1", {"x": float("nan")})


class TestEvaluatorFunctions:
    """Built-in and caller-supplied functions."""

    def test_builtin_variadic(self) -> None:
        assert parse_eval("max(1, 3, sin(1))") == 3
        assert parse_eval("min(4)") == 4

    def test_custom_functions(self, custom_functions: dict[str, Any]) -> None:
        assert evaluate(parse("add5(3)"), None, custom_functions) == 8
        assert evaluate(parse("fact(5)"), None, custom_functions) == 120

    def test_function_spec_instances(self) -> None:
        functions = {"double": FunctionSpec(arity=1, call=lambda a: a * 2)}
        assert parse_eval("double(21)", None, functions) == 42

    def test_variadic_custom_function(self) -> None:
        functions = {"total": {"arity": "any", "call": lambda *a: sum(a)}}
        assert parse_eval("total(1, 2, 3, 4)", None, functions) == 10
        assert parse_eval("total(1)", None, functions) == 1

    def test_builtins_shadow_custom_functions(self) -> None:
        functions = {"max": {"arity": "any", "call": lambda *a: -1}}
        assert parse_eval("max(1, 2)", None, functions) == 2

    def test_custom_function_names_are_case_insensitive(self) -> None:
        functions = {"AddOne": {"arity": 1, "call": lambda a: a + 1}}
        assert parse_eval("ADDONE(1)", None, functions) == 2

    def test_arity_mismatch(self, custom_functions: dict[str, Any]) -> None:
        with pytest.raises(
            ExpressionEvalError, match='Function "multiply3" expected 3 arguments, but got 2'
        ):
            evaluate(parse("multiply3(3, 4)"), None, custom_functions)

        with pytest.raises(
            ExpressionEvalError, match='Function "multiply3" expected 3 arguments, but got 5'
        ):
            evaluate(parse("multiply3(3, 4, 5, 6, 7)"), None, custom_functions)

        assert evaluate(parse("multiply3(3, 4, 5)"), None, custom_functions) == 60

    def test_builtin_arity_mismatch(self) -> None:
        with pytest.raises(ExpressionEvalError, match='Function "sin" expected 1 arguments'):
            parse_eval("sin(1, 2)")
        with pytest.raises(ExpressionEvalError, match='Function "pow" expected 2 arguments'):
            parse_eval("pow(2)")

    def test_unknown_function(self) -> None:
        with pytest.raises(ExpressionEvalError, match='Unknown function: "a"'):
            parse_eval("a(2)")

    def test_arguments_evaluated_left_to_right(self) -> None:
        seen: list[float] = []

        def record(a: float) -> float:
            seen.append(a)
            return a

        functions = {
            "rec": {"arity": 1, "call": record},
            "f": {"arity": 3, "call": lambda a, b, c: a - b - c},
        }
        assert parse_eval("f(rec(1), rec(2), rec(3)) + rec(4)", None, functions) == 0
        assert seen == [1, 2, 3, 4]

    def test_invalid_function_definition(self) -> None:
        functions = {"f": {"arity": "two", "call": lambda a, b: a + b}}
        with pytest.raises(ExpressionEvalError, match='Invalid function definition for "f"'):
            parse_eval("f(1, 2)", None, functions)

    def test_missing_callable(self) -> None:
        with pytest.raises(ExpressionEvalError, match="Invalid function definition"):
            parse_eval("f(1)", None, {"f": {"arity": 1}})

    def test_custom_function_errors_propagate(self) -> None:
        def boom(a: float) -> float:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            parse_eval("boom(1)", None, {"boom": {"arity": 1, "call": boom}})

    def test_builtin_domain_error(self) -> None:
        with pytest.raises(ExpressionEvalError, match='Math error in "log"'):
            parse_eval("log(0)")
        with pytest.raises(ExpressionEvalError, match='Math error in "asin"'):
            parse_eval("asin(2)")

    def test_builtin_overflow(self) -> None:
        with pytest.raises(ExpressionEvalError, match='Math error in "exp"'):
            parse_eval("exp(1000)")


class TestEvaluatorLargeExpressions:
    """Long expressions evaluate without hitting the recursion limit."""

    def test_long_sum(self) -> None:
        assert parse_eval("+".join(["1"] * 2000)) == 2000

    def test_long_product_of_calls(self) -> None:
        assert parse_eval("*".join(["max(1, 2)"] * 1000)) == 2.0**1000

    def test_long_power_chain(self) -> None:
        assert parse_eval("^".join(["1"] * 2000)) == 1

    def test_many_unary_minuses(self) -> None:
        assert parse_eval("-" * 1001 + "1") == -1
        assert parse_eval("-" * 2000 + "1") == 1

    def test_deep_parentheses_are_rejected(self) -> None:
        with pytest.raises(ExpressionParseError, match="Expression too deeply nested"):
            parse("(" * 5000 + "1" + ")" * 5000)
