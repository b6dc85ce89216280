"""
Expression evaluator for shuntexpr.

Evaluates expression AST nodes against optional variable and function
bindings. Pure evaluation: no I/O, no side effects, the tree is never
modified. Does NOT use Python's eval().
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any, NamedTuple

from pydantic import ValidationError

from shuntexpr.ast import (
    BinaryExpr,
    BinaryOp,
    Expr,
    FuncCall,
    NumberLiteral,
    UnaryExpr,
    UnaryOp,
    VariableRef,
)
from shuntexpr.builtins import BUILTIN_FUNCTIONS, FunctionSpec
from shuntexpr.errors import ExpressionEvalError

logger = logging.getLogger(__name__)

Variables = Mapping[str, Any]
Functions = Mapping[str, FunctionSpec | Mapping[str, Any]]


def evaluate(
    expr: Expr,
    variables: Variables | None = None,
    functions: Functions | None = None,
) -> float:
    """Evaluate an expression tree.

    Args:
        expr: Parsed expression AST.
        variables: Optional name -> numeric value. Names are matched
            case-insensitively, like identifiers in the source.
        functions: Optional name -> ``FunctionSpec`` (or a mapping with
            ``arity`` and ``call`` keys). Built-in functions take precedence
            over these.

    Returns:
        The computed value.

    Raises:
        ExpressionEvalError: If evaluation fails.
    """
    scope = _Scope(variables, functions)
    return _interpret(expr, scope)


class _Scope:
    """Caller bindings for one evaluate() call, keyed by lower-cased name."""

    __slots__ = ("variables", "functions")

    def __init__(self, variables: Variables | None, functions: Functions | None) -> None:
        self.variables = {k.lower(): v for k, v in (variables or {}).items()}
        self.functions = {k.lower(): v for k, v in (functions or {}).items()}


class _Apply(NamedTuple):
    """Work-stack entry: combine the already computed operand values of ``node``."""

    node: UnaryExpr | BinaryExpr | FuncCall
    function: FunctionSpec | None = None
    is_builtin: bool = False


def _interpret(expr: Expr, scope: _Scope) -> float:
    """Evaluate ``expr`` in post-order with an explicit work stack.

    Operands are pushed so that they are popped, and therefore evaluated,
    left to right. Tree depth is not limited by the interpreter's recursion
    limit.
    """
    work: list[Expr | _Apply] = [expr]
    values: list[float] = []

    while work:
        item = work.pop()

        if isinstance(item, _Apply):
            values.append(_apply(item, values))
        elif isinstance(item, NumberLiteral):
            values.append(_to_number(item.text, item.text))
        elif isinstance(item, VariableRef):
            values.append(_interpret_variable(item, scope))
        elif isinstance(item, UnaryExpr):
            work.append(_Apply(item))
            work.append(item.operand)
        elif isinstance(item, BinaryExpr):
            work.append(_Apply(item))
            work.append(item.right)
            work.append(item.left)
        elif isinstance(item, FuncCall):
            spec, is_builtin = _resolve_function(item, scope)
            work.append(_Apply(item, spec, is_builtin))
            work.extend(reversed(item.args))
        else:
            raise ExpressionEvalError(f"Unknown expression type: {type(item).__name__}")

    return values.pop()


def _apply(item: _Apply, values: list[float]) -> float:
    """Pop the operand values of ``item.node`` and compute its result."""
    node = item.node
    if isinstance(node, UnaryExpr):
        return _apply_unary(node.op, values.pop())
    if isinstance(node, BinaryExpr):
        right = values.pop()
        left = values.pop()
        return _apply_binary(node.op, left, right)

    split = len(values) - len(node.args)
    args = values[split:]
    del values[split:]
    return _call(node.name, item.function, item.is_builtin, args)  # type: ignore[arg-type]


def _to_number(value: Any, label: str) -> float:
    """Convert a numeral or bound value to float."""
    try:
        num = float(value)
    except (TypeError, ValueError):
        raise ExpressionEvalError(f"Invalid number: {label}") from None
    if math.isnan(num):
        raise ExpressionEvalError(f"Invalid number: {label}")
    return num


def _interpret_variable(expr: VariableRef, scope: _Scope) -> float:
    if expr.name not in scope.variables:
        raise ExpressionEvalError(f'Unknown variable: "{expr.name}"')
    return _to_number(scope.variables[expr.name], expr.name)


def _apply_unary(op: UnaryOp, val: float) -> float:
    if op == UnaryOp.NEG:
        return -val
    raise ExpressionEvalError(f"Unknown unary op: {op}")


def _apply_binary(op: BinaryOp, left: float, right: float) -> float:
    if op == BinaryOp.ADD:
        return left + right
    if op == BinaryOp.SUB:
        return left - right
    if op == BinaryOp.MUL:
        return left * right
    if op == BinaryOp.DIV:
        if right == 0:
            raise ExpressionEvalError("Division by zero")
        return left / right
    if op == BinaryOp.POW:
        try:
            return math.pow(left, right)
        except (ValueError, OverflowError) as e:
            raise ExpressionEvalError(f"Cannot compute {left} ^ {right}: {e}") from e

    raise ExpressionEvalError(f"Unknown binary op: {op}")


def _resolve_function(expr: FuncCall, scope: _Scope) -> tuple[FunctionSpec, bool]:
    """Find a function, built-ins first, and check its arity.

    Returns (spec, is_builtin).
    """
    name = expr.name
    builtin = BUILTIN_FUNCTIONS.get(name)
    if builtin is not None:
        if name in scope.functions:
            logger.debug("Built-in %s() shadows caller-supplied function", name)
        spec, is_builtin = builtin, True
    elif name not in scope.functions:
        raise ExpressionEvalError(f'Unknown function: "{name}"')
    else:
        spec, is_builtin = _function_spec(name, scope.functions[name]), False

    if not spec.accepts(len(expr.args)):
        raise ExpressionEvalError(
            f'Function "{name}" expected {spec.arity} arguments, but got {len(expr.args)}'
        )
    return spec, is_builtin


def _function_spec(name: str, definition: Any) -> FunctionSpec:
    if isinstance(definition, FunctionSpec):
        return definition
    try:
        return FunctionSpec.model_validate(definition)
    except ValidationError as e:
        raise ExpressionEvalError(f'Invalid function definition for "{name}": {e}') from e


def _call(name: str, spec: FunctionSpec, is_builtin: bool, args: list[float]) -> float:
    """Invoke a resolved function on evaluated arguments."""
    if not is_builtin:
        return spec.call(*args)
    try:
        return spec.call(*args)
    except (ValueError, OverflowError) as e:
        raise ExpressionEvalError(f'Math error in "{name}": {e}') from e
