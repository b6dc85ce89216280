"""
shuntexpr - arithmetic expression parser and evaluator.

Tokenizer, shunting-yard parser, and tree-walking evaluator for
single arithmetic expressions with variables and functions.

Usage:
    from shuntexpr import evaluate, parse

    expr = parse("a * pi^2")
    result = evaluate(expr, {"a": 3, "pi": 3.14159})
"""

from __future__ import annotations

from shuntexpr._version import get_version
from shuntexpr.ast import (
    BinaryExpr,
    BinaryOp,
    Expr,
    FuncCall,
    NumberLiteral,
    UnaryExpr,
    UnaryOp,
    VariableRef,
    format_tree,
    precedence,
)
from shuntexpr.builtins import BUILTIN_FUNCTIONS, VARIADIC, FunctionSpec
from shuntexpr.errors import (
    ErrorKind,
    ExpressionError,
    ExpressionEvalError,
    ExpressionParseError,
    ExpressionTokenError,
)
from shuntexpr.evaluator import evaluate
from shuntexpr.parser import parse
from shuntexpr.tokenizer import Token, TokenKind, read_token, tokenize

__version__ = get_version()

__all__ = [
    "BUILTIN_FUNCTIONS",
    "BinaryExpr",
    "BinaryOp",
    "ErrorKind",
    "Expr",
    "ExpressionError",
    "ExpressionEvalError",
    "ExpressionParseError",
    "ExpressionTokenError",
    "FuncCall",
    "FunctionSpec",
    "NumberLiteral",
    "Token",
    "TokenKind",
    "UnaryExpr",
    "UnaryOp",
    "VARIADIC",
    "VariableRef",
    "__version__",
    "evaluate",
    "format_tree",
    "parse",
    "precedence",
    "read_token",
    "tokenize",
]
