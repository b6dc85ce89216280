"""
Expression AST for shuntexpr.

The tree returned by ``parse`` is built only from the frozen node models in
``Expr``. ``Sentinel`` and ``PendingCall`` live on the parser's operator
stack and never appear in a returned tree.

Precedence (higher binds tighter):
- unary ``-``: 6
- ``^``: 5, ``/``: 4, ``*``: 3, ``-``: 2, ``+``: 1
- function call: infinite
- sentinel: negative infinite
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary arithmetic operators."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "^"


class UnaryOp(StrEnum):
    """Prefix operators."""

    NEG = "-"


_BINARY_PRECEDENCE: dict[BinaryOp, int] = {
    BinaryOp.ADD: 1,
    BinaryOp.SUB: 2,
    BinaryOp.MUL: 3,
    BinaryOp.DIV: 4,
    BinaryOp.POW: 5,
}

_UNARY_PRECEDENCE: dict[UnaryOp, int] = {
    UnaryOp.NEG: 6,
}

RIGHT_ASSOCIATIVE: frozenset[BinaryOp] = frozenset({BinaryOp.POW})


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class NumberLiteral(BaseModel):
    """A numeral, kept as source text until evaluation."""

    text: str = Field(description="Numeral as written, e.g. '3.12'")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.text


class VariableRef(BaseModel):
    """Reference to a caller-supplied variable."""

    name: str = Field(description="Lower-cased variable name")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class UnaryExpr(BaseModel):
    """Unary operation: op operand."""

    op: UnaryOp
    operand: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.op.value}{self.operand}"


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    op: BinaryOp
    left: Expr
    right: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.left} {self.op.value} {self.right})"


class FuncCall(BaseModel):
    """
    Function call: name(arg1, arg2, ...).

    Arguments are kept in source order. The name is resolved against the
    built-in table first, then against caller-supplied functions.
    """

    name: str = Field(description="Lower-cased function name")
    args: tuple[Expr, ...] = Field(default_factory=tuple, description="Arguments")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        args_str = ", ".join(str(a) for a in self.args)
        return f"{self.name}({args_str})"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = NumberLiteral | VariableRef | UnaryExpr | BinaryExpr | FuncCall

# Rebuild models for recursive forward references
UnaryExpr.model_rebuild()
BinaryExpr.model_rebuild()
FuncCall.model_rebuild()


# ---------------------------------------------------------------------------
# Parser-only operator stack entries
# ---------------------------------------------------------------------------


class Sentinel:
    """Precedence floor bounding a parenthesised group or argument list."""

    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Sentinel)

    def __hash__(self) -> int:
        return hash(Sentinel)

    def __repr__(self) -> str:
        return "SENTINEL"


SENTINEL = Sentinel()


@dataclass
class PendingCall:
    """A function call whose arguments are still being parsed."""

    name: str
    arity: int = 0


Operator = BinaryOp | UnaryOp | PendingCall | Sentinel


def precedence(op: Operator | Expr) -> float:
    """Binding strength of an operator, or of the operator at a node's root.

    Operands (numbers, variables) and calls bind tightest.
    """
    if isinstance(op, Sentinel):
        return -math.inf
    if isinstance(op, BinaryOp):
        return _BINARY_PRECEDENCE[op]
    if isinstance(op, UnaryOp):
        return _UNARY_PRECEDENCE[op]
    if isinstance(op, (BinaryExpr, UnaryExpr)):
        return precedence(op.op)
    if isinstance(op, (PendingCall, FuncCall, NumberLiteral, VariableRef)):
        return math.inf
    raise TypeError(f"Not an operator or expression: {op!r}")


def format_tree(expr: Expr, depth: int = 0) -> str:
    """Render a tree one node per line, children indented four spaces."""
    padding = "    " * depth
    if isinstance(expr, BinaryExpr):
        return (
            f"{padding}{expr.op.value}\n"
            + format_tree(expr.left, depth + 1)
            + format_tree(expr.right, depth + 1)
        )
    if isinstance(expr, UnaryExpr):
        return f"{padding}{expr.op.value}\n" + format_tree(expr.operand, depth + 1)
    if isinstance(expr, FuncCall):
        return f"{padding}{expr.name}\n" + "".join(format_tree(a, depth + 1) for a in expr.args)
    return f"{padding}{expr}\n"
