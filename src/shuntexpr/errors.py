"""
Error types for shuntexpr tokenizing, parsing, and evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ErrorKind(StrEnum):
    """Which stage of the pipeline rejected the input."""

    LEX = "lex"
    SYNTAX = "syntax"
    EVAL = "eval"


@dataclass(frozen=True)
class ErrorContext:
    """
    Source location of a tokenizer or parser error.

    Attributes:
        source: The full expression text being parsed
        pos: Zero-based character offset of the offending token
    """

    source: str
    pos: int

    def format(self) -> str:
        """
        Format the source with a marker under the error position.

        Returns:
            Two lines: the source text and a caret under ``pos``.
        """
        pos = min(max(self.pos, 0), len(self.source))
        return f"{self.source}\n{' ' * pos}^"


class ExpressionError(Exception):
    """Base exception for all shuntexpr errors."""

    kind: ErrorKind

    def __init__(self, message: str, context: ErrorContext | None = None) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    @property
    def pos(self) -> int | None:
        return self.context.pos if self.context else None

    def describe(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.message}\n{self.context.format()}"
        return self.message


class ExpressionTokenError(ExpressionError):
    """
    Raised when the input cannot be split into tokens.

    Examples:
    - A character outside the expression alphabet
    - A numeral with more than one decimal point
    """

    kind = ErrorKind.LEX


class ExpressionParseError(ExpressionError):
    """
    Raised when the token stream does not match the grammar.

    Examples:
    - A token that cannot start an operand
    - Unexpected token where an operator or closing delimiter was expected
    - Input ending in the middle of an expression
    - Unmatched closing parenthesis
    """

    kind = ErrorKind.SYNTAX


class ExpressionEvalError(ExpressionError):
    """
    Raised when a parsed expression cannot be evaluated.

    Examples:
    - Unknown variable or function
    - Wrong number of arguments for a fixed-arity function
    - Division by zero
    - Numeral or variable value that is not a number
    """

    kind = ErrorKind.EVAL
