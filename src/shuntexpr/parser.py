"""
Parser for shuntexpr arithmetic expressions.

Recursive descent over the grammar below, with an operand stack and an
operator stack (shunting yard) resolving operator precedence:

    expr      → primary (binary_op primary)*
    primary   → NUMBER
              | "(" expr ")"
              | "-" primary
              | IDENT ("(" arg_list ")")?
    arg_list  → expr ("," expr)*
    binary_op → "+" | "-" | "*" | "/" | "^"

Every parenthesised group and argument list is bounded by a sentinel on the
operator stack. ``^`` is right-associative; the other binary operators
associate to the left.
"""

from __future__ import annotations

import logging

from shuntexpr.ast import (
    RIGHT_ASSOCIATIVE,
    SENTINEL,
    BinaryExpr,
    BinaryOp,
    Expr,
    FuncCall,
    NumberLiteral,
    Operator,
    PendingCall,
    Sentinel,
    UnaryExpr,
    UnaryOp,
    VariableRef,
    precedence,
)
from shuntexpr.errors import ErrorContext, ExpressionParseError
from shuntexpr.tokenizer import Token, TokenKind, read_token

logger = logging.getLogger(__name__)

_BINARY_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.PLUS: BinaryOp.ADD,
    TokenKind.MINUS: BinaryOp.SUB,
    TokenKind.STAR: BinaryOp.MUL,
    TokenKind.SLASH: BinaryOp.DIV,
    TokenKind.CARET: BinaryOp.POW,
}


class _Parser:
    """Owns the token cursor and both stacks for a single parse."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.rest = source
        self.operands: list[Expr] = []
        self.operators: list[Operator] = []
        self.current, self.rest = read_token(source, source)

    def advance(self) -> Token:
        tok = self.current
        self.current, self.rest = read_token(self.rest, self.source)
        return tok

    def expect(self, kind: TokenKind) -> Token:
        tok = self.current
        if tok.kind == kind:
            return self.advance()
        if tok.kind == TokenKind.EOF:
            raise self.error("Unexpected end of input", tok)
        raise self.error(f'Unexpected "{tok.value}"', tok)

    def error(self, message: str, tok: Token) -> ExpressionParseError:
        return ExpressionParseError(message, ErrorContext(self.source, tok.pos))

    # -- Grammar rules --

    def parse(self) -> Expr:
        """Parse the whole input as one expression."""
        self.operators.append(SENTINEL)
        self.parse_expr()
        self.expect(TokenKind.EOF)
        return self.operands.pop()

    def parse_expr(self) -> None:
        """primary (binary_op primary)*, reduced down to the nearest sentinel."""
        self.parse_primary()
        while self.current.kind in _BINARY_OPS:
            self.push_binary(_BINARY_OPS[self.current.kind])
            self.advance()
            self.parse_primary()
        while not isinstance(self.operators[-1], Sentinel):
            self.reduce()

    def parse_primary(self) -> None:
        """NUMBER | '(' expr ')' | '-' primary | IDENT ['(' arg_list ')']"""
        # Prefix operators have no left operand, so nothing is reduced here
        while self.current.kind == TokenKind.MINUS:
            self.advance()
            self.operators.append(UnaryOp.NEG)

        tok = self.current

        if tok.kind == TokenKind.NUMBER:
            self.advance()
            self.operands.append(NumberLiteral(text=tok.value))
            return

        if tok.kind == TokenKind.LPAREN:
            self.advance()
            self.operators.append(SENTINEL)
            self.parse_expr()
            self.expect(TokenKind.RPAREN)
            self.operators.pop()
            return

        if tok.kind == TokenKind.IDENT:
            self.advance()
            if self.current.kind == TokenKind.LPAREN:
                self.advance()
                call = PendingCall(name=tok.value)
                self.operators.append(call)
                self.operators.append(SENTINEL)
                self.parse_arg_list(call)
                self.expect(TokenKind.RPAREN)
                self.operators.pop()
            else:
                self.operands.append(VariableRef(name=tok.value))
            return

        if tok.kind == TokenKind.EOF:
            raise self.error("Unexpected end of input", tok)
        raise self.error(f'Invalid syntax at "{tok.value}"', tok)

    def parse_arg_list(self, call: PendingCall) -> None:
        """expr (',' expr)*"""
        self.parse_expr()
        call.arity += 1
        while self.current.kind == TokenKind.COMMA:
            self.advance()
            self.parse_expr()
            call.arity += 1

    # -- Operator stack --

    def push_binary(self, op: BinaryOp) -> None:
        """Reduce stacked operators that bind at least as tightly, then push."""
        prec = precedence(op)
        while True:
            top_prec = precedence(self.operators[-1])
            if top_prec > prec or (top_prec == prec and op not in RIGHT_ASSOCIATIVE):
                self.reduce()
            else:
                break
        self.operators.append(op)

    def reduce(self) -> None:
        """Pop one operator, combine it with its operands, push the result."""
        op = self.operators.pop()

        if isinstance(op, BinaryOp):
            right = self.operands.pop()
            left = self.operands.pop()
            self.operands.append(BinaryExpr(op=op, left=left, right=right))
        elif isinstance(op, UnaryOp):
            self.operands.append(UnaryExpr(op=op, operand=self.operands.pop()))
        elif isinstance(op, PendingCall):
            split = len(self.operands) - op.arity
            args = tuple(self.operands[split:])
            del self.operands[split:]
            self.operands.append(FuncCall(name=op.name, args=args))
        else:
            raise AssertionError(f"Cannot reduce {op!r}")


def parse(source: str) -> Expr:
    """Parse an expression string into an AST.

    Args:
        source: Expression string (e.g., "5 + 3.12 * 2^4")

    Returns:
        Root node of the parsed expression.

    Raises:
        ExpressionTokenError: If the input contains an invalid character or
            a malformed numeral.
        ExpressionParseError: If the expression is invalid or its groups
            and calls nest deeper than the interpreter's recursion limit.
    """
    parser = _Parser(source)
    try:
        expr = parser.parse()
    except RecursionError:
        raise parser.error("Expression too deeply nested", parser.current) from None
    logger.debug("Parsed %r (%s)", source, type(expr).__name__)
    return expr
