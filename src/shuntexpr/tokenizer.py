"""
Tokenizer for shuntexpr arithmetic expressions.

Tokens are read one at a time from the unconsumed remainder of the input,
so the parser only ever holds the current token and the rest of the text.
"""

from __future__ import annotations

import re
from enum import StrEnum, auto

from shuntexpr.errors import ErrorContext, ExpressionTokenError


class TokenKind(StrEnum):
    """Token types for the expression language."""

    NUMBER = auto()
    IDENT = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    CARET = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()

    # End of input
    EOF = auto()


class Token:
    """A single token from the expression tokenizer."""

    __slots__ = ("kind", "value", "pos")

    def __init__(self, kind: TokenKind, value: str, pos: int) -> None:
        self.kind = kind
        self.value = value
        self.pos = pos

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"


_SINGLE_CHAR: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "^": TokenKind.CARET,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
}

_WHITESPACE_RE = re.compile(r"\s*")
# Digits and decimal points; validity is checked at evaluation time
_NUMBER_RE = re.compile(r"[0-9.]+")
_IDENT_RE = re.compile(r"[A-Za-z0-9_]+")


def read_token(rest: str, source: str | None = None) -> tuple[Token, str]:
    """Read the next token from the unconsumed remainder of the input.

    Args:
        rest: Remaining, not yet tokenized text.
        source: Full expression text that ``rest`` is a suffix of. Only used
            to report absolute token positions; defaults to ``rest``.

    Returns:
        The token and the text that follows it.

    Raises:
        ExpressionTokenError: On an invalid character or malformed numeral.
    """
    if source is None:
        source = rest
    offset = len(source) - len(rest)

    i = _WHITESPACE_RE.match(rest).end()  # type: ignore[union-attr]
    pos = offset + i

    if i == len(rest):
        return Token(TokenKind.EOF, "", pos), ""

    c = rest[i]

    if c in _SINGLE_CHAR:
        return Token(_SINGLE_CHAR[c], c, pos), rest[i + 1 :]

    m = _NUMBER_RE.match(rest, i)
    if m:
        text = m.group(0)
        if text.count(".") > 1:
            raise ExpressionTokenError(f"Invalid number: {text}", ErrorContext(source, pos))
        return Token(TokenKind.NUMBER, text, pos), rest[m.end() :]

    m = _IDENT_RE.match(rest, i)
    if m:
        return Token(TokenKind.IDENT, m.group(0).lower(), pos), rest[m.end() :]

    raise ExpressionTokenError(f'Invalid syntax at "{c}"', ErrorContext(source, pos))


def tokenize(source: str) -> list[Token]:
    """Tokenize an expression string into a list of tokens ending with EOF."""
    tokens: list[Token] = []
    rest = source
    while True:
        tok, rest = read_token(rest, source)
        tokens.append(tok)
        if tok.kind == TokenKind.EOF:
            return tokens
