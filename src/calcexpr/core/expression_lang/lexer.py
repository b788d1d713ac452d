"""
Lexer for the calcexpr expression language.

Converts an expression string into a sequence of typed tokens and collects
the distinct variable names it references.
"""

from __future__ import annotations

import logging
import re
from enum import StrEnum, auto

from calcexpr.core.errors import LexError

logger = logging.getLogger(__name__)


class TokenKind(StrEnum):
    """Token types for the expression language."""

    # Operands
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


OPERATOR_KINDS = frozenset(
    {TokenKind.PLUS, TokenKind.MINUS, TokenKind.STAR, TokenKind.SLASH, TokenKind.CARET}
)
SIGN_KINDS = frozenset({TokenKind.PLUS, TokenKind.MINUS})
OPERAND_KINDS = frozenset({TokenKind.NUMBER, TokenKind.IDENT})


class Token:
    """A single token from the lexer. Immutable once produced."""

    __slots__ = ("kind", "value", "pos")

    kind: TokenKind
    value: str
    pos: int

    def __init__(self, kind: TokenKind, value: str, pos: int) -> None:
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "value", value)
        object.__setattr__(self, "pos", pos)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"Token is immutable; cannot set {name!r}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return (self.kind, self.value, self.pos) == (other.kind, other.value, other.pos)

    def __hash__(self) -> int:
        return hash((self.kind, self.value, self.pos))

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"

    @property
    def is_operator(self) -> bool:
        return self.kind in OPERATOR_KINDS


_SINGLE_MAP: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "^": TokenKind.CARET,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}

# Number pattern: int or decimal
_NUMBER_RE = re.compile(r"\d+(\.\d+)?")
# Identifier: letter or underscore followed by alphanumerics/underscores
_IDENT_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")


def lex(source: str, max_length: int | None = None) -> tuple[list[Token], list[str]]:
    """Split an expression into tokens.

    Args:
        source: Expression string (e.g., "x + y * 2")
        max_length: Optional upper bound on ``len(source)``.

    Returns:
        The token list and the variable names in first-appearance order,
        without duplicates.

    Raises:
        LexError: On a character no token class accepts, or when the
            source exceeds ``max_length``.
    """
    if max_length is not None and len(source) > max_length:
        raise LexError(
            f"Expression is {len(source)} characters long; the limit is {max_length}",
            max_length,
        )

    tokens: list[Token] = []
    unknowns: dict[str, None] = {}
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        # Skip whitespace
        if c in " \t\n\r":
            i += 1
            continue

        if c.isdigit():
            m = _NUMBER_RE.match(source, i)
            if m is None:
                raise LexError(f"Unexpected character: {c!r}", i)
            tokens.append(Token(TokenKind.NUMBER, m.group(0), i))
            i = m.end()
            continue

        if c.isalpha() or c == "_":
            m = _IDENT_RE.match(source, i)
            if m is None:
                raise LexError(f"Unexpected character: {c!r}", i)
            name = m.group(0)
            tokens.append(Token(TokenKind.IDENT, name, i))
            unknowns.setdefault(name)
            i = m.end()
            continue

        if c in _SINGLE_MAP:
            tokens.append(Token(_SINGLE_MAP[c], c, i))
            i += 1
            continue

        raise LexError(f"Unexpected character: {c!r}", i)

    logger.debug(f"Lexed {len(tokens)} tokens, unknowns={list(unknowns)}")
    return tokens, list(unknowns)
