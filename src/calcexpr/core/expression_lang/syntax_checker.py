"""
Syntax checker for the calcexpr expression language.

Validates adjacent-token rules on the lexer output. Nesting depth is not
tracked here; the parenthesis resolver owns balance checking.

Rules:
    - the expression is non-empty
    - ``*``, ``/`` and ``^`` follow an operand or ``)``
    - ``+`` and ``-`` after an operator, after ``(`` or at the start are signs
    - operands and ``(`` never directly follow an operand or ``)``
    - ``)`` never directly follows an operator or ``(``
    - the expression does not end with an operator or ``(``
    - a leading ``)`` is an unbalanced parenthesis
"""

from __future__ import annotations

from calcexpr.core.errors import ExpressionSyntaxError, UnbalancedParenError
from calcexpr.core.expression_lang.lexer import (
    OPERAND_KINDS,
    OPERATOR_KINDS,
    SIGN_KINDS,
    Token,
    TokenKind,
)

# Tokens after which an operand is complete
_OPERAND_END = OPERAND_KINDS | {TokenKind.RPAREN}


def check(tokens: list[Token]) -> list[Token]:
    """Validate token adjacency.

    Args:
        tokens: Lexer output.

    Returns:
        ``tokens`` unchanged.

    Raises:
        ExpressionSyntaxError: At the source index of the first offending token.
    """
    if not tokens:
        raise ExpressionSyntaxError("Empty expression", 0)

    if tokens[0].kind == TokenKind.RPAREN:
        raise UnbalancedParenError("Closing parenthesis without a match", tokens[0].pos, 0)

    prev: Token | None = None
    for tok in tokens:
        _check_pair(prev, tok)
        prev = tok

    last = tokens[-1]
    if last.kind in OPERATOR_KINDS:
        raise ExpressionSyntaxError(f"Expression ends with operator {last.value!r}", last.pos)
    if last.kind == TokenKind.LPAREN:
        raise ExpressionSyntaxError("Expression ends with '('", last.pos)

    return tokens


def _check_pair(prev: Token | None, tok: Token) -> None:
    """Check that ``tok`` may follow ``prev`` (None at expression start)."""
    after_operand = prev is not None and prev.kind in _OPERAND_END

    if tok.kind in OPERAND_KINDS or tok.kind == TokenKind.LPAREN:
        if after_operand:
            assert prev is not None
            raise ExpressionSyntaxError(
                f"Missing operator between {prev.value!r} and {tok.value!r}",
                tok.pos,
            )
        return

    if tok.kind in SIGN_KINDS:
        # Binary after an operand, unary sign anywhere else
        return

    if tok.kind in OPERATOR_KINDS:
        if not after_operand:
            where = "at start of expression" if prev is None else f"after {prev.value!r}"
            raise ExpressionSyntaxError(f"Unexpected operator {tok.value!r} {where}", tok.pos)
        return

    if tok.kind == TokenKind.RPAREN:
        assert prev is not None, "leading ')' is rejected by check()"
        if prev.kind == TokenKind.LPAREN:
            raise ExpressionSyntaxError("Empty parentheses", prev.pos)
        if prev.kind in OPERATOR_KINDS:
            raise ExpressionSyntaxError(
                f"Operator {prev.value!r} before closing parenthesis", prev.pos
            )
        return

    raise ExpressionSyntaxError(f"Unknown token kind: {tok.kind}", tok.pos)
