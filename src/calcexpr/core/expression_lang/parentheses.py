"""
Parenthesis resolver for the calcexpr expression language.

Scans the token chain once and records, for every opening parenthesis,
where its block starts, where it ends and at which nesting level it sits.
The parser uses these blocks to recurse into parenthesised ranges.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from calcexpr.core.errors import ExpressionSyntaxError, UnbalancedParenError
from calcexpr.core.expression_lang.lexer import Token, TokenKind

logger = logging.getLogger(__name__)


@dataclass
class ParenBlock:
    """
    A matched pair of parentheses.

    Attributes:
        start: Token index of the opening parenthesis
        end: Token index one past the matching closing parenthesis
            (None while the block is still open during the scan)
        level: Nesting depth, 1 for an outermost pair
    """

    start: int
    end: int | None
    level: int


def parenthesize(tokens: list[Token], max_depth: int | None = None) -> list[ParenBlock]:
    """Match every parenthesis in ``tokens``.

    A closing parenthesis always closes the innermost block still open.

    Args:
        tokens: Checked token list.
        max_depth: Optional upper bound on the nesting level.

    Returns:
        One block per opening parenthesis, in opening order.

    Raises:
        UnbalancedParenError: On a closing parenthesis with nothing open, or
            an opening parenthesis still open at the end of input.
        ExpressionSyntaxError: When nesting exceeds ``max_depth``.
    """
    blocks: list[ParenBlock] = []
    open_blocks: list[ParenBlock] = []
    level = 0

    for i, tok in enumerate(tokens):
        if tok.kind == TokenKind.LPAREN:
            level += 1
            if max_depth is not None and level > max_depth:
                raise ExpressionSyntaxError(
                    f"Parentheses nested deeper than {max_depth} levels", tok.pos
                )
            block = ParenBlock(start=i, end=None, level=level)
            blocks.append(block)
            open_blocks.append(block)
        elif tok.kind == TokenKind.RPAREN:
            level -= 1
            if level < 0:
                raise UnbalancedParenError(
                    f"Bad parentheses syntax at index {i}: closing parenthesis without a match",
                    tok.pos,
                    i,
                )
            open_blocks.pop().end = i + 1

    if open_blocks:
        first = open_blocks[0]
        tok = tokens[first.start]
        raise UnbalancedParenError(
            f"Bad parentheses syntax at index {first.start}: parenthesis is never closed",
            tok.pos,
            first.start,
        )

    logger.debug(f"Resolved {len(blocks)} parenthesis blocks")
    return blocks
