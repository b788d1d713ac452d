"""
Recursive descent parser for the calcexpr expression language.

Works on token index ranges: a parenthesised range is handed back to a
fresh descent using the matching ParenBlock, and the result is wrapped in
a ``Block`` node.

Grammar (precedence low to high):
    addition    → multiply (("+"|"-") multiply)*
    multiply    → power (("*"|"/") power)*
    power       → unary ("^" unary)*      (folded right-associatively)
    unary       → ("+"|"-")* primary
    primary     → NUMBER | IDENT | "(" addition ")"

Sign runs and power chains are collected in loops, so only parentheses
recurse. Every node records its depth in the tree; a tree deeper than
``max_depth`` is rejected before any evaluator walks it.
"""

from __future__ import annotations

import logging

from calcexpr.core.config import DEFAULT_CONFIG, CalcConfig
from calcexpr.core.errors import ExpressionSyntaxError, SourceError, attach_source
from calcexpr.core.expression_lang.lexer import Token, TokenKind, lex
from calcexpr.core.expression_lang.parentheses import ParenBlock, parenthesize
from calcexpr.core.expression_lang.syntax_checker import check
from calcexpr.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    Block,
    Expr,
    Literal,
    UnaryExpr,
    UnaryOp,
    Variable,
)

logger = logging.getLogger(__name__)

_ADDITIVE: dict[TokenKind, BinaryOp] = {
    TokenKind.PLUS: BinaryOp.ADD,
    TokenKind.MINUS: BinaryOp.SUB,
}
_MULTIPLICATIVE: dict[TokenKind, BinaryOp] = {
    TokenKind.STAR: BinaryOp.MUL,
    TokenKind.SLASH: BinaryOp.DIV,
}
_SIGNS: dict[TokenKind, UnaryOp] = {
    TokenKind.PLUS: UnaryOp.POS,
    TokenKind.MINUS: UnaryOp.NEG,
}


def parse_number(text: str) -> int | float:
    """Parse NUMBER token text: int for integer text, float for decimal text."""
    if "." in text:
        return float(text)
    return int(text)


class _Parser:
    """Recursive descent over ``tokens[pos:end]``."""

    def __init__(
        self,
        tokens: list[Token],
        blocks: dict[int, ParenBlock],
        start: int,
        end: int,
        max_depth: int | None = None,
        depths: dict[int, int] | None = None,
    ) -> None:
        self.tokens = tokens
        self.blocks = blocks
        self.pos = start
        self.end = end
        self.max_depth = max_depth
        # id(node) -> depth of the subtree rooted at node, shared with inner parsers
        self.depths = depths if depths is not None else {}

    @property
    def current(self) -> Token | None:
        if self.pos < self.end:
            return self.tokens[self.pos]
        return None

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def match(self, kinds: dict[TokenKind, BinaryOp] | dict[TokenKind, UnaryOp]) -> Token | None:
        tok = self.current
        if tok is not None and tok.kind in kinds:
            return self.advance()
        return None

    def error_pos(self) -> int:
        """Source index for errors at the current position."""
        tok = self.current
        if tok is not None:
            return tok.pos
        if self.end == 0:
            return 0
        last = self.tokens[self.end - 1]
        return last.pos + len(last.value)

    def track(self, node: Expr, pos: int, *children: Expr) -> Expr:
        """Record the depth of ``node`` and enforce ``max_depth``.

        Args:
            node: Freshly built node.
            pos: Source index blamed if the node is too deep.
            children: The node's direct children, already tracked.

        Raises:
            ExpressionSyntaxError: If the node sits deeper than ``max_depth``.
        """
        depth = 1 + max((self.depths[id(child)] for child in children), default=0)
        if self.max_depth is not None and depth > self.max_depth:
            raise ExpressionSyntaxError(
                f"Expression nests deeper than {self.max_depth} levels", pos
            )
        self.depths[id(node)] = depth
        return node

    # -- Grammar rules --

    def parse_range(self) -> Expr:
        """Parse the whole range, rejecting leftover tokens."""
        if self.pos >= self.end:
            raise ExpressionSyntaxError("Empty expression", self.error_pos())
        expr = self.parse_addition()
        tok = self.current
        if tok is not None:
            raise ExpressionSyntaxError(
                f"Unexpected token after expression: {tok.value!r}",
                tok.pos,
            )
        return expr

    def parse_addition(self) -> Expr:
        """multiply (('+' | '-') multiply)*"""
        left = self.parse_multiply()
        while tok := self.match(_ADDITIVE):
            right = self.parse_multiply()
            node = BinaryExpr(op=_ADDITIVE[tok.kind], left=left, right=right)
            left = self.track(node, tok.pos, left, right)
        return left

    def parse_multiply(self) -> Expr:
        """power (('*' | '/') power)*"""
        left = self.parse_power()
        while tok := self.match(_MULTIPLICATIVE):
            right = self.parse_power()
            node = BinaryExpr(op=_MULTIPLICATIVE[tok.kind], left=left, right=right)
            left = self.track(node, tok.pos, left, right)
        return left

    def parse_power(self) -> Expr:
        """unary ('^' unary)*  -- right-associative"""
        operands = [self.parse_unary()]
        carets: list[Token] = []
        while (tok := self.current) is not None and tok.kind == TokenKind.CARET:
            carets.append(self.advance())
            operands.append(self.parse_unary())

        expr = operands.pop()
        for tok in reversed(carets):
            base = operands.pop()
            node = BinaryExpr(op=BinaryOp.POW, left=base, right=expr)
            expr = self.track(node, tok.pos, base, expr)
        return expr

    def parse_unary(self) -> Expr:
        """('+' | '-')* primary"""
        signs: list[Token] = []
        while tok := self.match(_SIGNS):
            signs.append(tok)

        expr = self.parse_primary()
        for tok in reversed(signs):
            node = UnaryExpr(op=_SIGNS[tok.kind], operand=expr)
            expr = self.track(node, tok.pos, expr)
        return expr

    def parse_primary(self) -> Expr:
        """NUMBER | IDENT | '(' addition ')'"""
        tok = self.current
        if tok is None:
            raise ExpressionSyntaxError("Unexpected end of expression", self.error_pos())

        if tok.kind == TokenKind.NUMBER:
            self.advance()
            return self.track(Literal(value=parse_number(tok.value)), tok.pos)

        if tok.kind == TokenKind.IDENT:
            self.advance()
            return self.track(Variable(name=tok.value), tok.pos)

        if tok.kind == TokenKind.LPAREN:
            return self._parse_block()

        raise ExpressionSyntaxError(
            f"Unexpected token: {tok.kind} ({tok.value!r})",
            tok.pos,
        )

    def _parse_block(self) -> Expr:
        """Parse the range of the ParenBlock opening at the current token."""
        opening = self.tokens[self.pos]
        block = self.blocks.get(self.pos)
        if block is None or block.end is None or block.end > self.end:
            raise ExpressionSyntaxError("Unmatched '('", opening.pos)

        inner = _Parser(
            self.tokens,
            self.blocks,
            block.start + 1,
            block.end - 1,
            max_depth=self.max_depth,
            depths=self.depths,
        )
        child = inner.parse_range()
        self.pos = block.end
        return self.track(Block(child=child, level=block.level), opening.pos, child)


def parse(
    tokens: list[Token],
    blocks: list[ParenBlock],
    max_depth: int | None = None,
) -> Expr:
    """Build the AST for a checked token list.

    Args:
        tokens: Checked token list.
        blocks: Output of ``parenthesize(tokens)``.
        max_depth: Deepest accepted tree; None for no limit.

    Returns:
        Root node covering the full token range.

    Raises:
        ExpressionSyntaxError: On a malformed range, leftover tokens or a
            tree deeper than ``max_depth``.
    """
    by_start = {block.start: block for block in blocks}
    return _Parser(tokens, by_start, 0, len(tokens), max_depth=max_depth).parse_range()


def parse_expr(source: str, config: CalcConfig | None = None) -> tuple[Expr, list[str]]:
    """Run the front end of the pipeline on an expression string.

    lex → check → parenthesize → parse

    Args:
        source: Expression string (e.g., "x + y * 2")
        config: Optional limits; defaults to ``DEFAULT_CONFIG``.

    Returns:
        The AST root and the variable names in first-appearance order.

    Raises:
        LexError: If tokenization fails.
        ExpressionSyntaxError: If the tokens are malformed or nest too deeply.
        UnbalancedParenError: If a parenthesis has no partner.
    """
    cfg = config or DEFAULT_CONFIG
    try:
        tokens, unknowns = lex(source, max_length=cfg.max_expression_length)
        check(tokens)
        blocks = parenthesize(tokens, max_depth=cfg.max_nesting_depth)
        tree = parse(tokens, blocks, max_depth=cfg.max_tree_depth)
    except SourceError as e:
        attach_source(e, source)
        raise

    logger.debug(f"Parsed {source!r} ({len(tokens)} tokens, {len(blocks)} blocks)")
    return tree, unknowns
