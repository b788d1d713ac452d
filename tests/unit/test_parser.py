"""Tests for the calcexpr parser."""

from __future__ import annotations

import pytest

from calcexpr.core.errors import ExpressionSyntaxError, LexError, UnbalancedParenError
from calcexpr.core.expression_lang.parentheses import parenthesize
from calcexpr.core.expression_lang.parser import parse, parse_expr, parse_number
from calcexpr.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    Block,
    Literal,
    UnaryExpr,
    UnaryOp,
    Variable,
)


def tree_of(source: str):
    tree, _ = parse_expr(source)
    return tree


class TestParserLiterals:
    """Parser handles literals and variables."""

    def test_integer(self) -> None:
        expr = tree_of("42")
        assert isinstance(expr, Literal)
        assert expr.value == 42
        assert isinstance(expr.value, int)

    def test_decimal(self) -> None:
        expr = tree_of("3.5")
        assert isinstance(expr, Literal)
        assert expr.value == 3.5
        assert isinstance(expr.value, float)

    def test_variable(self) -> None:
        expr = tree_of("amount")
        assert expr == Variable(name="amount")

    def test_parse_number(self) -> None:
        assert parse_number("007") == 7
        assert parse_number("0.25") == 0.25


class TestParserArithmetic:
    """Parser handles arithmetic with correct precedence and associativity."""

    def test_mul_before_add(self) -> None:
        # a + b * c should be a + (b * c)
        expr = tree_of("a + b * c")
        assert isinstance(expr, BinaryExpr)
        assert expr.op == BinaryOp.ADD
        assert isinstance(expr.right, BinaryExpr)
        assert expr.right.op == BinaryOp.MUL

    def test_parentheses_override_precedence(self) -> None:
        expr = tree_of("(a + b) * c")
        assert isinstance(expr, BinaryExpr)
        assert expr.op == BinaryOp.MUL
        assert isinstance(expr.left, Block)
        assert expr.left.level == 1
        assert isinstance(expr.left.child, BinaryExpr)
        assert expr.left.child.op == BinaryOp.ADD

    def test_chained_subtraction_is_left_associative(self) -> None:
        expr = tree_of("a - b - c")
        assert isinstance(expr, BinaryExpr)
        assert expr.op == BinaryOp.SUB
        assert isinstance(expr.left, BinaryExpr)
        assert expr.right == Variable(name="c")

    def test_chained_division_is_left_associative(self) -> None:
        expr = tree_of("a / b / c")
        assert isinstance(expr, BinaryExpr)
        assert isinstance(expr.left, BinaryExpr)
        assert expr.left.op == BinaryOp.DIV

    def test_power_is_right_associative(self) -> None:
        expr = tree_of("2 ^ 3 ^ 2")
        assert isinstance(expr, BinaryExpr)
        assert expr.op == BinaryOp.POW
        assert expr.left == Literal(value=2)
        assert isinstance(expr.right, BinaryExpr)
        assert expr.right.op == BinaryOp.POW

    def test_power_before_mul(self) -> None:
        expr = tree_of("a * b ^ c")
        assert isinstance(expr, BinaryExpr)
        assert expr.op == BinaryOp.MUL
        assert isinstance(expr.right, BinaryExpr)
        assert expr.right.op == BinaryOp.POW


class TestParserUnary:
    """Unary sign binds tighter than any binary operator."""

    def test_unary_minus(self) -> None:
        expr = tree_of("-x")
        assert expr == UnaryExpr(op=UnaryOp.NEG, operand=Variable(name="x"))

    def test_unary_plus(self) -> None:
        expr = tree_of("+x")
        assert isinstance(expr, UnaryExpr)
        assert expr.op == UnaryOp.POS

    def test_sign_binds_tighter_than_power(self) -> None:
        expr = tree_of("-2 ^ 2")
        assert isinstance(expr, BinaryExpr)
        assert expr.op == BinaryOp.POW
        assert isinstance(expr.left, UnaryExpr)

    def test_negative_exponent(self) -> None:
        expr = tree_of("2 ^ -1")
        assert isinstance(expr, BinaryExpr)
        assert isinstance(expr.right, UnaryExpr)

    def test_negated_block(self) -> None:
        expr = tree_of("-(3 + 4)")
        assert isinstance(expr, UnaryExpr)
        assert isinstance(expr.operand, Block)

    def test_sign_after_binary_operator(self) -> None:
        expr = tree_of("2 - -3")
        assert isinstance(expr, BinaryExpr)
        assert expr.op == BinaryOp.SUB
        assert isinstance(expr.right, UnaryExpr)


class TestParserBlocks:
    """Parenthesised ranges become Block nodes."""

    def test_nested_levels(self) -> None:
        expr = tree_of("((x))")
        assert isinstance(expr, Block)
        assert expr.level == 1
        assert isinstance(expr.child, Block)
        assert expr.child.level == 2
        assert expr.child.child == Variable(name="x")

    def test_sibling_blocks(self) -> None:
        expr = tree_of("(a) * (b)")
        assert isinstance(expr, BinaryExpr)
        assert expr.left == Block(child=Variable(name="a"), level=1)
        assert expr.right == Block(child=Variable(name="b"), level=1)

    def test_rendering(self) -> None:
        assert str(tree_of("(a + b) * -c")) == "[([a + b]) * -c]"
        assert str(tree_of("2 ^ 3 ^ 2")) == "[2 ^ [3 ^ 2]]"


class TestParseExpr:
    """parse_expr runs the whole front end."""

    def test_returns_unknowns(self) -> None:
        _, unknowns = parse_expr("b * a + b")
        assert unknowns == ["b", "a"]

    def test_lex_error(self) -> None:
        with pytest.raises(LexError):
            parse_expr("2 $ 3")

    def test_syntax_error_carries_context(self) -> None:
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            parse_expr("2 + * 3")
        error = exc_info.value
        assert error.pos == 4
        assert error.context is not None
        assert "2 + * 3" in str(error)
        assert str(error).endswith("^")

    def test_unbalanced(self) -> None:
        with pytest.raises(UnbalancedParenError):
            parse_expr("(2 + 3")


class TestParseDefenses:
    """parse() rejects input the checker would normally have stopped."""

    def test_leftover_tokens(self, tokens_of) -> None:
        tokens = tokens_of("2 3")
        with pytest.raises(ExpressionSyntaxError, match="after expression") as exc_info:
            parse(tokens, parenthesize(tokens))
        assert exc_info.value.pos == 2

    def test_unmatched_open(self, tokens_of) -> None:
        with pytest.raises(ExpressionSyntaxError, match="Unmatched"):
            parse(tokens_of("(2)"), [])

    def test_empty(self) -> None:
        with pytest.raises(ExpressionSyntaxError, match="Empty expression"):
            parse([], [])

    def test_dangling_operator(self, tokens_of) -> None:
        with pytest.raises(ExpressionSyntaxError, match="end of expression"):
            parse(tokens_of("2 *"), [])

    def test_tree_depth(self, tokens_of) -> None:
        tokens = tokens_of("--1")
        assert parse(tokens, [], max_depth=3) == UnaryExpr(
            op=UnaryOp.NEG,
            operand=UnaryExpr(op=UnaryOp.NEG, operand=Literal(value=1)),
        )
        with pytest.raises(ExpressionSyntaxError, match="deeper than 2") as exc_info:
            parse(tokens, [], max_depth=2)
        assert exc_info.value.pos == 0


class TestDeepInput:
    """Long sign runs and power chains parse without recursing per token."""

    def test_sign_run(self) -> None:
        expr = tree_of("-" * 150 + "x")
        depth = 0
        while isinstance(expr, UnaryExpr):
            depth += 1
            expr = expr.operand
        assert depth == 150
        assert expr == Variable(name="x")

    def test_power_chain_right_associative(self) -> None:
        expr = tree_of("a ^ b ^ c ^ d")
        assert str(expr) == "[a ^ [b ^ [c ^ d]]]"

    def test_sign_run_at_length_limit(self) -> None:
        with pytest.raises(ExpressionSyntaxError, match="nests deeper than 200") as exc_info:
            parse_expr("-" * 998 + "1")
        assert exc_info.value.context is not None

    def test_signs_inside_nested_blocks(self) -> None:
        with pytest.raises(ExpressionSyntaxError, match="nests deeper than 200"):
            parse_expr("(" * 60 + "-" * 700 + "1" + ")" * 60)

    def test_nested_blocks_around_signs(self) -> None:
        source = "(" * 60 + "-" * 100 + "1" + ")" * 60
        expr = tree_of(source)
        assert isinstance(expr, Block)
        assert expr.level == 1
