"""
calcexpr expression language.

Lexer, syntax checker, parenthesis resolver, parser and evaluators for
arithmetic expressions over named variables.

Usage:
    from calcexpr.core.expression_lang import compile_expr, evaluate_once

    expr = compile_expr("x + y * 2")
    result = expr.calc({"x": 1, "y": 3})
    # result == 7

    evaluate_once("(2 + 3) * 4", {})
    # 20
"""

from calcexpr.core.expression_lang.evaluator import (
    CompiledExpression,
    compile_expr,
    evaluate_once,
)
from calcexpr.core.expression_lang.parser import parse_expr

__all__ = ["CompiledExpression", "compile_expr", "evaluate_once", "parse_expr"]
