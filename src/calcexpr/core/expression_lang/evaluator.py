"""
Expression evaluators for the calcexpr expression language.

Two ways to get a number out of an expression string:

- ``compile_expr`` builds the tree once and composes one closure per node.
  The returned ``CompiledExpression`` can be called many times with
  different bindings without re-parsing.
- ``evaluate_once`` walks the tree directly while computing. Cheaper when
  the expression is evaluated a single time.

Both paths share the literal parse (int for integer text, float for
decimal text) and the operator table, so they always agree. Pure
evaluation: no I/O, no eval(), no shared state between calls.
"""

from __future__ import annotations

import logging
import math
import operator
import sys
from collections.abc import Callable, Mapping

from calcexpr.core.config import CalcConfig
from calcexpr.core.errors import ArityError, CalcError, MissingVariableError
from calcexpr.core.expression_lang.parser import parse_expr
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

Number = int | float
Bindings = Mapping[str, Number]
NodeFn = Callable[[Bindings], Number]


def _power(base: Number, exponent: Number) -> Number:
    """``base ** exponent`` restricted to real results.

    Integer powers stay exact while the result fits the float range. Past
    that they are computed in floats, which raise ``OverflowError`` at once
    instead of building an unbounded integer.
    """
    if base < 0 and not float(exponent).is_integer():
        # math.pow raises ValueError instead of returning a complex number
        return math.pow(base, exponent)
    if (
        isinstance(base, int)
        and isinstance(exponent, int)
        and exponent > 0
        and abs(base) > 1
        and exponent * math.log2(abs(base)) > sys.float_info.max_exp
    ):
        return float(base) ** exponent
    return base**exponent


_BINARY_FUNCS: dict[BinaryOp, Callable[[Number, Number], Number]] = {
    BinaryOp.ADD: operator.add,
    BinaryOp.SUB: operator.sub,
    BinaryOp.MUL: operator.mul,
    BinaryOp.DIV: operator.truediv,
    BinaryOp.POW: _power,
}

_UNARY_FUNCS: dict[UnaryOp, Callable[[Number], Number]] = {
    UnaryOp.POS: operator.pos,
    UnaryOp.NEG: operator.neg,
}


class ExpressionEvalError(CalcError):
    """Internal error: a node type the evaluators do not know."""


def check_bindings(unknowns: tuple[str, ...] | list[str], bindings: Bindings) -> None:
    """Verify that ``bindings`` supplies exactly the expression's unknowns.

    Raises:
        ArityError: If the binding count differs from the unknown count.
        MissingVariableError: If an unknown has no binding.
    """
    if len(bindings) != len(unknowns):
        raise ArityError(expected=len(unknowns), got=len(bindings))
    for name in unknowns:
        if name not in bindings:
            raise MissingVariableError(name)


# ---------------------------------------------------------------------------
# Compiled form
# ---------------------------------------------------------------------------


def _compile_node(expr: Expr) -> NodeFn:
    """Compose the evaluation closure for ``expr`` from its children's closures."""
    if isinstance(expr, Literal):
        value = expr.value
        return lambda bindings: value

    if isinstance(expr, Variable):
        name = expr.name
        return lambda bindings: bindings[name]

    if isinstance(expr, Block):
        return _compile_node(expr.child)

    if isinstance(expr, UnaryExpr):
        operand = _compile_node(expr.operand)
        unary = _UNARY_FUNCS[expr.op]
        return lambda bindings: unary(operand(bindings))

    if isinstance(expr, BinaryExpr):
        left = _compile_node(expr.left)
        right = _compile_node(expr.right)
        binary = _BINARY_FUNCS[expr.op]
        return lambda bindings: binary(left(bindings), right(bindings))

    raise ExpressionEvalError(f"Unknown expression type: {type(expr).__name__}")


class CompiledExpression:
    """
    An expression parsed once and ready for repeated evaluation.

    Attributes:
        source: The expression text
        tree: The parsed AST
        unknowns: Variable names in first-appearance order
    """

    __slots__ = ("_source", "_tree", "_unknowns", "_fn")

    def __init__(self, source: str, tree: Expr, unknowns: list[str]) -> None:
        self._source = source
        self._tree = tree
        self._unknowns = tuple(unknowns)
        self._fn = _compile_node(tree)

    @property
    def source(self) -> str:
        return self._source

    @property
    def tree(self) -> Expr:
        return self._tree

    @property
    def unknowns(self) -> tuple[str, ...]:
        return self._unknowns

    def calc(self, bindings: Bindings) -> Number:
        """Evaluate against ``bindings``.

        Args:
            bindings: Variable name -> value; must name exactly the unknowns.

        Returns:
            The computed value.

        Raises:
            ArityError: If ``len(bindings) != len(unknowns)``.
            MissingVariableError: If an unknown is absent from ``bindings``.
            ZeroDivisionError: On division by zero.
        """
        check_bindings(self._unknowns, bindings)
        return self._fn(bindings)

    def __repr__(self) -> str:
        return f"CompiledExpression({self._source!r}, unknowns={list(self._unknowns)})"


def compile_expr(source: str, config: CalcConfig | None = None) -> CompiledExpression:
    """Parse ``source`` once and return a reusable evaluator.

    Usage:
        expr = compile_expr("x + y * 2")
        expr.unknowns            # ("x", "y")
        expr.calc({"x": 1, "y": 3})  # 7

    Raises:
        LexError, ExpressionSyntaxError, UnbalancedParenError: On bad input.
    """
    tree, unknowns = parse_expr(source, config)
    compiled = CompiledExpression(source, tree, unknowns)
    logger.debug(f"Compiled {source!r} with unknowns {unknowns}")
    return compiled


# ---------------------------------------------------------------------------
# Direct form
# ---------------------------------------------------------------------------


def _interpret(expr: Expr, bindings: Bindings) -> Number:
    """Compute ``expr`` in a single recursive walk."""
    if isinstance(expr, Literal):
        return expr.value

    if isinstance(expr, Variable):
        return bindings[expr.name]

    if isinstance(expr, Block):
        return _interpret(expr.child, bindings)

    if isinstance(expr, UnaryExpr):
        return _UNARY_FUNCS[expr.op](_interpret(expr.operand, bindings))

    if isinstance(expr, BinaryExpr):
        return _BINARY_FUNCS[expr.op](
            _interpret(expr.left, bindings),
            _interpret(expr.right, bindings),
        )

    raise ExpressionEvalError(f"Unknown expression type: {type(expr).__name__}")


def evaluate_once(
    source: str,
    bindings: Bindings,
    config: CalcConfig | None = None,
) -> Number:
    """Parse and evaluate ``source`` in one go.

    This is a safe tree-walking interpreter; it does NOT use Python's
    eval().

    Args:
        source: Expression string.
        bindings: Variable name -> value; must name exactly the unknowns.
        config: Optional limits.

    Returns:
        The computed value.

    Raises:
        LexError, ExpressionSyntaxError, UnbalancedParenError: On bad input.
        ArityError, MissingVariableError: On bad bindings.
    """
    tree, unknowns = parse_expr(source, config)
    check_bindings(unknowns, bindings)
    return _interpret(tree, bindings)
