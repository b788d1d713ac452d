"""
calcexpr intermediate representation.

The expression AST shared by the parser and the evaluators.
"""

from .expressions import (
    BinaryExpr,
    BinaryOp,
    Block,
    Expr,
    Literal,
    UnaryExpr,
    UnaryOp,
    Variable,
)

__all__ = [
    "BinaryExpr",
    "BinaryOp",
    "Block",
    "Expr",
    "Literal",
    "UnaryExpr",
    "UnaryOp",
    "Variable",
]
