"""
Expression types for calcexpr IR.

This module defines the typed AST produced by the parser and consumed by
both evaluators.

Supports:
- Arithmetic: +, -, *, /, ^
- Unary sign: +x, -x
- Parenthesised blocks: (a + b)
- Numeric literals: 42, 3.14
- Variable references: x, rate_2
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary operators for expressions."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "^"


class UnaryOp(StrEnum):
    """Unary sign operators for expressions."""

    POS = "+"
    NEG = "-"


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class Literal(BaseModel):
    """A numeric literal: int for integer text, float for decimal text."""

    value: int | float = Field(description="The literal value")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return str(self.value)


class Variable(BaseModel):
    """Reference to a caller-supplied variable."""

    name: str = Field(description="Variable name")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class Block(BaseModel):
    """
    A parenthesised sub-expression.

    Transparent for evaluation; ``level`` records the nesting depth
    (1 for an outermost pair of parentheses).
    """

    child: Expr
    level: int = Field(ge=1, description="Nesting depth")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.child})"


class UnaryExpr(BaseModel):
    """Unary operation: op operand."""

    op: UnaryOp
    operand: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.op.value}{self.operand}"


class BinaryExpr(BaseModel):
    """
    Binary operation: left op right.

    Rendered in square brackets so implicit grouping from precedence
    stays distinguishable from explicit parentheses (``Block``).
    """

    op: BinaryOp
    left: Expr
    right: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"[{self.left} {self.op.value} {self.right}]"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = Literal | Variable | Block | UnaryExpr | BinaryExpr

# Rebuild models for recursive forward references
Block.model_rebuild()
UnaryExpr.model_rebuild()
BinaryExpr.model_rebuild()
