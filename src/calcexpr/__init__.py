"""
calcexpr - arithmetic expressions over named variables.

Compile an expression once and evaluate it against many sets of variable
bindings, or evaluate it directly in a single call.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.config import CalcConfig, load_config
from .core.errors import (
    ArityError,
    CalcError,
    ExpressionSyntaxError,
    LexError,
    MissingVariableError,
    UnbalancedParenError,
)
from .core.expression_lang import CompiledExpression, compile_expr, evaluate_once, parse_expr

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "CalcConfig",
    "load_config",
    "CompiledExpression",
    "compile_expr",
    "evaluate_once",
    "parse_expr",
    "CalcError",
    "LexError",
    "ExpressionSyntaxError",
    "UnbalancedParenError",
    "ArityError",
    "MissingVariableError",
]
