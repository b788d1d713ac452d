"""Core calcexpr functionality: IR, expression pipeline, errors, configuration."""

from . import ir
from .config import CalcConfig, load_config
from .errors import (
    ArityError,
    CalcError,
    ErrorContext,
    ExpressionSyntaxError,
    LexError,
    MissingVariableError,
    UnbalancedParenError,
)

__all__ = [
    "ir",
    "CalcConfig",
    "load_config",
    "CalcError",
    "ErrorContext",
    "LexError",
    "ExpressionSyntaxError",
    "UnbalancedParenError",
    "ArityError",
    "MissingVariableError",
]
