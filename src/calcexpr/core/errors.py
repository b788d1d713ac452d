"""
Error types for calcexpr lexing, checking, parsing and evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass


class CalcError(Exception):
    """Base exception for all calcexpr errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        return self._format_message()

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.message}\n{self.context.format()}"
        return self.message


class SourceError(CalcError):
    """An error tied to a character index of the expression source."""

    def __init__(self, message: str, pos: int, context: ErrorContext | None = None):
        self.pos = pos
        super().__init__(message, context)


class LexError(SourceError):
    """
    Raised when the expression contains a character no token class accepts.

    Examples:
    - Unknown symbols such as ``%`` or ``$``
    - A trailing decimal point (``2.``)
    - Expressions longer than the configured limit
    """


class ExpressionSyntaxError(SourceError):
    """
    Raised when the token sequence is malformed.

    Examples:
    - Empty expression
    - Two operands without an operator between them
    - Operator at the end of the expression or before ``)``
    - Empty parentheses
    - Tokens left over after the parser finished
    """


class UnbalancedParenError(ExpressionSyntaxError):
    """
    Raised when a parenthesis has no partner.

    ``token_index`` is the index of the offending token in the token
    sequence; ``pos`` is its index in the source string.
    """

    def __init__(
        self,
        message: str,
        pos: int,
        token_index: int,
        context: ErrorContext | None = None,
    ):
        self.token_index = token_index
        super().__init__(message, pos, context)


class ArityError(CalcError):
    """Raised when the number of bindings differs from the number of unknowns."""

    def __init__(self, expected: int, got: int):
        self.expected = expected
        self.got = got
        super().__init__(f"Incorrect number of values passed: expected {expected}, got {got}")


class MissingVariableError(CalcError):
    """Raised when a variable referenced by the expression has no binding."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Missing value for variable {name!r}")


@dataclass
class ErrorContext:
    """
    Location of an error inside the expression source.

    Attributes:
        source: The full expression text
        pos: Character index of the error (0-indexed)
    """

    source: str
    pos: int

    @property
    def line(self) -> int:
        """Line number of ``pos`` (1-indexed)."""
        return self.source.count("\n", 0, self.pos) + 1

    @property
    def column(self) -> int:
        """Column number of ``pos`` (1-indexed)."""
        return self.pos - (self.source.rfind("\n", 0, self.pos) + 1) + 1

    def format(self) -> str:
        """
        Format the offending source line with an error marker.

        Returns:
            Formatted string like::

                   1 | 2 + * 3
                           ^
        """
        lines = self.source.split("\n")
        line = lines[self.line - 1] if self.line <= len(lines) else ""
        prefix = f"{self.line:4d} | "
        marker_pos = len(prefix) + self.column - 1
        return f"{prefix}{line}\n{' ' * marker_pos}^"


def attach_source(error: SourceError, source: str) -> SourceError:
    """
    Attach an ErrorContext for ``source`` to a positional error.

    Args:
        error: Error raised by a stage that only saw tokens
        source: Expression text the tokens came from

    Returns:
        The same error, now carrying context
    """
    if error.context is None:
        error.context = ErrorContext(source=source, pos=error.pos)
    return error
