"""Shared pytest fixtures for calcexpr tests."""

from pathlib import Path

import pytest

from calcexpr.core.expression_lang.evaluator import CompiledExpression, compile_expr
from calcexpr.core.expression_lang.lexer import Token, lex


@pytest.fixture
def compiled_xy() -> CompiledExpression:
    """Return the compiled form of ``x + y * 2``."""
    return compile_expr("x + y * 2")


@pytest.fixture
def tokens_of():
    """Return a helper that lexes an expression and drops the unknowns."""

    def _tokens_of(source: str) -> list[Token]:
        tokens, _ = lex(source)
        return tokens

    return _tokens_of


@pytest.fixture
def config_file(tmp_path: Path):
    """Return a helper that writes calcexpr.toml into a temp directory."""

    def _write(content: str) -> Path:
        path = tmp_path / "calcexpr.toml"
        path.write_text(content)
        return path

    return _write
