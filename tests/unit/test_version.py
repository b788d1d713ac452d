"""Tests for the version lookup."""

import tomllib
from pathlib import Path

import calcexpr
from calcexpr._version import get_version


def test_version_matches_pyproject():
    """Test the reported version is the one declared in pyproject.toml."""
    pyproject = Path(__file__).resolve().parents[2] / "pyproject.toml"
    with open(pyproject, "rb") as f:
        declared = tomllib.load(f)["project"]["version"]

    assert get_version() == declared
    assert calcexpr.__version__ == declared
