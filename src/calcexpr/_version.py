"""Version lookup for calcexpr."""

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path

DISTRIBUTION = "calcexpr"

# src/calcexpr/_version.py -> repository root
_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def get_version() -> str:
    """Installed distribution version, else ``[project].version`` of a source checkout."""
    try:
        return _metadata_version(DISTRIBUTION)
    except PackageNotFoundError:
        pass
    try:
        with open(_PYPROJECT, "rb") as f:
            project = tomllib.load(f).get("project", {})
    except (OSError, tomllib.TOMLDecodeError):
        return "0.0.0"
    return str(project.get("version", "0.0.0"))
