"""
Engine configuration for calcexpr.

Configuration is loaded from the [calc] section of calcexpr.toml.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "calcexpr.toml"


class CalcConfig(BaseModel):
    """Limits and logging for the expression pipeline."""

    max_expression_length: int = Field(
        default=1000, ge=1, description="Longest accepted expression, in characters"
    )
    max_nesting_depth: int = Field(
        default=64, ge=1, le=100, description="Deepest accepted parenthesis nesting"
    )
    max_tree_depth: int = Field(
        default=200,
        ge=1,
        le=250,
        description="Deepest accepted tree, counting signs and operators as levels",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Logging level used by the CLI"
    )

    model_config = ConfigDict(frozen=True, extra="forbid")


DEFAULT_CONFIG = CalcConfig()


def load_config(toml_path: Path) -> CalcConfig:
    """
    Load engine configuration from calcexpr.toml.

    Args:
        toml_path: Path to calcexpr.toml file

    Returns:
        CalcConfig with values from file or defaults

    Raises:
        pydantic.ValidationError: If the [calc] section holds invalid values.
    """
    if not toml_path.exists():
        return CalcConfig()

    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Could not read {toml_path}: {e}; using defaults")
        return CalcConfig()

    calc_section: dict[str, Any] = data.get("calc", {})
    if not calc_section:
        return CalcConfig()

    return CalcConfig.model_validate(calc_section)
