"""Runtime configuration model for RecordForge.

This module owns all environment variable parsing and validation.
Other modules consume a typed settings object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_STRING_LENGTH,
    MAX_DEPTH_ENV_VAR,
    MAX_STRING_LENGTH_ENV_VAR,
)
from core.errors import RecordForgeConfigError


@dataclass(frozen=True)
class RecordForgeSettings:
    """Validated process-level defaults.

    Attributes:
        max_string_length: Longest string handed to validation.
        max_depth: Deepest container nesting handed to validation.
    """

    max_string_length: int = DEFAULT_MAX_STRING_LENGTH
    max_depth: int = DEFAULT_MAX_DEPTH

    @classmethod
    def from_env(cls) -> "RecordForgeSettings":
        """Build settings from process environment variables.

        Returns:
            A validated settings object.

        Raises:
            RecordForgeConfigError: If environment values are invalid.
        """
        max_string_length = _parse_positive_int(
            MAX_STRING_LENGTH_ENV_VAR,
            os.getenv(MAX_STRING_LENGTH_ENV_VAR, str(DEFAULT_MAX_STRING_LENGTH)),
        )
        max_depth = _parse_positive_int(
            MAX_DEPTH_ENV_VAR,
            os.getenv(MAX_DEPTH_ENV_VAR, str(DEFAULT_MAX_DEPTH)),
        )
        return cls(max_string_length=max_string_length, max_depth=max_depth)


def _parse_positive_int(env_var: str, raw_value: str) -> int:
    """Parse a positive integer environment value.

    Args:
        env_var: Variable name, used in error messages.
        raw_value: Raw string from environment.

    Returns:
        Parsed integer.

    Raises:
        RecordForgeConfigError: If value is not a positive integer.
    """
    try:
        value = int(raw_value)
    except ValueError as error:
        raise RecordForgeConfigError(
            f"Invalid {env_var} value: "
            f"expected integer, got '{raw_value}'. "
            f"Set {env_var} to a positive numeric value."
        ) from error
    if value <= 0:
        raise RecordForgeConfigError(
            f"Invalid {env_var} value: expected a positive integer, got {value}."
        )
    return value
