"""Type-safe field parsing helpers for pipeline options.

This module centralizes option parsing so malformed optional values
degrade to a disabled step with a consistent warning, while enumerated
policies fail fast with a clear configuration error.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence

from core.errors import RecordForgeConfigError
from core.logging_config import get_logger
from core.types import RenameRule

_LOGGER = get_logger(__name__)


def optional_mapping(options: Mapping[str, Any], field_name: str) -> Mapping[str, Any] | None:
    """Read an optional mapping field, ignoring values of other types."""
    value = options.get(field_name)
    if value is None:
        return None
    if isinstance(value, Mapping):
        return value
    _warn_ignored(field_name, value, "expected a mapping")
    return None


def optional_bool(options: Mapping[str, Any], field_name: str, default_value: bool) -> bool:
    """Read an optional boolean field."""
    value = options.get(field_name)
    if value is None:
        return default_value
    if isinstance(value, bool):
        return value
    _warn_ignored(field_name, value, "expected true/false")
    return default_value


def optional_positive_int(
    options: Mapping[str, Any],
    field_name: str,
    default_value: int,
) -> int:
    """Read a positive integer field while preserving the default on bad input."""
    value = options.get(field_name)
    if value is None:
        return default_value
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    _warn_ignored(field_name, value, "expected a positive integer")
    return default_value


def optional_path_list(options: Mapping[str, Any], field_name: str) -> tuple[str, ...] | None:
    """Read a path list given as a sequence of paths or a path-keyed mapping.

    For a mapping only the keys matter; their values are ignored.
    """
    value = options.get(field_name)
    if value is None:
        return None
    if isinstance(value, Mapping):
        candidates: Sequence[Any] = list(value.keys())
    elif isinstance(value, (list, tuple)):
        candidates = value
    else:
        _warn_ignored(field_name, value, "expected a list of paths")
        return None
    paths = tuple(item for item in candidates if isinstance(item, str))
    if len(paths) != len(candidates):
        _warn_ignored(field_name, value, "dropped non-string path entries")
    return paths


def optional_rename_rules(
    options: Mapping[str, Any],
    field_name: str,
) -> tuple[RenameRule, ...] | None:
    """Read rename rules from a mapping or from a list of (source, destination) pairs."""
    value = options.get(field_name)
    if value is None:
        return None
    if isinstance(value, Mapping):
        pairs: list[Any] = list(value.items())
    elif isinstance(value, (list, tuple)):
        pairs = list(value)
    else:
        _warn_ignored(field_name, value, "expected a mapping of source to destination")
        return None
    rules = [_rename_rule(pair) for pair in pairs]
    valid_rules = tuple(rule for rule in rules if rule is not None)
    if len(valid_rules) != len(pairs):
        _warn_ignored(field_name, value, "dropped malformed rename entries")
    return valid_rules


def callable_registry(options: Mapping[str, Any], field_name: str) -> dict[str, Callable[..., Any]]:
    """Read a name-to-callable registry, keeping only callable entries."""
    value = optional_mapping(options, field_name)
    if value is None:
        return {}
    registry = {
        str(name): function for name, function in value.items() if callable(function)
    }
    if len(registry) != len(value):
        _warn_ignored(field_name, sorted(map(str, value)), "dropped non-callable entries")
    return registry


def choice_with_default(
    options: Mapping[str, Any],
    field_name: str,
    supported_values: Sequence[str],
    default_value: str,
) -> str:
    """Read an enumerated string option.

    Raises:
        RecordForgeConfigError: If the value is not one of the supported values.
    """
    value = options.get(field_name)
    if value is None:
        return default_value
    if isinstance(value, str) and value in supported_values:
        return value
    supported_rows = ", ".join(supported_values)
    raise RecordForgeConfigError(
        f"Invalid {field_name} '{value}'. Use one of: {supported_rows}."
    )


def _rename_rule(pair: Any) -> RenameRule | None:
    if not isinstance(pair, (list, tuple)) or len(pair) != 2:
        return None
    source, destination = pair
    if not isinstance(source, str) or not isinstance(destination, str):
        return None
    return RenameRule(source=source, destination=destination)


def _warn_ignored(field_name: str, value: Any, reason: str) -> None:
    _LOGGER.warning(
        "config_option_ignored",
        option=field_name,
        value_type=type(value).__name__,
        reason=reason,
    )
