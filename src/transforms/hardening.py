"""Validation-input hardening.

Pattern-based validators can backtrack catastrophically on very long
strings. This module builds a bounded copy of a record that is handed to
validation instead of the record itself, so the pipeline results keep
their original values.
"""

from __future__ import annotations

from typing import Any, Mapping

from core.constants import DEFAULT_MAX_DEPTH, DEFAULT_MAX_STRING_LENGTH
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


def harden_for_validation(
    record: Any,
    max_string_length: int = DEFAULT_MAX_STRING_LENGTH,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Any:
    """Return a size-bounded copy of a record.

    Args:
        record: Record to copy. It is never mutated.
        max_string_length: Longer strings are cut to this length.
        max_depth: Containers nested deeper are replaced by empty ones.

    Returns:
        A new structure with the same shape and bounded values.
    """
    counters = {"truncated_strings": 0, "pruned_containers": 0}
    hardened = _harden_value(record, max_string_length, max_depth, 0, counters)
    if counters["truncated_strings"] or counters["pruned_containers"]:
        _LOGGER.info(
            "validation_input_truncated",
            max_string_length=max_string_length,
            max_depth=max_depth,
            **counters,
        )
    return hardened


def _harden_value(
    value: Any,
    max_string_length: int,
    max_depth: int,
    depth: int,
    counters: dict[str, int],
) -> Any:
    if isinstance(value, str):
        if len(value) > max_string_length:
            counters["truncated_strings"] += 1
            return value[:max_string_length]
        return value
    if isinstance(value, Mapping):
        if depth >= max_depth:
            counters["pruned_containers"] += 1
            return {}
        return {
            key: _harden_value(item, max_string_length, max_depth, depth + 1, counters)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        if depth >= max_depth:
            counters["pruned_containers"] += 1
            return []
        return [
            _harden_value(item, max_string_length, max_depth, depth + 1, counters)
            for item in value
        ]
    return value
