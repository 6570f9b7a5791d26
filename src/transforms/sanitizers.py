"""Named value sanitizers applied by path.

This module holds the built-in sanitizer library and applies a
path-to-sanitizer-names plan to a record. Custom sanitizers registered by
name extend or override the built-ins for one configuration only.
"""

from __future__ import annotations

import html
import inspect
import re
from types import MappingProxyType
from typing import Any, Awaitable, Mapping, Sequence

from core.errors import RecordForgeSanitizeError
from core.types import Record, Sanitizer
from transforms.path_access import MISSING, get_path, set_path

_TAG_PATTERN = re.compile(r"<[^>]*>")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "off", "0"})

SanitizePlan = list[tuple[str, tuple[tuple[str, Sanitizer], ...]]]


def _on_strings(function: Any) -> Sanitizer:
    """Wrap a str-only transform so other values pass through."""

    def sanitizer(value: Any) -> Any:
        return function(value) if isinstance(value, str) else value

    sanitizer.__name__ = getattr(function, "__name__", "sanitizer")
    return sanitizer


def _to_int(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return value
    return value


def _to_float(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return value
    return value


def _to_bool(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    return value


def _to_string(value: Any) -> Any:
    if value is None or isinstance(value, (dict, list)):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _null_if_empty(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


BUILTIN_SANITIZERS: Mapping[str, Sanitizer] = MappingProxyType(
    {
        "trim": _on_strings(str.strip),
        "ltrim": _on_strings(str.lstrip),
        "rtrim": _on_strings(str.rstrip),
        "lowercase": _on_strings(str.lower),
        "uppercase": _on_strings(str.upper),
        "collapse_whitespace": _on_strings(
            lambda text: _WHITESPACE_PATTERN.sub(" ", text).strip()
        ),
        "strip_tags": _on_strings(lambda text: _TAG_PATTERN.sub("", text)),
        "escape_html": _on_strings(html.escape),
        "to_int": _to_int,
        "to_float": _to_float,
        "to_bool": _to_bool,
        "to_string": _to_string,
        "null_if_empty": _null_if_empty,
    }
)


def build_sanitize_plan(
    rules: Mapping[str, Sequence[str]],
    custom_sanitizers: Mapping[str, Sanitizer] | None = None,
) -> SanitizePlan:
    """Resolve sanitizer names into callables, path by path.

    Raises:
        RecordForgeSanitizeError: If a sanitizer name is unknown.
    """
    registry = {**BUILTIN_SANITIZERS, **(custom_sanitizers or {})}
    plan: SanitizePlan = []
    for path, names in rules.items():
        functions: list[tuple[str, Sanitizer]] = []
        for name in names:
            if name not in registry:
                known_rows = ", ".join(sorted(registry))
                raise RecordForgeSanitizeError(
                    f"Unknown sanitizer '{name}' for path '{path}'. Use one of: {known_rows}."
                )
            functions.append((name, registry[name]))
        plan.append((path, tuple(functions)))
    return plan


def sanitize_record(
    record: Record,
    rules: Mapping[str, Sequence[str]],
    custom_sanitizers: Mapping[str, Sanitizer] | None = None,
) -> Record:
    """Apply sanitizers to every defined path of a record in place.

    Raises:
        RecordForgeSanitizeError: If a sanitizer is unknown, fails, or is async.
    """
    for path, functions in build_sanitize_plan(rules, custom_sanitizers):
        value = get_path(record, path)
        if value is MISSING:
            continue
        for name, function in functions:
            value = _call(name, function, path, value)
            if inspect.isawaitable(value):
                _discard(value)
                raise RecordForgeSanitizeError(
                    f"Sanitizer '{name}' returned an awaitable. "
                    "Enable async mode to use coroutine sanitizers."
                )
        set_path(record, path, value, on_conflict="skip")
    return record


async def sanitize_record_async(
    record: Record,
    rules: Mapping[str, Sequence[str]],
    custom_sanitizers: Mapping[str, Sanitizer] | None = None,
) -> Record:
    """Apply sanitizers in place, awaiting coroutine sanitizers.

    Raises:
        RecordForgeSanitizeError: If a sanitizer is unknown or fails.
    """
    for path, functions in build_sanitize_plan(rules, custom_sanitizers):
        value = get_path(record, path)
        if value is MISSING:
            continue
        for name, function in functions:
            value = _call(name, function, path, value)
            if inspect.isawaitable(value):
                try:
                    value = await value
                except Exception as error:
                    raise RecordForgeSanitizeError(
                        f"Sanitizer '{name}' failed for path '{path}': {error}"
                    ) from error
        set_path(record, path, value, on_conflict="skip")
    return record


def _call(name: str, function: Sanitizer, path: str, value: Any) -> Any:
    try:
        return function(value)
    except Exception as error:
        raise RecordForgeSanitizeError(
            f"Sanitizer '{name}' failed for path '{path}': {error}"
        ) from error


def _discard(awaitable: Awaitable[Any]) -> None:
    """Close an un-awaited coroutine so it does not warn on collection."""
    close = getattr(awaitable, "close", None)
    if callable(close):
        close()
