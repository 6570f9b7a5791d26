"""Unit tests for named sanitizers."""

from __future__ import annotations

import asyncio

import pytest

from core.errors import RecordForgeSanitizeError
from transforms.sanitizers import sanitize_record, sanitize_record_async


def test_sanitize_record_applies_names_in_order() -> None:
    """Listed sanitizers should run left to right on the addressed value."""
    record = {"user": {"email": "  Ada@Example.COM "}}

    sanitize_record(record, {"user.email": ("trim", "lowercase")})

    assert record == {"user": {"email": "ada@example.com"}}


def test_sanitize_record_skips_missing_paths() -> None:
    """Paths absent from the record should not be created."""
    record = {"a": " x "}

    sanitize_record(record, {"b": ("trim",)})

    assert record == {"a": " x "}


def test_builtin_converters_leave_unconvertible_values() -> None:
    """Type converters should only change values they can parse."""
    record = {"count": " 42 ", "ratio": "n/a", "active": "yes", "blank": "   "}

    sanitize_record(
        record,
        {
            "count": ("to_int",),
            "ratio": ("to_float",),
            "active": ("to_bool",),
            "blank": ("null_if_empty",),
        },
    )

    assert record == {"count": 42, "ratio": "n/a", "active": True, "blank": None}


def test_strip_tags_and_collapse_whitespace() -> None:
    """Markup should be removed and whitespace runs collapsed."""
    record = {"bio": "<b>Hello</b>   <i>world</i>"}

    sanitize_record(record, {"bio": ("strip_tags", "collapse_whitespace")})

    assert record == {"bio": "Hello world"}


def test_custom_sanitizer_overrides_builtin() -> None:
    """Custom sanitizers should take precedence over built-ins of the same name."""
    record = {"name": "ada"}

    sanitize_record(record, {"name": ("trim",)}, {"trim": lambda value: f"[{value}]"})

    assert record == {"name": "[ada]"}


def test_unknown_sanitizer_raises() -> None:
    """An unknown sanitizer name should fail with a clear error."""
    with pytest.raises(RecordForgeSanitizeError, match="Unknown sanitizer 'shout'"):
        sanitize_record({"a": "x"}, {"a": ("shout",)})


def test_failing_sanitizer_is_wrapped() -> None:
    """Exceptions from sanitizers should surface as sanitize errors."""

    def explode(value: object) -> object:
        raise ValueError("boom")

    with pytest.raises(RecordForgeSanitizeError, match="boom"):
        sanitize_record({"a": "x"}, {"a": ("explode",)}, {"explode": explode})


def test_coroutine_sanitizer_rejected_in_direct_mode() -> None:
    """Direct sanitization should refuse awaitable results."""

    async def slow_upper(value: str) -> str:
        return value.upper()

    with pytest.raises(RecordForgeSanitizeError, match="awaitable"):
        sanitize_record({"a": "x"}, {"a": ("slow_upper",)}, {"slow_upper": slow_upper})


def test_coroutine_sanitizer_awaited_in_async_mode() -> None:
    """Async sanitization should await coroutine sanitizers."""

    async def slow_upper(value: str) -> str:
        await asyncio.sleep(0)
        return value.upper()

    record = {"a": "x"}

    asyncio.run(
        sanitize_record_async(record, {"a": ("slow_upper", "trim")}, {"slow_upper": slow_upper})
    )

    assert record == {"a": "X"}


def test_sanitize_record_leaves_tuple_elements_unchanged() -> None:
    """Values read from a tuple cannot be written back and stay as they were."""
    record = {"pair": (" a ", "b")}

    sanitize_record(record, {"pair.0": ["trim"]})

    assert record == {"pair": (" a ", "b")}
