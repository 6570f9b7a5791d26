"""Unit tests for core settings parsing."""

from __future__ import annotations

import os

import pytest

from core.config import RecordForgeSettings
from core.errors import RecordForgeConfigError


def test_from_env_reads_max_string_length(monkeypatch: pytest.MonkeyPatch) -> None:
    """Settings should resolve the hardening ceiling from environment."""
    monkeypatch.setenv("RECORDFORGE_MAX_STRING_LENGTH", "256")
    monkeypatch.delenv("RECORDFORGE_MAX_DEPTH", raising=False)

    settings = RecordForgeSettings.from_env()

    assert settings.max_string_length == 256
    assert settings.max_depth == 64


def test_from_env_uses_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Unset variables should fall back to the documented defaults."""
    monkeypatch.delenv("RECORDFORGE_MAX_STRING_LENGTH", raising=False)
    monkeypatch.delenv("RECORDFORGE_MAX_DEPTH", raising=False)

    settings = RecordForgeSettings.from_env()

    assert settings == RecordForgeSettings(max_string_length=10_000, max_depth=64)


def test_from_env_raises_for_invalid_length(monkeypatch: pytest.MonkeyPatch) -> None:
    """Settings should fail for a non-numeric ceiling."""
    monkeypatch.setenv("RECORDFORGE_MAX_STRING_LENGTH", "not-a-number")

    with pytest.raises(RecordForgeConfigError):
        RecordForgeSettings.from_env()

    assert os.getenv("RECORDFORGE_MAX_STRING_LENGTH") == "not-a-number"


def test_from_env_raises_for_non_positive_depth(monkeypatch: pytest.MonkeyPatch) -> None:
    """Settings should reject zero or negative depth ceilings."""
    monkeypatch.setenv("RECORDFORGE_MAX_DEPTH", "0")

    with pytest.raises(RecordForgeConfigError, match="positive"):
        RecordForgeSettings.from_env()
