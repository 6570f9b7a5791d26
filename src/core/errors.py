"""RecordForge exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations

from typing import Any


class RecordForgeError(Exception):
    """Base exception for all RecordForge failures."""


class RecordForgeConfigError(RecordForgeError):
    """Raised for invalid runtime settings or enumerated pipeline options."""


class RecordForgePathError(RecordForgeError):
    """Raised when a path write meets a non-container value."""


class RecordForgeSanitizeError(RecordForgeError):
    """Raised for unknown or misbehaving sanitizers."""


class RecordForgeValidationError(RecordForgeError):
    """Raised when deferred validation rejects a record.

    Attributes:
        report: Error report produced by the validation engine.
    """

    def __init__(self, report: Any) -> None:
        super().__init__(f"Record failed validation: {_summarize(report)}")
        self.report = report


def _summarize(report: Any) -> str:
    """Render a short error-count summary for exception messages."""
    if isinstance(report, dict):
        return f"{len(report)} invalid field(s): {', '.join(sorted(report))}"
    if isinstance(report, list):
        return f"{len(report)} violation(s)"
    return repr(report)
