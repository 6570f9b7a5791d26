"""Shared typed models.

This module defines record aliases and immutable option models used by
transforms, validation, and pipeline layers to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Literal, Union

from core.constants import (
    DEFAULT_ERROR_FORMAT,
    DEFAULT_SCHEMA_DRAFT,
)

Record = dict[str, Any]
ErrorReport = Union[dict[str, list[str]], list[str]]
ValueKind = Literal["scalar", "sequence", "mapping"]
PathConflictPolicy = Literal["skip", "overwrite", "error"]
OnInvalidPolicy = Literal["continue", "halt"]
SchemaDraft = Literal["2020-12", "2019-09", "7", "6", "4"]
ErrorFormat = Literal["grouped", "flat"]
StepName = Literal["whitelist", "blacklist", "sanitize", "validate", "rename", "static"]
Sanitizer = Callable[[Any], Union[Any, Awaitable[Any]]]
KeywordValidator = Callable[..., Any]


@dataclass(frozen=True)
class RenameRule:
    """One ordered rename instruction.

    Attributes:
        source: Path read and removed from the record.
        destination: Path written with the source value.
    """

    source: str
    destination: str


@dataclass(frozen=True)
class ValidationOptions:
    """Options forwarded to the validation engine.

    Attributes:
        draft: JSON Schema draft used to build the validator class.
        format_checker: Whether the "format" keyword is enforced.
        error_format: Shape of the produced error report.
        full_messages: Prefix each message with its field path.
    """

    draft: SchemaDraft = DEFAULT_SCHEMA_DRAFT
    format_checker: bool = True
    error_format: ErrorFormat = DEFAULT_ERROR_FORMAT
    full_messages: bool = False


@dataclass(frozen=True)
class HardeningLimits:
    """Size ceilings applied to data before validation.

    Attributes:
        max_string_length: Strings are truncated to this many characters.
        max_depth: Containers nested deeper are emptied.
    """

    max_string_length: int
    max_depth: int


@dataclass
class PipelineState:
    """Mutable working state of one pipeline instance.

    Attributes:
        results: Current transformed record.
        errors: Error report from the validate step, if any.
        halted: Set when validation failed under the halt policy.
    """

    results: Record
    errors: ErrorReport | None = None
    halted: bool = False
    applied_steps: list[str] = field(default_factory=list)
