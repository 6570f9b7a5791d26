"""Error report construction from JSON Schema violations.

This module groups engine errors by the dotted path of the offending
field so callers can branch on individual fields.
"""

from __future__ import annotations

from typing import Iterable

from jsonschema.exceptions import ValidationError

from core.constants import PATH_SEPARATOR, ROOT_ERROR_KEY
from core.types import ErrorReport, ValidationOptions


def build_error_report(
    errors: Iterable[ValidationError],
    options: ValidationOptions,
) -> ErrorReport | None:
    """Build an error report, or None when there are no violations.

    Args:
        errors: Engine errors in reporting order.
        options: Controls report shape and message prefixes.

    Returns:
        A path-to-messages mapping ("grouped") or a message list ("flat").
    """
    grouped: dict[str, list[str]] = {}
    for error in errors:
        key = error_field_path(error)
        message = f"{key} {error.message}" if options.full_messages else error.message
        messages = grouped.setdefault(key, [])
        if message not in messages:
            messages.append(message)
    if not grouped:
        return None
    if options.error_format == "flat":
        return [message for messages in grouped.values() for message in messages]
    return grouped


def error_field_path(error: ValidationError) -> str:
    """Return the dotted path of the field an error refers to.

    Errors from "required" point at the missing property rather than at
    the object that lacks it.
    """
    segments = [str(segment) for segment in error.absolute_path]
    missing_property = _missing_property(error)
    if missing_property is not None:
        segments.append(missing_property)
    if not segments:
        return ROOT_ERROR_KEY
    return PATH_SEPARATOR.join(segments)


def _missing_property(error: ValidationError) -> str | None:
    if error.validator != "required" or not isinstance(error.instance, dict):
        return None
    required = error.validator_value if isinstance(error.validator_value, list) else []
    for name in required:
        if name not in error.instance and error.message.startswith(repr(name)):
            return str(name)
    return None
