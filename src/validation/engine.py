"""JSON Schema validation engine with per-instance keyword registries.

Each engine extends the selected draft validator with its own custom
keywords, so two configurations registering the same keyword name never
interfere with each other.
"""

from __future__ import annotations

import asyncio
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping

from jsonschema import (
    Draft4Validator,
    Draft6Validator,
    Draft7Validator,
    Draft201909Validator,
    Draft202012Validator,
    validators,
)
from jsonschema.exceptions import SchemaError, ValidationError
from referencing import Registry, Resource
from referencing.exceptions import Unresolvable
from referencing.jsonschema import specification_with

from core.errors import RecordForgeValidationError
from core.logging_config import get_logger
from core.types import ErrorReport, KeywordValidator, SchemaDraft, ValidationOptions
from validation.error_report import build_error_report

_LOGGER = get_logger(__name__)

_NON_SCHEMA_KEYWORDS = frozenset({"const", "default", "enum", "examples"})

_DRAFT_VALIDATORS: Mapping[str, Any] = MappingProxyType(
    {
        "2020-12": Draft202012Validator,
        "2019-09": Draft201909Validator,
        "7": Draft7Validator,
        "6": Draft6Validator,
        "4": Draft4Validator,
    }
)


def predicate_keyword(
    predicate: Callable[[Any, Any], bool],
    message: str = "{instance!r} is not valid under {keyword_value!r}",
) -> KeywordValidator:
    """Adapt a plain predicate into a JSON Schema keyword function.

    Args:
        predicate: Called as predicate(instance, keyword_value).
        message: Format string with instance and keyword_value fields.

    Returns:
        A keyword function suitable for ValidationEngine custom validators.
    """

    def keyword(
        validator: Any,
        keyword_value: Any,
        instance: Any,
        schema: Mapping[str, Any],
    ) -> Iterator[ValidationError]:
        if not predicate(instance, keyword_value):
            yield ValidationError(
                message.format(instance=instance, keyword_value=keyword_value)
            )

    return keyword


class ValidationEngine:
    """Validate records against JSON Schema with private custom keywords."""

    def __init__(self, custom_validators: Mapping[str, KeywordValidator] | None = None) -> None:
        self._custom_validators = MappingProxyType(dict(custom_validators or {}))
        self._validator_classes: dict[str, Any] = {}

    @property
    def custom_keywords(self) -> tuple[str, ...]:
        """Names of the keywords registered on this engine."""
        return tuple(sorted(self._custom_validators))

    def validator_class(self, draft: SchemaDraft) -> Any:
        """Return the validator class for a draft, extended with custom keywords."""
        if draft not in self._validator_classes:
            base_class = _DRAFT_VALIDATORS[draft]
            if self._custom_validators:
                base_class = validators.extend(
                    base_class, validators=dict(self._custom_validators)
                )
            self._validator_classes[draft] = base_class
        return self._validator_classes[draft]

    def schema_problem(self, schema: Mapping[str, Any], draft: SchemaDraft) -> str | None:
        """Return a description of why a schema is invalid, or None.

        Besides the metaschema check, every local "$ref" must resolve.
        """
        validator_class = self.validator_class(draft)
        contents = dict(schema)
        try:
            validator_class.check_schema(contents)
        except SchemaError as error:
            return error.message
        specification = specification_with(validator_class.META_SCHEMA["$schema"])
        resolver = Registry().resolver_with_root(
            Resource(contents=contents, specification=specification)
        )
        for reference in _local_references(contents):
            try:
                resolver.lookup(reference)
            except Unresolvable as error:
                return f"Unresolvable reference '{reference}': {error}"
        return None

    def validate_sync(
        self,
        data: Any,
        schema: Mapping[str, Any],
        options: ValidationOptions | None = None,
    ) -> ErrorReport | None:
        """Validate data and return an error report, or None if valid."""
        resolved_options = options or ValidationOptions()
        validator_class = self.validator_class(resolved_options.draft)
        format_checker = (
            validator_class.FORMAT_CHECKER if resolved_options.format_checker else None
        )
        validator = validator_class(dict(schema), format_checker=format_checker)
        try:
            errors = sorted(validator.iter_errors(data), key=_error_sort_key)
        except Unresolvable as error:
            _LOGGER.warning(
                "config_option_ignored",
                option="validate",
                value_type="schema",
                reason=f"Unresolvable reference: {error}",
            )
            return None
        report = build_error_report(errors, resolved_options)
        if report is not None:
            _LOGGER.info("validation_failed", error_count=len(errors))
        return report

    async def validate_async(
        self,
        data: Any,
        schema: Mapping[str, Any],
        options: ValidationOptions | None = None,
    ) -> Any:
        """Validate data cooperatively.

        Returns:
            The validated data.

        Raises:
            RecordForgeValidationError: If the data has violations.
        """
        await asyncio.sleep(0)
        report = self.validate_sync(data, schema, options)
        if report is not None:
            raise RecordForgeValidationError(report)
        return data


def _local_references(schema: Any) -> Iterator[str]:
    """Yield same-document "$ref" values, skipping subschemas with their own base."""
    if isinstance(schema, list):
        for item in schema:
            yield from _local_references(item)
        return
    if not isinstance(schema, Mapping):
        return
    reference = schema.get("$ref")
    if isinstance(reference, str) and reference.startswith("#"):
        yield reference
    for keyword, value in schema.items():
        if keyword in _NON_SCHEMA_KEYWORDS:
            continue
        if isinstance(value, Mapping) and _declares_base(value):
            continue
        yield from _local_references(value)


def _declares_base(schema: Mapping[str, Any]) -> bool:
    return isinstance(schema.get("$id"), str) or isinstance(schema.get("id"), str)


def _error_sort_key(error: ValidationError) -> list[str]:
    return [str(segment) for segment in error.absolute_path]
