"""Declarative pipeline configuration.

This module turns a plain options mapping into an immutable, typed
configuration. Absent options disable their step; malformed optional
values degrade to a disabled step instead of failing.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Sequence, cast

from core.config import RecordForgeSettings
from core.constants import (
    DEFAULT_ERROR_FORMAT,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_STRING_LENGTH,
    DEFAULT_ON_INVALID,
    DEFAULT_PATH_CONFLICT,
    DEFAULT_SCHEMA_DRAFT,
    OPTION_KEY_ALIASES,
    SUPPORTED_ERROR_FORMATS,
    SUPPORTED_ON_INVALID,
    SUPPORTED_PATH_CONFLICTS,
    SUPPORTED_SCHEMA_DRAFTS,
    VALIDATION_OPTION_KEYS,
)
from core.logging_config import get_logger
from core.option_fields import (
    callable_registry,
    choice_with_default,
    optional_bool,
    optional_mapping,
    optional_path_list,
    optional_positive_int,
    optional_rename_rules,
)
from core.types import (
    ErrorFormat,
    HardeningLimits,
    KeywordValidator,
    OnInvalidPolicy,
    PathConflictPolicy,
    RenameRule,
    Sanitizer,
    SchemaDraft,
    ValidationOptions,
)
from transforms.sanitizers import BUILTIN_SANITIZERS

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class PipelineConfig:
    """Immutable pipeline configuration.

    Attributes:
        validate_schema: JSON Schema for the validate step.
        validation_options: Engine options for the validate step.
        async_mode: Run steps as awaitables instead of chaining calls.
        sanitize_rules: Path to sanitizer-name list for the sanitize step.
        custom_sanitizers: Extra named sanitizers.
        custom_validators: Extra JSON Schema keywords.
        whitelist: Paths kept by the whitelist step.
        blacklist: Paths removed by the blacklist step.
        rename: Ordered rename rules.
        static_defaults: Record whose values fill gaps in the results.
        on_invalid: Whether validation failure stops the pipeline.
        path_conflict: What path writes do when they meet a scalar.
        hardening: Size ceilings applied before validation.
    """

    validate_schema: Mapping[str, Any] | None = None
    validation_options: ValidationOptions = field(default_factory=ValidationOptions)
    async_mode: bool = False
    sanitize_rules: Mapping[str, tuple[str, ...]] | None = None
    custom_sanitizers: Mapping[str, Sanitizer] = field(
        default_factory=lambda: MappingProxyType({})
    )
    custom_validators: Mapping[str, KeywordValidator] = field(
        default_factory=lambda: MappingProxyType({})
    )
    whitelist: tuple[str, ...] | None = None
    blacklist: tuple[str, ...] | None = None
    rename: tuple[RenameRule, ...] | None = None
    static_defaults: Mapping[str, Any] | None = None
    on_invalid: OnInvalidPolicy = cast(OnInvalidPolicy, DEFAULT_ON_INVALID)
    path_conflict: PathConflictPolicy = cast(PathConflictPolicy, DEFAULT_PATH_CONFLICT)
    hardening: HardeningLimits = field(
        default_factory=lambda: HardeningLimits(
            max_string_length=DEFAULT_MAX_STRING_LENGTH,
            max_depth=DEFAULT_MAX_DEPTH,
        )
    )

    @classmethod
    def from_mapping(
        cls,
        options: Mapping[str, Any] | None,
        settings: RecordForgeSettings | None = None,
    ) -> "PipelineConfig":
        """Build a configuration from a plain options mapping.

        Args:
            options: Pipeline options; camelCase aliases are accepted.
            settings: Process-level defaults; read from the environment if omitted.

        Returns:
            A frozen configuration object.

        Raises:
            RecordForgeConfigError: If an enumerated option has an unknown value.
        """
        resolved_settings = settings or RecordForgeSettings.from_env()
        normalized = _normalize_keys(options or {})
        custom_sanitizers = callable_registry(normalized, "custom_sanitizers")
        return cls(
            validate_schema=_frozen_copy(optional_mapping(normalized, "validate")),
            validation_options=_parse_validation_options(normalized),
            async_mode=optional_bool(normalized, "async", False),
            sanitize_rules=_parse_sanitize_rules(normalized, custom_sanitizers),
            custom_sanitizers=MappingProxyType(custom_sanitizers),
            custom_validators=MappingProxyType(
                callable_registry(normalized, "custom_validators")
            ),
            whitelist=optional_path_list(normalized, "whitelist"),
            blacklist=optional_path_list(normalized, "blacklist"),
            rename=optional_rename_rules(normalized, "rename"),
            static_defaults=_frozen_copy(optional_mapping(normalized, "static")),
            on_invalid=cast(
                OnInvalidPolicy,
                choice_with_default(
                    normalized, "on_invalid", SUPPORTED_ON_INVALID, DEFAULT_ON_INVALID
                ),
            ),
            path_conflict=cast(
                PathConflictPolicy,
                choice_with_default(
                    normalized,
                    "path_conflict",
                    SUPPORTED_PATH_CONFLICTS,
                    DEFAULT_PATH_CONFLICT,
                ),
            ),
            hardening=HardeningLimits(
                max_string_length=optional_positive_int(
                    normalized, "max_string_length", resolved_settings.max_string_length
                ),
                max_depth=optional_positive_int(
                    normalized, "max_depth", resolved_settings.max_depth
                ),
            ),
        )


def _normalize_keys(options: Mapping[str, Any]) -> dict[str, Any]:
    """Map camelCase option aliases onto their snake_case names."""
    normalized: dict[str, Any] = {}
    for key, value in options.items():
        normalized[OPTION_KEY_ALIASES.get(key, key)] = value
    return normalized


def _frozen_copy(value: Mapping[str, Any] | None) -> Mapping[str, Any] | None:
    """Detach a caller-owned mapping so later caller edits cannot leak in."""
    if value is None:
        return None
    return MappingProxyType(copy.deepcopy(dict(value)))


def _parse_validation_options(options: Mapping[str, Any]) -> ValidationOptions:
    raw_options = optional_mapping(options, "val_options") or {}
    for key in raw_options:
        if key not in VALIDATION_OPTION_KEYS:
            _LOGGER.warning("validation_option_ignored", option=key)
    draft = raw_options.get("draft")
    draft_options = {"draft": str(draft)} if draft is not None else {}
    return ValidationOptions(
        draft=cast(
            SchemaDraft,
            choice_with_default(
                draft_options, "draft", SUPPORTED_SCHEMA_DRAFTS, DEFAULT_SCHEMA_DRAFT
            ),
        ),
        format_checker=optional_bool(raw_options, "format_checker", True),
        error_format=cast(
            ErrorFormat,
            choice_with_default(
                raw_options, "format", SUPPORTED_ERROR_FORMATS, DEFAULT_ERROR_FORMAT
            ),
        ),
        full_messages=optional_bool(raw_options, "full_messages", False),
    )


def _parse_sanitize_rules(
    options: Mapping[str, Any],
    custom_sanitizers: Mapping[str, Sanitizer],
) -> Mapping[str, tuple[str, ...]] | None:
    raw_rules = optional_mapping(options, "sanitize")
    if raw_rules is None:
        return None
    rules: dict[str, tuple[str, ...]] = {}
    for path, names in raw_rules.items():
        if isinstance(names, str):
            names = (names,)
        if not isinstance(names, (list, tuple)) or not all(isinstance(name, str) for name in names):
            _LOGGER.warning("sanitize_rule_ignored", path=str(path))
            continue
        known_names = _known_sanitizer_names(str(path), names, custom_sanitizers)
        if known_names:
            rules[str(path)] = known_names
    return MappingProxyType(rules)


def _known_sanitizer_names(
    path: str,
    names: Sequence[str],
    custom_sanitizers: Mapping[str, Sanitizer],
) -> tuple[str, ...]:
    """Drop sanitizer names that neither the built-ins nor the custom registry define."""
    known_names: list[str] = []
    for name in names:
        if name in custom_sanitizers or name in BUILTIN_SANITIZERS:
            known_names.append(name)
        else:
            _LOGGER.warning(
                "config_option_ignored",
                option="sanitize",
                path=path,
                sanitizer=name,
                reason="unknown sanitizer",
            )
    return tuple(known_names)
