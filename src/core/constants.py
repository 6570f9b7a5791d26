"""Core constants used across RecordForge modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

PATH_SEPARATOR = "."
ROOT_ERROR_KEY = "$"
DEFAULT_MAX_STRING_LENGTH = 10_000
DEFAULT_MAX_DEPTH = 64
MAX_STRING_LENGTH_ENV_VAR = "RECORDFORGE_MAX_STRING_LENGTH"
MAX_DEPTH_ENV_VAR = "RECORDFORGE_MAX_DEPTH"
STEP_ORDER = ("whitelist", "blacklist", "sanitize", "validate", "rename", "static")
DEFAULT_ON_INVALID = "continue"
SUPPORTED_ON_INVALID = ("continue", "halt")
DEFAULT_PATH_CONFLICT = "skip"
SUPPORTED_PATH_CONFLICTS = ("skip", "overwrite", "error")
DEFAULT_SCHEMA_DRAFT = "2020-12"
SUPPORTED_SCHEMA_DRAFTS = ("2020-12", "2019-09", "7", "6", "4")
DEFAULT_ERROR_FORMAT = "grouped"
SUPPORTED_ERROR_FORMATS = ("grouped", "flat")
VALIDATION_OPTION_KEYS = ("draft", "format_checker", "format", "full_messages")
OPTION_KEY_ALIASES = {
    "valOptions": "val_options",
    "customSanitizers": "custom_sanitizers",
    "customValidators": "custom_validators",
    "onInvalid": "on_invalid",
    "pathConflict": "path_conflict",
}
