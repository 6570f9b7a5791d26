"""Public SDK surface for RecordForge.

This module provides a stable import path for library users.
It re-exports the pipeline factory, typed configuration, and helpers.
"""

from __future__ import annotations

from core.config import RecordForgeSettings
from core.errors import (
    RecordForgeConfigError,
    RecordForgeError,
    RecordForgePathError,
    RecordForgeSanitizeError,
    RecordForgeValidationError,
)
from core.pipeline_config import PipelineConfig
from core.types import RenameRule, ValidationOptions
from pipeline.factory import PipelineFactory, create_pipeline
from pipeline.record_pipeline import RecordPipeline
from transforms.hardening import harden_for_validation
from transforms.path_access import MISSING, delete_path, get_path, has_path, set_path
from transforms.projection import blacklist, rename, whitelist
from transforms.record_merge import deep_merge
from transforms.sanitizers import BUILTIN_SANITIZERS, sanitize_record
from validation.engine import ValidationEngine, predicate_keyword

__all__ = [
    "BUILTIN_SANITIZERS",
    "MISSING",
    "PipelineConfig",
    "PipelineFactory",
    "RecordForgeConfigError",
    "RecordForgeError",
    "RecordForgePathError",
    "RecordForgeSanitizeError",
    "RecordForgeSettings",
    "RecordForgeValidationError",
    "RecordPipeline",
    "RenameRule",
    "ValidationEngine",
    "ValidationOptions",
    "blacklist",
    "create_pipeline",
    "deep_merge",
    "delete_path",
    "get_path",
    "harden_for_validation",
    "has_path",
    "predicate_keyword",
    "rename",
    "sanitize_record",
    "set_path",
    "whitelist",
]
