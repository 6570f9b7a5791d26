"""Pipeline factory bound to one configuration.

A factory parses its options once and owns the validation engine for
that configuration, so custom keywords stay private to it. Each call
builds an independent pipeline over a fresh copy of the input record.
"""

from __future__ import annotations

from typing import Any, Mapping

from core.config import RecordForgeSettings
from core.pipeline_config import PipelineConfig
from pipeline.record_pipeline import RecordPipeline, disable_invalid_schema
from validation.engine import ValidationEngine


class PipelineFactory:
    """Build RecordPipeline instances that share one configuration."""

    def __init__(self, config: PipelineConfig) -> None:
        self._engine = ValidationEngine(config.custom_validators)
        self._config = disable_invalid_schema(config, self._engine)

    @property
    def config(self) -> PipelineConfig:
        """The effective configuration."""
        return self._config

    @property
    def engine(self) -> ValidationEngine:
        """The validation engine shared by pipelines of this factory."""
        return self._engine

    def __call__(self, record: Mapping[str, Any]) -> RecordPipeline:
        """Build a pipeline over a private copy of record."""
        return RecordPipeline(record, self._config, self._engine)


def create_pipeline(
    options: Mapping[str, Any] | PipelineConfig | None = None,
    settings: RecordForgeSettings | None = None,
) -> PipelineFactory:
    """Create a pipeline factory from options.

    Args:
        options: Options mapping or an already-built configuration.
        settings: Process-level defaults; read from the environment if omitted.

    Returns:
        A factory that turns records into pipelines.

    Raises:
        RecordForgeConfigError: If an enumerated option has an unknown value.
    """
    if isinstance(options, PipelineConfig):
        config = options
    else:
        config = PipelineConfig.from_mapping(options, settings)
    return PipelineFactory(config)

