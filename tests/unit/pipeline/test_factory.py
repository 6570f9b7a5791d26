"""Unit tests for the pipeline factory."""

from __future__ import annotations

import asyncio
from typing import Any, Iterator

import pytest
from jsonschema.exceptions import ValidationError

from core.config import RecordForgeSettings
from core.pipeline_config import PipelineConfig
from pipeline.factory import create_pipeline
from pipeline.record_pipeline import RecordPipeline

_SETTINGS = RecordForgeSettings()


def _positive(validator: Any, enabled: Any, instance: Any, schema: Any) -> Iterator[ValidationError]:
    if enabled and isinstance(instance, (int, float)) and instance <= 0:
        yield ValidationError(f"{instance} is not positive")


def _lenient(validator: Any, enabled: Any, instance: Any, schema: Any) -> Iterator[ValidationError]:
    return iter(())


def test_factory_builds_independent_pipelines() -> None:
    """Runs from one factory should not share working state."""
    factory = create_pipeline({"blacklist": ["secret"]}, _SETTINGS)

    first = factory({"a": 1, "secret": "x"}).process()
    second = factory({"b": 2}).process()
    first.results["a"] = 99

    assert second.results == {"b": 2}
    assert first.results == {"a": 99}


def test_factory_accepts_prebuilt_config() -> None:
    """A PipelineConfig should be usable directly."""
    config = PipelineConfig.from_mapping({"whitelist": ["a"]}, _SETTINGS)

    factory = create_pipeline(config)

    assert factory.config is config
    assert factory({"a": 1, "b": 2}).process().results == {"a": 1}


def test_custom_validators_are_scoped_per_factory() -> None:
    """Colliding custom keyword names should not interfere across configurations."""
    schema = {"properties": {"n": {"check": True}}}
    strict = create_pipeline(
        {"validate": schema, "custom_validators": {"check": _positive}}, _SETTINGS
    )
    lenient = create_pipeline(
        {"validate": schema, "custom_validators": {"check": _lenient}}, _SETTINGS
    )

    strict_run = strict({"n": -1}).process()
    lenient_run = lenient({"n": -1}).process()

    assert strict_run.errors == {"n": ["-1 is not positive"]}
    assert lenient_run.errors is None


def test_invalid_schema_disables_validation() -> None:
    """A schema that is itself invalid should degrade to a disabled step."""
    factory = create_pipeline({"validate": {"type": 12}}, _SETTINGS)

    pipeline = factory({"a": 1}).process()

    assert factory.config.validate_schema is None
    assert pipeline.errors is None
    assert pipeline.results == {"a": 1}


@pytest.mark.parametrize("async_mode", [False, True])
def test_dangling_reference_disables_validation(async_mode: bool) -> None:
    """A schema whose $ref cannot resolve should degrade to a disabled step in both modes."""
    factory = create_pipeline(
        {
            "validate": {"properties": {"a": {"$ref": "#/$defs/missing"}}},
            "async": async_mode,
        },
        _SETTINGS,
    )

    pipeline = factory({"a": 1})
    outcome = pipeline.process()
    if async_mode:
        asyncio.run(outcome)

    assert factory.config.validate_schema is None
    assert pipeline.errors is None
    assert pipeline.results == {"a": 1}


def test_pipeline_without_factory_checks_schema_references() -> None:
    """A directly built pipeline should apply the same schema check as the factory."""
    config = PipelineConfig.from_mapping(
        {"validate": {"properties": {"a": {"$ref": "#/$defs/missing"}}}}, _SETTINGS
    )

    pipeline = RecordPipeline({"a": 1}, config).process()

    assert pipeline.errors is None
    assert pipeline.results == {"a": 1}


@pytest.mark.parametrize("async_mode", [False, True])
def test_unknown_sanitizer_name_degrades_to_no_op(async_mode: bool) -> None:
    """An unknown sanitizer name should be ignored rather than fail every run."""
    factory = create_pipeline(
        {"sanitize": {"name": "no_such", "city": ["no_such", "trim"]}, "async": async_mode},
        _SETTINGS,
    )

    pipeline = factory({"name": " a ", "city": " Oslo "})
    outcome = pipeline.process()
    if async_mode:
        asyncio.run(outcome)

    assert pipeline.results == {"name": " a ", "city": "Oslo"}
