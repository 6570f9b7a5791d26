"""Record pipeline orchestrator.

A RecordPipeline owns a deep copy of one input record and exposes every
step as a method. In direct mode each method returns the pipeline so calls
chain; in deferred mode each method returns an awaitable resolving to the
current results.
"""

from __future__ import annotations

import asyncio
import copy
import dataclasses
from typing import Any, Awaitable, Mapping, Union

from core.logging_config import get_logger
from core.pipeline_config import PipelineConfig
from core.types import ErrorReport, PipelineState, Record
from pipeline.drivers import DeferredDriver, DirectDriver
from pipeline.steps import PIPELINE_STEPS, StepContext
from transforms.record_merge import deep_merge
from validation.engine import ValidationEngine

_LOGGER = get_logger(__name__)

StepResult = Union["RecordPipeline", Awaitable[Record]]


class RecordPipeline:
    """Stateful transformer for one record."""

    def __init__(
        self,
        record: Mapping[str, Any],
        config: PipelineConfig,
        engine: ValidationEngine | None = None,
    ) -> None:
        if engine is None:
            engine = ValidationEngine(config.custom_validators)
            config = disable_invalid_schema(config, engine)
        self._config = config
        self._state = PipelineState(results=copy.deepcopy(dict(record)))
        context = StepContext(config=config, engine=engine)
        self._direct = DirectDriver(self._state, context)
        self._deferred = DeferredDriver(self._state, context)

    @property
    def results(self) -> Record:
        """Current transformed record."""
        return self._state.results

    @property
    def errors(self) -> ErrorReport | None:
        """Validation error report, or None."""
        return self._state.errors

    @property
    def is_async(self) -> bool:
        """Whether step methods return awaitables."""
        return self._config.async_mode

    def whitelist(self) -> StepResult:
        """Keep only the configured paths."""
        return self._run("whitelist")

    def blacklist(self) -> StepResult:
        """Remove the configured paths."""
        return self._run("blacklist")

    def sanitize(self) -> StepResult:
        """Apply the configured sanitizers."""
        return self._run("sanitize")

    def validate(self) -> StepResult:
        """Validate a hardened copy of the results."""
        return self._run("validate")

    def rename(self) -> StepResult:
        """Move values between the configured paths."""
        return self._run("rename")

    def static(self) -> StepResult:
        """Fill gaps in the results from the static defaults."""
        return self._run("static")

    def merge(self, document: Mapping[str, Any]) -> StepResult:
        """Combine an external document with the results; results win on conflict."""
        if self._config.async_mode:
            return self._merge_async(document)
        self._merge(document)
        return self

    def process(self) -> StepResult:
        """Run every step in fixed order.

        Returns:
            The pipeline in direct mode; an awaitable of the results in
            deferred mode. Under the halt policy the awaitable rejects with
            RecordForgeValidationError.
        """
        if self._config.async_mode:
            return self._deferred.run_all()
        self._direct.run_all()
        return self

    def _run(self, name: str) -> StepResult:
        step = PIPELINE_STEPS[name]
        if self._config.async_mode:
            return self._deferred.run(step)
        self._direct.run(step)
        return self

    def _merge(self, document: Mapping[str, Any]) -> None:
        self._state.results = deep_merge(document, self._state.results)

    async def _merge_async(self, document: Mapping[str, Any]) -> Record:
        await asyncio.sleep(0)
        self._merge(document)
        return self._state.results


def disable_invalid_schema(config: PipelineConfig, engine: ValidationEngine) -> PipelineConfig:
    """Turn the validate step off when its schema is invalid or unresolvable."""
    if config.validate_schema is None:
        return config
    problem = engine.schema_problem(config.validate_schema, config.validation_options.draft)
    if problem is None:
        return config
    _LOGGER.warning(
        "config_option_ignored",
        option="validate",
        value_type="schema",
        reason=problem,
    )
    return dataclasses.replace(config, validate_schema=None)
