"""Execution drivers for pipeline steps.

The direct driver applies steps synchronously. The deferred driver runs
them as coroutines, yielding to the event loop at every step boundary.
Both share the step definitions and the invalid-record policy.
"""

from __future__ import annotations

import asyncio

from core.errors import RecordForgeValidationError
from core.logging_config import get_logger
from core.types import PipelineState, Record
from pipeline.steps import PipelineStep, StepContext, log_step, ordered_steps

_LOGGER = get_logger(__name__)


class DirectDriver:
    """Run steps synchronously, one after another."""

    def __init__(self, state: PipelineState, context: StepContext) -> None:
        self._state = state
        self._context = context

    def run(self, step: PipelineStep) -> None:
        """Apply one step if the configuration enables it."""
        if not step.is_enabled(self._context.config):
            log_step(step, self._context, applied=False)
            return
        step.apply(self._state, self._context)
        self._state.applied_steps.append(step.name)
        log_step(step, self._context, applied=True)

    def run_all(self) -> None:
        """Apply every step in order, stopping after a halting validation."""
        for step in ordered_steps():
            if self._state.halted:
                _log_halted(self._state)
                return
            self.run(step)
        _log_completed(self._state, self._context)


class DeferredDriver:
    """Run steps as a strictly sequential chain of coroutines."""

    def __init__(self, state: PipelineState, context: StepContext) -> None:
        self._state = state
        self._context = context

    async def run(self, step: PipelineStep) -> Record:
        """Apply one step after yielding to the event loop.

        Returns:
            The current results.

        Raises:
            RecordForgeValidationError: If this step halted the pipeline.
        """
        await asyncio.sleep(0)
        if not step.is_enabled(self._context.config):
            log_step(step, self._context, applied=False)
            return self._state.results
        was_halted = self._state.halted
        if step.apply_async is not None:
            await step.apply_async(self._state, self._context)
        else:
            step.apply(self._state, self._context)
        self._state.applied_steps.append(step.name)
        log_step(step, self._context, applied=True)
        if self._state.halted and not was_halted:
            raise RecordForgeValidationError(self._state.errors)
        return self._state.results

    async def run_all(self) -> Record:
        """Await every step in order; a halting validation rejects the chain."""
        for step in ordered_steps():
            try:
                await self.run(step)
            except RecordForgeValidationError:
                _log_halted(self._state)
                raise
        _log_completed(self._state, self._context)
        return self._state.results


def _log_halted(state: PipelineState) -> None:
    _LOGGER.info(
        "pipeline_halted",
        halted_after=state.applied_steps[-1] if state.applied_steps else None,
        applied_steps=list(state.applied_steps),
    )


def _log_completed(state: PipelineState, context: StepContext) -> None:
    _LOGGER.info(
        "pipeline_completed",
        applied_steps=list(state.applied_steps),
        has_errors=state.errors is not None,
        async_mode=context.config.async_mode,
    )
