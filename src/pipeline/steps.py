"""Pipeline step definitions shared by both execution drivers.

Each step is written once as a function over the pipeline state. The
sanitize and validate steps also carry an async variant that only differs
in how the external capability is awaited.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping

from core.constants import STEP_ORDER
from core.errors import RecordForgeValidationError
from core.logging_config import get_logger
from core.pipeline_config import PipelineConfig
from core.types import ErrorReport, PipelineState, StepName
from transforms.hardening import harden_for_validation
from transforms.projection import blacklist, rename, whitelist
from transforms.record_merge import deep_merge
from transforms.sanitizers import sanitize_record, sanitize_record_async
from validation.engine import ValidationEngine

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class StepContext:
    """Read-only collaborators available to every step."""

    config: PipelineConfig
    engine: ValidationEngine


StepFunction = Callable[[PipelineState, StepContext], None]
AsyncStepFunction = Callable[[PipelineState, StepContext], Awaitable[None]]


@dataclass(frozen=True)
class PipelineStep:
    """One named pipeline stage.

    Attributes:
        name: Stage name.
        is_enabled: Whether the configuration turns the stage on.
        apply: Synchronous implementation.
        apply_async: Optional coroutine implementation; apply is used if absent.
    """

    name: StepName
    is_enabled: Callable[[PipelineConfig], bool]
    apply: StepFunction
    apply_async: AsyncStepFunction | None = None


def _apply_whitelist(state: PipelineState, context: StepContext) -> None:
    config = context.config
    state.results = whitelist(state.results, config.whitelist or (), config.path_conflict)


def _apply_blacklist(state: PipelineState, context: StepContext) -> None:
    blacklist(state.results, context.config.blacklist or ())


def _apply_sanitize(state: PipelineState, context: StepContext) -> None:
    config = context.config
    state.results = sanitize_record(
        state.results, config.sanitize_rules or {}, config.custom_sanitizers
    )


async def _apply_sanitize_async(state: PipelineState, context: StepContext) -> None:
    config = context.config
    state.results = await sanitize_record_async(
        state.results, config.sanitize_rules or {}, config.custom_sanitizers
    )


def validation_input(state: PipelineState, context: StepContext) -> Any:
    """Build the bounded copy of the results that validation sees."""
    limits = context.config.hardening
    return harden_for_validation(state.results, limits.max_string_length, limits.max_depth)


def record_validation(
    state: PipelineState,
    context: StepContext,
    report: ErrorReport | None,
) -> None:
    """Store a validation outcome and apply the invalid-record policy."""
    state.errors = report
    if report is not None and context.config.on_invalid == "halt":
        state.halted = True


def _validation_schema(context: StepContext) -> Mapping[str, Any]:
    return context.config.validate_schema or {}


def _apply_validate(state: PipelineState, context: StepContext) -> None:
    report = context.engine.validate_sync(
        validation_input(state, context),
        _validation_schema(context),
        context.config.validation_options,
    )
    record_validation(state, context, report)


async def _apply_validate_async(state: PipelineState, context: StepContext) -> None:
    try:
        await context.engine.validate_async(
            validation_input(state, context),
            _validation_schema(context),
            context.config.validation_options,
        )
    except RecordForgeValidationError as error:
        record_validation(state, context, error.report)
    else:
        record_validation(state, context, None)


def _apply_rename(state: PipelineState, context: StepContext) -> None:
    config = context.config
    rename(state.results, config.rename or (), config.path_conflict)


def _apply_static(state: PipelineState, context: StepContext) -> None:
    state.results = deep_merge(context.config.static_defaults, state.results)


PIPELINE_STEPS: Mapping[str, PipelineStep] = {
    "whitelist": PipelineStep(
        name="whitelist",
        is_enabled=lambda config: config.whitelist is not None,
        apply=_apply_whitelist,
    ),
    "blacklist": PipelineStep(
        name="blacklist",
        is_enabled=lambda config: config.blacklist is not None,
        apply=_apply_blacklist,
    ),
    "sanitize": PipelineStep(
        name="sanitize",
        is_enabled=lambda config: bool(config.sanitize_rules),
        apply=_apply_sanitize,
        apply_async=_apply_sanitize_async,
    ),
    "validate": PipelineStep(
        name="validate",
        is_enabled=lambda config: config.validate_schema is not None,
        apply=_apply_validate,
        apply_async=_apply_validate_async,
    ),
    "rename": PipelineStep(
        name="rename",
        is_enabled=lambda config: config.rename is not None,
        apply=_apply_rename,
    ),
    "static": PipelineStep(
        name="static",
        is_enabled=lambda config: config.static_defaults is not None,
        apply=_apply_static,
    ),
}


def ordered_steps() -> tuple[PipelineStep, ...]:
    """Return every step in fixed execution order."""
    return tuple(PIPELINE_STEPS[name] for name in STEP_ORDER)


def log_step(step: PipelineStep, context: StepContext, applied: bool) -> None:
    """Log whether a step ran or was skipped as disabled."""
    event = "pipeline_step_applied" if applied else "pipeline_step_skipped"
    _LOGGER.debug(event, step=step.name, async_mode=context.config.async_mode)
