"""
Pipeline - Step Orchestrator.

Runs declared steps in order over an accumulated value. Every step body
goes through the retry executor; a step's validator, if any, checks the
body's output and the configured error strategy decides what a failure
does to the run.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

from etl_framework.adapters.logging_logger import LoggingAuditLogger
from etl_framework.adapters.metrics_collector import InMemoryMetricsCollector
from etl_framework.config.models import RunOptions
from etl_framework.domain.entities import (
    ErrorEntry,
    ErrorStrategy,
    PipelineHalted,
    PipelineRunState,
    PipelineSuccess,
    Step,
)
from etl_framework.domain.value_objects import Err, Ok, Partitioned, Result, is_result
from etl_framework.interfaces.audit_logger import AuditLogger
from etl_framework.interfaces.metrics_collector import MetricsCollector
from etl_framework.pipeline.errors import PipelineDefinitionError
from etl_framework.resilience.retry import RetryExecutor

logger = logging.getLogger(__name__)

RunOutcome = Union[PipelineSuccess, PipelineHalted]

# (failing step name, reason or invalid items)
_Halt = Tuple[str, Any]

DEFAULT_INVALID_REASON = "Invalid"

# "default_retry" holds the policy shared by all steps
RESERVED_STEP_NAMES = frozenset({"default"})


def unexpected_error(exc: Exception) -> Err:
    """Convert a raised exception into a step failure."""
    return Err(f"Unexpected error: {type(exc).__name__}: {exc}")


def normalize_invalid_items(step_name: str, items: Iterable[Any]) -> List[ErrorEntry]:
    """
    Turn invalid items into error entries.

    A ``(record, reason)`` pair keeps its reason; any other item is the
    record itself with reason "Invalid".
    """
    entries = []
    for item in items:
        if isinstance(item, tuple) and len(item) == 2:
            record, reason = item
            entries.append(ErrorEntry(step_name, record, _reason_text(reason)))
        else:
            entries.append(ErrorEntry(step_name, item, DEFAULT_INVALID_REASON))
    return entries


def _reason_text(reason: Any) -> str:
    return reason if isinstance(reason, str) else str(reason)


def check_step_names(steps: Sequence[Step]) -> None:
    """
    Reject step lists whose names would clash in options or metrics.

    Raises:
        PipelineDefinitionError: On empty, reserved or duplicate names, or a
            name equal to another step's validation metric key
    """
    seen: Set[str] = set()
    for step in steps:
        if not step.name:
            raise PipelineDefinitionError("Step name must not be empty")
        if step.name in RESERVED_STEP_NAMES:
            raise PipelineDefinitionError(f"Step name is reserved: {step.name}")
        if step.name in seen:
            raise PipelineDefinitionError(f"Duplicate step name: {step.name}")
        seen.add(step.name)

    for step in steps:
        if step.has_validator and step.validation_metric in seen:
            raise PipelineDefinitionError(
                f"Step name {step.validation_metric} clashes with the validation "
                f"metric of step {step.name}"
            )


class Pipeline:
    """Main orchestrator for a declared sequence of steps."""

    def __init__(
        self,
        name: str,
        steps: Iterable[Step],
        audit_logger: Optional[AuditLogger] = None,
        metrics_collector: Optional[MetricsCollector] = None,
        retry_executor: Optional[RetryExecutor] = None,
    ) -> None:
        """
        Initialize pipeline with all dependencies.

        Args:
            name: Pipeline name used in logs and metric tags
            steps: Ordered step descriptors
            audit_logger: Logging sink (defaults to stdlib logging)
            metrics_collector: Telemetry spans and counters
            retry_executor: Backoff runner (defaults to one sharing the sink)

        Raises:
            PipelineDefinitionError: If step names clash (see check_step_names)
        """
        self.name = name
        self.steps: Tuple[Step, ...] = tuple(steps)
        check_step_names(self.steps)
        self.audit_logger = audit_logger or LoggingAuditLogger()
        self.metrics_collector = metrics_collector or InMemoryMetricsCollector()
        self.retry_executor = retry_executor or RetryExecutor(audit_logger=self.audit_logger)

    @property
    def step_names(self) -> List[str]:
        return [step.name for step in self.steps]

    def run(
        self,
        initial_value: Any,
        options: Union[RunOptions, Dict[str, Any], None] = None,
        **overrides: Any,
    ) -> RunOutcome:
        """
        Execute all steps in order.

        Args:
            initial_value: Value handed to the first step
            options: RunOptions or an equivalent dict
            **overrides: ``error_strategy=...`` and ``<step>_retry={...}``

        Returns:
            PipelineSuccess, or PipelineHalted under fail_fast

        Raises:
            pydantic.ValidationError: If the options are invalid (before
                any step runs)
        """
        run_options = self._resolve_options(options, overrides)
        run_id = str(uuid.uuid4())
        self.audit_logger.set_correlation_id(run_id)
        run_start = time.perf_counter()

        self.audit_logger.log(
            "info",
            "pipeline_start",
            {
                "pipeline": self.name,
                "steps": self.step_names,
                "error_strategy": run_options.error_strategy.value,
            },
        )
        logger.debug(f"Starting {self.name} with value {initial_value!r}")

        state = PipelineRunState(value=initial_value)
        for step in self.steps:
            state, halt = self._execute_step(step, state, run_options)
            if halt is not None:
                self._record_run(run_start, "halted")
                failed_step, reason = halt
                self.audit_logger.log(
                    "error",
                    "pipeline_halted",
                    {
                        "pipeline": self.name,
                        "step": failed_step,
                        "reason": reason,
                        "errors": len(state.errors),
                    },
                )
                return PipelineHalted(
                    step=failed_step,
                    reason=reason,
                    errors=state.errors,
                    metrics=dict(state.metrics),
                    run_id=run_id,
                )

        self._record_run(run_start, "completed")
        self.audit_logger.log(
            "info",
            "pipeline_completed",
            {"pipeline": self.name, "errors": len(state.errors)},
        )
        return PipelineSuccess(
            value=state.value,
            errors=state.errors,
            metrics=dict(state.metrics),
            run_id=run_id,
        )

    def _resolve_options(
        self,
        options: Union[RunOptions, Dict[str, Any], None],
        overrides: Dict[str, Any],
    ) -> RunOptions:
        if isinstance(options, RunOptions):
            if not overrides:
                return options
            options = options.model_dump(exclude_none=True)
        return RunOptions.model_validate({**(options or {}), **overrides})

    def _execute_step(
        self,
        step: Step,
        state: PipelineRunState,
        options: RunOptions,
    ) -> Tuple[PipelineRunState, Optional[_Halt]]:
        """Run one step, its validation and, on failure, the strategy."""
        policy = options.retry_policy_for(step.name)
        self.audit_logger.log(
            "info",
            "step_start",
            {"step": step.name, "max_attempts": policy.max_attempts},
        )

        with self.metrics_collector.span(
            "pipeline.step", {"pipeline": self.name, "step": step.name}
        ) as span:
            step_start = time.perf_counter()
            result = self.retry_executor.retry_with_backoff(
                lambda: self._invoke(step, state.value),
                policy,
                operation_name=step.name,
            )
            duration = time.perf_counter() - step_start
            span["outcome"] = "ok" if isinstance(result, Ok) else "error"

        state = state.with_metric(step.name, duration)
        self.audit_logger.log(
            "info",
            "step_end",
            {"step": step.name, "duration_seconds": duration, "outcome": span["outcome"]},
        )

        if isinstance(result, Err):
            self.audit_logger.log(
                "error", "step_failed", {"step": step.name, "reason": result.reason}
            )
            # The step made no progress; its input is carried forward
            return self._handle_failure(
                options.error_strategy,
                step,
                result.reason,
                [(state.value, result.reason)],
                state,
                remainder=state.value,
            )

        if not step.has_validator:
            return state.advance(result.value), None

        outcome, duration = self._validate(step, result.value)
        state = state.with_metric(step.validation_metric, duration)

        if isinstance(outcome, Ok):
            return state.advance(outcome.value), None
        if isinstance(outcome, Partitioned):
            return self._handle_failure(
                options.error_strategy,
                step,
                outcome.invalid,
                outcome.invalid,
                state,
                remainder=outcome.valid,
            )
        # Single-record failure: nothing valid remains
        return self._handle_failure(
            options.error_strategy,
            step,
            outcome.reason,
            [(result.value, outcome.reason)],
            state,
            remainder=None,
        )

    def _invoke(self, step: Step, value: Any) -> Result:
        """Call a step body, converting raised faults and bad returns to Err."""
        try:
            result = step.body(value)
        except Exception as exc:
            logger.warning(f"Step {step.name} raised {exc!r}")
            return unexpected_error(exc)
        if not is_result(result):
            return Err(f"Invalid step result: {result!r}")
        return result

    def _validate(self, step: Step, value: Any) -> Tuple[Union[Ok, Err, Partitioned], float]:
        """Run a step's validator; validation is never retried."""
        self.audit_logger.log("debug", "validation_start", {"step": step.name})

        with self.metrics_collector.span(
            "pipeline.validation", {"pipeline": self.name, "step": step.name}
        ) as span:
            validation_start = time.perf_counter()
            try:
                outcome = step.validator(value)
            except Exception as exc:
                logger.warning(f"Validator for {step.name} raised {exc!r}")
                outcome = unexpected_error(exc)
            malformed_partition = isinstance(outcome, Partitioned) and not isinstance(
                outcome.invalid, (list, tuple)
            )
            if malformed_partition or not isinstance(outcome, (Ok, Err, Partitioned)):
                outcome = Err(f"Invalid validation result: {outcome!r}")
            duration = time.perf_counter() - validation_start
            span["outcome"] = "ok" if isinstance(outcome, Ok) else "invalid"

        self.audit_logger.log(
            "info",
            "validation_end",
            {"step": step.name, "duration_seconds": duration, "outcome": span["outcome"]},
        )
        return outcome, duration

    def _handle_failure(
        self,
        strategy: ErrorStrategy,
        step: Step,
        reason: Any,
        invalid_items: Iterable[Any],
        state: PipelineRunState,
        remainder: Any,
    ) -> Tuple[PipelineRunState, Optional[_Halt]]:
        """
        Dispatch a failure to the error strategy.

        fail_fast halts with ``reason`` as-is; collect_errors normalizes
        ``invalid_items`` into error entries and continues with ``remainder``.
        """
        if strategy is ErrorStrategy.FAIL_FAST:
            return state, (step.name, reason)

        entries = normalize_invalid_items(step.name, invalid_items)
        self.metrics_collector.record_count(
            "pipeline.errors_collected", len(entries), {"step": step.name}
        )
        self.audit_logger.log(
            "warning",
            "errors_collected",
            {"step": step.name, "count": len(entries), "total": len(state.errors) + len(entries)},
        )
        return state.collect(entries, remainder), None

    def _record_run(self, run_start: float, outcome: str) -> None:
        self.metrics_collector.record_timing(
            "pipeline.run.duration",
            time.perf_counter() - run_start,
            {"pipeline": self.name, "outcome": outcome},
        )
