"""
Core Domain Entities.

This module defines the fundamental entities the orchestrator operates on:
step descriptors, normalized error entries, the per-run state threaded
through the run loop, and the two tagged run outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from etl_framework.domain.value_objects import Result, ValidationOutcome

StepBody = Callable[[Any], Result]
StepValidator = Callable[[Any], ValidationOutcome]


class ErrorStrategy(str, Enum):
    """How the orchestrator reacts to a failed step or validation."""

    FAIL_FAST = "fail_fast"
    COLLECT_ERRORS = "collect_errors"


@dataclass(frozen=True)
class Step:
    """One named stage of a pipeline."""

    name: str
    body: StepBody
    validator: Optional[StepValidator] = None

    @property
    def has_validator(self) -> bool:
        return self.validator is not None

    @property
    def validation_metric(self) -> str:
        """Metric key under which the validation duration is recorded."""
        return f"{self.name}_validation"


@dataclass(frozen=True)
class ErrorEntry:
    """Normalized failure accumulated under ``collect_errors``."""

    step: str
    record: Any
    reason: str

    def as_tuple(self) -> Tuple[str, Any, str]:
        return (self.step, self.record, self.reason)


@dataclass(frozen=True)
class PipelineRunState:
    """
    State threaded through one pipeline run.

    Every transition returns a new state; metrics are extended, never
    replaced, and errors only grow.
    """

    value: Any
    errors: Tuple[ErrorEntry, ...] = ()
    metrics: Dict[str, float] = field(default_factory=dict)

    def with_metric(self, name: str, duration_seconds: float) -> PipelineRunState:
        return PipelineRunState(
            value=self.value,
            errors=self.errors,
            metrics={**self.metrics, name: duration_seconds},
        )

    def advance(self, value: Any) -> PipelineRunState:
        return PipelineRunState(value=value, errors=self.errors, metrics=dict(self.metrics))

    def collect(self, entries: Iterable[ErrorEntry], value: Any) -> PipelineRunState:
        return PipelineRunState(
            value=value,
            errors=self.errors + tuple(entries),
            metrics=dict(self.metrics),
        )


@dataclass(frozen=True)
class PipelineSuccess:
    """All steps consumed without halting."""

    value: Any
    errors: Tuple[ErrorEntry, ...]
    metrics: Dict[str, float]
    run_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return True

    def as_tuple(self) -> tuple:
        return ("ok", self.value, [e.as_tuple() for e in self.errors], dict(self.metrics))


@dataclass(frozen=True)
class PipelineHalted:
    """Run stopped at ``step`` under ``fail_fast``."""

    step: str
    reason: Any
    errors: Tuple[ErrorEntry, ...]
    metrics: Dict[str, float]
    run_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return False

    def as_tuple(self) -> tuple:
        return (
            "error",
            self.step,
            self.reason,
            [e.as_tuple() for e in self.errors],
            dict(self.metrics),
        )
