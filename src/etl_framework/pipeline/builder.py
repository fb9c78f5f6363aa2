"""
Pipeline Builder - Ordered Step Registration.

Collects step descriptors in declaration order and produces an immutable
``Pipeline``. Validators are attached to steps when the pipeline is built.

Example:
    >>> from etl_framework.domain import Ok
    >>> builder = PipelineBuilder("numbers")
    >>> @builder.step()
    ... def extract(_):
    ...     return Ok([1, 2, 3])
    >>> @builder.validator("extract")
    ... def validate_extract(data):
    ...     return Ok(data)
    >>> pipeline = builder.build()
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from etl_framework.domain.entities import Step, StepBody, StepValidator
from etl_framework.interfaces.audit_logger import AuditLogger
from etl_framework.interfaces.metrics_collector import MetricsCollector
from etl_framework.pipeline.errors import PipelineDefinitionError
from etl_framework.pipeline.orchestrator import RESERVED_STEP_NAMES, Pipeline
from etl_framework.resilience.retry import RetryExecutor


class PipelineBuilder:
    """Declares steps once, in order, before any run."""

    def __init__(self, name: str = "pipeline") -> None:
        self.name = name
        self._steps: List[Step] = []
        self._validators: Dict[str, StepValidator] = {}

    def add_step(
        self,
        name: str,
        body: StepBody,
        validator: Optional[StepValidator] = None,
    ) -> PipelineBuilder:
        """
        Append a step.

        Args:
            name: Unique step identifier
            body: Callable taking the accumulated value, returning Ok/Err
            validator: Optional callable checking the body's output

        Returns:
            The builder, for chaining

        Raises:
            PipelineDefinitionError: On empty, reserved or duplicate names
        """
        if not name:
            raise PipelineDefinitionError("Step name must not be empty")
        if name in RESERVED_STEP_NAMES:
            raise PipelineDefinitionError(f"Step name is reserved: {name}")
        if any(step.name == name for step in self._steps):
            raise PipelineDefinitionError(f"Duplicate step name: {name}")
        self._steps.append(Step(name=name, body=body))
        if validator is not None:
            self._set_validator(name, validator)
        return self

    def step(
        self,
        name: Optional[str] = None,
        validator: Optional[StepValidator] = None,
    ) -> Callable[[StepBody], StepBody]:
        """Decorator form of ``add_step``; defaults to the function name."""

        def decorator(body: StepBody) -> StepBody:
            self.add_step(name or body.__name__, body, validator)
            return body

        return decorator

    def validator(self, step_name: str) -> Callable[[StepValidator], StepValidator]:
        """Decorator attaching a validator to ``step_name``."""

        def decorator(func: StepValidator) -> StepValidator:
            self._set_validator(step_name, func)
            return func

        return decorator

    def build(
        self,
        audit_logger: Optional[AuditLogger] = None,
        metrics_collector: Optional[MetricsCollector] = None,
        retry_executor: Optional[RetryExecutor] = None,
    ) -> Pipeline:
        """
        Resolve validators and freeze the step list.

        Raises:
            PipelineDefinitionError: If a validator names an undeclared step,
                or a step name equals another step's validation metric key
        """
        declared = {step.name for step in self._steps}
        unknown = sorted(set(self._validators) - declared)
        if unknown:
            raise PipelineDefinitionError(
                f"Validators registered for undeclared steps: {', '.join(unknown)}"
            )

        steps = tuple(
            Step(
                name=step.name,
                body=step.body,
                validator=self._validators.get(step.name),
            )
            for step in self._steps
        )
        return Pipeline(
            name=self.name,
            steps=steps,
            audit_logger=audit_logger,
            metrics_collector=metrics_collector,
            retry_executor=retry_executor,
        )

    def _set_validator(self, step_name: str, func: StepValidator) -> None:
        if step_name in self._validators:
            raise PipelineDefinitionError(f"Step {step_name} already has a validator")
        self._validators[step_name] = func
