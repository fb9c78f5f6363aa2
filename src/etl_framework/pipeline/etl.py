"""
ETL Runner - Fixed Extract, Transform, Load Sequence.

A shortcut for the common three-stage case. Unlike ``Pipeline``, each
stage's schema validation runs inside the retried unit, so a record that
fails validation is re-extracted (or re-transformed, re-loaded) until the
attempts run out.

Example:
    >>> from etl_framework.domain import Ok
    >>> from etl_framework.validation import of_type, required
    >>> result = run_etl(
    ...     lambda: Ok({"rows": 3}),
    ...     lambda data: Ok({**data, "clean": True}),
    ...     lambda data: Ok("loaded"),
    ...     extract_validation={"rows": [required, of_type("Integer")]},
    ... )
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Tuple

from etl_framework.adapters.logging_logger import LoggingAuditLogger
from etl_framework.adapters.metrics_collector import InMemoryMetricsCollector
from etl_framework.config.models import RunOptions
from etl_framework.domain.value_objects import Err, Ok, Result, StageFailure, is_result
from etl_framework.interfaces.audit_logger import AuditLogger
from etl_framework.interfaces.metrics_collector import MetricsCollector
from etl_framework.pipeline.orchestrator import unexpected_error
from etl_framework.resilience.retry import RetryExecutor
from etl_framework.validation.schema_validator import ValidationSchema, validate

STAGES = ("extract", "transform", "load")
VALIDATION_SUFFIX = "_validation"


class EtlRunner:
    """Runs extract, transform and load with retry, validation and spans."""

    def __init__(
        self,
        audit_logger: Optional[AuditLogger] = None,
        metrics_collector: Optional[MetricsCollector] = None,
        retry_executor: Optional[RetryExecutor] = None,
    ) -> None:
        self.audit_logger = audit_logger or LoggingAuditLogger()
        self.metrics_collector = metrics_collector or InMemoryMetricsCollector()
        self.retry_executor = retry_executor or RetryExecutor(audit_logger=self.audit_logger)

    def run(
        self,
        extractor: Callable[[], Result],
        transformer: Callable[[Any], Result],
        loader: Callable[[Any], Result],
        **options: Any,
    ) -> Result:
        """
        Run the three stages, stopping at the first failed one.

        Args:
            extractor: Zero-argument callable returning Ok(data) or Err
            transformer: Callable on the extracted data
            loader: Callable on the transformed data
            **options: ``<stage>_retry`` overrides and ``<stage>_validation``
                schemas

        Returns:
            Ok(loaded_result) or Err(StageFailure(stage, reason))

        Raises:
            ValueError: On option keys naming no known stage setting
            pydantic.ValidationError: On invalid retry overrides
        """
        schemas, run_options = self._parse_options(options)
        stages = (
            ("extract", lambda _: extractor()),
            ("transform", transformer),
            ("load", loader),
        )

        data: Any = None
        for stage, func in stages:
            result = self.retry_executor.retry_with_backoff(
                self._stage_attempt(stage, func, data, schemas.get(stage, {})),
                run_options.retry_policy_for(stage),
                operation_name=f"etl.{stage}",
            )
            if isinstance(result, Err):
                failure = result.reason
                self.audit_logger.log(
                    "error",
                    "etl_failed",
                    {"stage": failure.stage, "reason": failure.reason},
                )
                return result
            data = result.value

        self.audit_logger.log("info", "etl_completed", {"result": data})
        return Ok(data)

    def _stage_attempt(
        self,
        stage: str,
        func: Callable[[Any], Result],
        data: Any,
        schema: ValidationSchema,
    ) -> Callable[[], Result]:
        """Build the retried unit: call the stage, then validate its output."""

        def attempt() -> Result:
            self.audit_logger.log("info", "etl_stage_start", {"stage": stage})
            with self.metrics_collector.span(f"etl.{stage}", {"stage": stage}) as span:
                try:
                    result = func(data)
                except Exception as exc:
                    result = unexpected_error(exc)
                if not is_result(result):
                    result = Err(f"Invalid stage result: {result!r}")
                if isinstance(result, Ok):
                    result = validate(result.value, schema)
                if isinstance(result, Ok):
                    self.audit_logger.log("info", "etl_stage_end", {"stage": stage})
                    return result
                span["outcome"] = "error"

            self.audit_logger.log(
                "error", "etl_stage_failed", {"stage": stage, "reason": result.reason}
            )
            return Err(StageFailure(stage, result.reason))

        return attempt

    def _parse_options(
        self, options: Dict[str, Any]
    ) -> Tuple[Dict[str, ValidationSchema], RunOptions]:
        schemas: Dict[str, ValidationSchema] = {}
        retry: Dict[str, Any] = {}
        for key, value in options.items():
            stage = key[: -len(VALIDATION_SUFFIX)] if key.endswith(VALIDATION_SUFFIX) else None
            if stage in STAGES:
                schemas[stage] = value or {}
            elif key in {f"{s}_retry" for s in STAGES}:
                retry[key] = value
            else:
                raise ValueError(f"Unknown ETL option: {key}")
        return schemas, RunOptions.model_validate(retry)


def run_etl(
    extractor: Callable[[], Result],
    transformer: Callable[[Any], Result],
    loader: Callable[[Any], Result],
    **options: Any,
) -> Result:
    """Run extract, transform and load through a default ``EtlRunner``."""
    return EtlRunner().run(extractor, transformer, loader, **options)
