"""
ETL Framework - In-Process Orchestration of Multi-Stage Pipelines.

Runs a declared sequence of named steps over an accumulated value, with
per-step validation, retry with exponential backoff, two error-handling
strategies and per-step timing metrics.

Architecture:
    - Hexagonal Architecture (Ports & Adapters)
    - Dependency Injection for logging and telemetry collaborators
    - Configuration-driven run options via YAML

Main Components:
    - domain: Result values, steps, run state and outcomes
    - interfaces: Protocols for the logging sink and metrics collector
    - validation: Schema-driven field checks
    - resilience: Retry executor
    - pipeline: Builder, orchestrator and ETL runner
    - adapters / observability: Logging and metrics implementations
    - config: Configuration models and loaders

Example:
    >>> from etl_framework import Ok, PipelineBuilder
    >>> pipeline = (
    ...     PipelineBuilder("numbers")
    ...     .add_step("extract", lambda _: Ok([1, 2, 3]))
    ...     .add_step("load", lambda data: Ok(sum(data)))
    ...     .build()
    ... )
    >>> outcome = pipeline.run(None)
    >>> outcome.value
    6

"""

import logging

from etl_framework.config.models import RetryPolicy, RunOptions
from etl_framework.domain.entities import (
    ErrorEntry,
    ErrorStrategy,
    PipelineHalted,
    PipelineSuccess,
    Step,
)
from etl_framework.domain.value_objects import Err, FieldError, Ok, Partitioned
from etl_framework.pipeline.builder import PipelineBuilder
from etl_framework.pipeline.etl import run_etl
from etl_framework.pipeline.orchestrator import Pipeline
from etl_framework.resilience.retry import RetryExecutor, retry_with_backoff
from etl_framework.validation.schema_validator import (
    TypeTag,
    of_type,
    required,
    validate,
    validate_batch,
)

__version__ = "0.1.0"


def configure_logging(
    level: int = logging.INFO,
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
) -> None:
    """
    Configure logging for the framework.

    Call this at application startup to see log messages.
    By default, only WARNING and above are visible.

    Args:
        level: Logging level (default: INFO)
        format: Log message format

    Example:
        >>> import etl_framework
        >>> etl_framework.configure_logging(logging.DEBUG)
    """
    logging.basicConfig(
        level=level,
        format=format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("etl_framework").setLevel(level)


__all__ = [
    "Err",
    "ErrorEntry",
    "ErrorStrategy",
    "FieldError",
    "Ok",
    "Partitioned",
    "Pipeline",
    "PipelineBuilder",
    "PipelineHalted",
    "PipelineSuccess",
    "RetryExecutor",
    "RetryPolicy",
    "RunOptions",
    "Step",
    "TypeTag",
    "configure_logging",
    "of_type",
    "required",
    "retry_with_backoff",
    "run_etl",
    "validate",
    "validate_batch",
]
