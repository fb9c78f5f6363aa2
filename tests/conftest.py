"""
Pytest Configuration and Shared Fixtures.

This module contains fixtures available to all tests.
"""

from __future__ import annotations

from typing import List
from unittest.mock import Mock

import pytest

from etl_framework.adapters.console_logger import ConsoleAuditLogger
from etl_framework.adapters.metrics_collector import InMemoryMetricsCollector
from etl_framework.domain.value_objects import Ok, Partitioned
from etl_framework.pipeline.builder import PipelineBuilder
from etl_framework.resilience.retry import RetryExecutor
from etl_framework.validation.schema_validator import (
    of_type,
    required,
    validate_batch,
)


@pytest.fixture
def audit_logger() -> Mock:
    """Logging sink recording every call."""
    return Mock()


@pytest.fixture
def console_logger() -> ConsoleAuditLogger:
    """Create console logger for testing."""
    return ConsoleAuditLogger(verbose=False)


@pytest.fixture
def metrics_collector() -> InMemoryMetricsCollector:
    """Create metrics collector for testing."""
    return InMemoryMetricsCollector()


@pytest.fixture
def sleeps() -> List[float]:
    """Delays requested by the retry executor."""
    return []


@pytest.fixture
def retry_executor(audit_logger: Mock, sleeps: List[float]) -> RetryExecutor:
    """Retry executor that records delays instead of blocking."""
    return RetryExecutor(audit_logger=audit_logger, sleep=sleeps.append)


@pytest.fixture
def build(audit_logger, metrics_collector, retry_executor):
    """Build a pipeline from a builder with the test collaborators."""

    def _build(builder: PipelineBuilder):
        return builder.build(
            audit_logger=audit_logger,
            metrics_collector=metrics_collector,
            retry_executor=retry_executor,
        )

    return _build


@pytest.fixture
def doubling_builder() -> PipelineBuilder:
    """extract -> transform (double) -> load (sum)."""
    builder = PipelineBuilder("doubling")
    builder.add_step("extract", lambda _: Ok([1, 2, 3, 4, 5]))
    builder.add_step("transform", lambda data: Ok([x * 2 for x in data]))
    builder.add_step("load", lambda data: Ok(sum(data)))
    return builder


@pytest.fixture
def tripling_builder() -> PipelineBuilder:
    """Like doubling_builder but triples and rejects elements above 8."""

    def validate_transform(data):
        invalid = [x for x in data if x > 8]
        if not invalid:
            return Ok(data)
        return Partitioned(invalid=invalid, valid=[x for x in data if x <= 8])

    builder = PipelineBuilder("tripling")
    builder.add_step("extract", lambda _: Ok([1, 2, 3, 4, 5]))
    builder.add_step(
        "transform",
        lambda data: Ok([x * 3 for x in data]),
        validator=validate_transform,
    )
    builder.add_step("load", lambda data: Ok(sum(data)))
    return builder


PEOPLE_SCHEMA = {
    "id": [required, of_type("Integer")],
    "name": [required, of_type("String")],
    "age": [required, of_type("Integer")],
}


@pytest.fixture
def people_builder() -> PipelineBuilder:
    """Records validated on extract, ages incremented on transform."""
    builder = PipelineBuilder("people")

    @builder.step()
    def extract(_):
        return Ok(
            [
                {"id": 1, "name": "Alice", "age": 30},
                {"id": 2, "name": "Bob", "age": "25"},
                {"id": 3, "name": "Charlie", "age": 35},
            ]
        )

    @builder.validator("extract")
    def validate_extract(data):
        return validate_batch(data, PEOPLE_SCHEMA)

    @builder.step()
    def transform(records):
        return Ok([{**record, "age": record["age"] + 1} for record in records])

    return builder
