"""
Unit Tests for ObservabilityManager.

Test Aspects Covered:
    ✅ Business Logic: Correlation IDs, structured events, metrics, spans
    ✅ Protocols: Usable as logging sink and metrics collector
"""

from __future__ import annotations

import logging

import pytest

from etl_framework.config.models import LoggingConfig
from etl_framework.interfaces.audit_logger import AuditLogger
from etl_framework.interfaces.metrics_collector import MetricsCollector
from etl_framework.observability.observability_manager import (
    ObservabilityManager,
    get_correlation_id,
)


@pytest.fixture
def manager() -> ObservabilityManager:
    return ObservabilityManager(use_json=True)


class TestCorrelationIds:
    """Test correlation ID management."""

    def test_set_and_get_correlation_id(self, manager: ObservabilityManager) -> None:
        manager.set_correlation_id("test-123")

        assert get_correlation_id() == "test-123"

    def test_generate_correlation_id(self, manager: ObservabilityManager) -> None:
        """
        SCENARIO: Generate new correlation ID
        EXPECTED: UUID format, set in context
        """
        correlation_id = manager.generate_correlation_id()

        assert len(correlation_id) == 36
        assert get_correlation_id() == correlation_id

    def test_trace_context(self, manager: ObservabilityManager) -> None:
        manager.set_correlation_id("trace-456")

        context = manager.get_trace_context()

        assert context["correlation_id"] == "trace-456"
        assert context["service_name"] == "etl_framework"


class TestEventLogging:
    """Test structured event logging."""

    def test_log_stores_event_with_metadata(self, manager: ObservabilityManager) -> None:
        manager.set_correlation_id("run-1")

        manager.log("warning", "retry_attempt_failed", {"attempt": 2})

        event = manager.get_events()[-1]
        assert event["event_type"] == "retry_attempt_failed"
        assert event["attempt"] == 2
        assert event["correlation_id"] == "run-1"

    def test_event_key_in_metadata_is_not_passed_twice(
        self, manager: ObservabilityManager
    ) -> None:
        manager.log("info", "custom", {"event": "shadow"})

        assert manager.get_events()[-1]["event"] == "shadow"

    def test_renders_json(self, capsys) -> None:
        manager = ObservabilityManager(use_json=True)

        manager.log("error", "step_failed", {"step": "load"})

        out = capsys.readouterr().out
        assert '"step_failed"' in out
        assert '"step": "load"' in out

    def test_managers_keep_their_own_rendering(self, capsys) -> None:
        """
        SCENARIO: A second manager with console output and a higher level
        EXPECTED: The first manager still renders JSON at its own level
        """
        json_manager = ObservabilityManager(use_json=True)
        ObservabilityManager(use_json=False, log_level=logging.ERROR)

        json_manager.log("info", "step_start", {"step": "extract"})

        out = capsys.readouterr().out
        assert '"event": "step_start"' in out
        assert '"step": "extract"' in out

    def test_level_filters_rendering_not_storage(self, capsys) -> None:
        manager = ObservabilityManager(log_level=logging.ERROR)

        manager.log("info", "step_start")

        assert capsys.readouterr().out == ""
        assert manager.get_events()[-1]["event_type"] == "step_start"

    def test_from_config(self, capsys) -> None:
        """
        SCENARIO: Manager built from the logging section of a config
        EXPECTED: Level and JSON flag taken from the config
        """
        config = LoggingConfig.model_validate({"level": "warning", "json": True})

        manager = ObservabilityManager.from_config(config)
        manager.log("info", "hidden")
        manager.log("warning", "shown")

        out = capsys.readouterr().out
        assert manager.log_level == logging.WARNING
        assert manager.use_json is True
        assert "hidden" not in out
        assert '"event": "shown"' in out

    def test_clear(self, manager: ObservabilityManager) -> None:
        manager.log("info", "x")
        manager.record_count("errors", 1)

        manager.clear()

        assert manager.get_events() == []
        assert manager.get_metrics() == {}


class TestMetrics:
    """Test metrics recording."""

    def test_span_records_histogram(self, manager: ObservabilityManager) -> None:
        with manager.span("pipeline.step", {"step": "extract"}) as span:
            span["outcome"] = "error"

        entry = manager.get_metrics()["pipeline.step.duration"][0]
        assert entry["type"] == "histogram"
        assert entry["tags"] == {"step": "extract", "outcome": "error"}

    def test_record_count_is_counter(self, manager: ObservabilityManager) -> None:
        manager.record_count("pipeline.errors_collected", 3)

        entry = manager.get_metrics()["pipeline.errors_collected"][0]
        assert entry["type"] == "counter"
        assert entry["value"] == 3.0

    def test_satisfies_both_protocols(self, manager: ObservabilityManager) -> None:
        assert isinstance(manager, AuditLogger)
        assert isinstance(manager, MetricsCollector)
