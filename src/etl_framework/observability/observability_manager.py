"""
Observability Manager - Structured Run Events and Telemetry.

One object that a pipeline can take as both its logging sink and its
metrics collector. Events go through structlog (JSON by default) and are
kept in memory alongside the recorded metrics, all stamped with the
current run's correlation ID.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

import structlog

from etl_framework.config.models import LoggingConfig

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> Optional[str]:
    """Correlation ID of the run executing in this context."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id.set(correlation_id)


class ObservabilityManager:
    """
    structlog-backed run events plus in-memory metrics.

    Satisfies both ``AuditLogger`` and ``MetricsCollector``:

        >>> manager = ObservabilityManager()
        >>> pipeline = builder.build(audit_logger=manager, metrics_collector=manager)
    """

    def __init__(
        self,
        service_name: str = "etl_framework",
        use_json: bool = True,
        log_level: int = logging.INFO,
    ) -> None:
        """
        Args:
            service_name: ``service_name`` reported in trace context
            use_json: Render JSON lines; otherwise structlog's console renderer
            log_level: Events below this level are not rendered (still stored)
        """
        self.service_name = service_name
        self.use_json = use_json
        self.log_level = log_level
        self._metrics: Dict[str, List[Dict[str, Any]]] = {}
        self._events: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

        # Own processor chain; structlog's global configuration is left alone
        self._logger = structlog.wrap_logger(
            structlog.PrintLogger(),
            processors=self._processors(),
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
            context_class=dict,
            cache_logger_on_first_use=False,
        )

    @classmethod
    def from_config(
        cls,
        config: LoggingConfig,
        service_name: str = "etl_framework",
    ) -> ObservabilityManager:
        """Build a manager from the ``logging`` section of a pipeline config."""
        return cls(
            service_name=service_name,
            use_json=config.json_output,
            log_level=config.level_number,
        )

    def _processors(self) -> List[Any]:
        renderer = (
            structlog.processors.JSONRenderer(default=repr)
            if self.use_json
            else structlog.dev.ConsoleRenderer()
        )
        return [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ]

    def set_correlation_id(self, correlation_id: str) -> None:
        """Tag every later event and metric with ``correlation_id``."""
        set_correlation_id(correlation_id)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

    def generate_correlation_id(self) -> str:
        correlation_id = str(uuid.uuid4())
        self.set_correlation_id(correlation_id)
        return correlation_id

    def log(
        self,
        level: str,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Store and render one run event.

        Args:
            level: debug, info, warning or error (anything else renders as info)
            message: Event name, e.g. "step_failed"
            metadata: Event fields
        """
        event = {
            "event_type": message,
            "timestamp": datetime.now().isoformat(),
            "correlation_id": get_correlation_id(),
            **(metadata or {}),
        }
        with self._lock:
            self._events.append(event)

        emit = getattr(self._logger, level.lower(), self._logger.info)
        # structlog reserves "event" for the positional message
        emit(message, **{k: v for k, v in event.items() if k != "event"})

    def record_timing(
        self,
        name: str,
        duration_seconds: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        self._record(name, "histogram", duration_seconds, tags)

    def record_count(
        self,
        name: str,
        value: int,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        self._record(name, "counter", float(value), tags)

    @contextmanager
    def span(
        self,
        name: str,
        tags: Optional[Dict[str, str]] = None,
    ) -> Iterator[Dict[str, Any]]:
        """Time the block as ``<name>.duration`` and log a debug span_end."""
        span_info: Dict[str, Any] = {"outcome": "ok"}
        start = time.perf_counter()
        try:
            yield span_info
        except Exception:
            span_info["outcome"] = "exception"
            raise
        finally:
            duration = time.perf_counter() - start
            span_tags = {**(tags or {}), "outcome": str(span_info["outcome"])}
            self.record_timing(f"{name}.duration", duration, span_tags)
            self.log(
                "debug",
                "span_end",
                {"span": name, "duration_seconds": duration, **span_tags},
            )

    def get_trace_context(self) -> Dict[str, Any]:
        return {
            "correlation_id": get_correlation_id(),
            "service_name": self.service_name,
            "timestamp": datetime.now().isoformat(),
        }

    def get_metrics(self) -> Dict[str, List[Dict[str, Any]]]:
        """Raw metric entries keyed by name."""
        with self._lock:
            return {name: list(entries) for name, entries in self._metrics.items()}

    def get_events(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._events)

    def clear(self) -> None:
        with self._lock:
            self._metrics.clear()
            self._events.clear()

    def _record(
        self,
        name: str,
        metric_type: str,
        value: float,
        tags: Optional[Dict[str, str]],
    ) -> None:
        entry = {
            "type": metric_type,
            "value": value,
            "tags": tags or {},
            "timestamp": datetime.now().isoformat(),
            "correlation_id": get_correlation_id(),
        }
        with self._lock:
            self._metrics.setdefault(name, []).append(entry)
