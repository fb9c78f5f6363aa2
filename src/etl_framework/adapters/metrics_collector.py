"""
In-Memory Metrics Collector.

A simple metrics collector that stores metrics in memory.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from datetime import datetime
from threading import Lock
from typing import Any, Dict, Iterator, List, Optional


class InMemoryMetricsCollector:
    """Simple in-memory metrics collector."""

    def __init__(self) -> None:
        """Initialize the metrics collector."""
        self._metrics: Dict[str, List[Dict[str, Any]]] = {}
        self._lock = Lock()

    def record_timing(
        self,
        name: str,
        duration_seconds: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """Record a timing metric."""
        with self._lock:
            self._record(name, "timing", duration_seconds, tags)

    def record_count(
        self,
        name: str,
        value: int,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """Record a count metric."""
        with self._lock:
            self._record(name, "count", value, tags)

    @contextmanager
    def span(
        self,
        name: str,
        tags: Optional[Dict[str, str]] = None,
    ) -> Iterator[Dict[str, Any]]:
        """Time the enclosed block and record it as ``<name>.duration``."""
        span_info: Dict[str, Any] = {"outcome": "ok"}
        start = time.perf_counter()
        try:
            yield span_info
        except Exception:
            span_info["outcome"] = "exception"
            raise
        finally:
            self.record_timing(
                f"{name}.duration",
                time.perf_counter() - start,
                {**(tags or {}), "outcome": str(span_info.get("outcome"))},
            )

    def get_metrics(self) -> Dict[str, Any]:
        """Get a per-name summary of all collected metrics."""
        with self._lock:
            summary = {}
            for name, entries in self._metrics.items():
                if entries:
                    values = [e["value"] for e in entries]
                    summary[name] = {
                        "count": len(values),
                        "total": sum(values),
                        "last": values[-1],
                    }
            return summary

    def get_entries(self, name: str) -> List[Dict[str, Any]]:
        """Get the raw entries recorded under ``name``."""
        with self._lock:
            return list(self._metrics.get(name, []))

    def clear(self) -> None:
        """Clear all metrics."""
        with self._lock:
            self._metrics.clear()

    def _record(
        self,
        name: str,
        metric_type: str,
        value: Any,
        tags: Optional[Dict[str, str]],
    ) -> None:
        """Internal recording method."""
        if name not in self._metrics:
            self._metrics[name] = []

        self._metrics[name].append(
            {
                "type": metric_type,
                "value": value,
                "tags": tags or {},
                "timestamp": datetime.now().isoformat(),
            }
        )
