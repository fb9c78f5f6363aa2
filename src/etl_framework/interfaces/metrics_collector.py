"""
Metrics Collector Protocol.

Defines the telemetry interface. The orchestrator wraps each unit of work
in a named span and records run-level timings and counts; aggregation and
reporting belong to the adapter.

Design Notes:
    - Non-blocking metric recording
    - Tag/label support for dimensionality
"""

from __future__ import annotations

from typing import Any, ContextManager, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class MetricsCollector(Protocol):
    """Abstract interface for metrics collection."""

    def record_timing(
        self,
        name: str,
        duration_seconds: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """Record a timing metric (histogram)."""
        ...

    def record_count(
        self,
        name: str,
        value: int,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """Record a count metric (counter)."""
        ...

    def span(
        self,
        name: str,
        tags: Optional[Dict[str, str]] = None,
    ) -> ContextManager[Dict[str, Any]]:
        """
        Time a unit of work.

        The yielded dict is mutable; set ``outcome`` on it to tag the
        recorded ``<name>.duration`` timing. Exceptions leaving the block
        are recorded with outcome ``exception`` and re-raised.
        """
        ...

    def get_metrics(self) -> Dict[str, Any]:
        """Get all collected metrics."""
        ...
