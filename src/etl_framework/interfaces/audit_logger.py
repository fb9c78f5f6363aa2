"""
Audit Logger Protocol.

Defines the logging sink the orchestrator and the retry executor write
their lifecycle events to.

The audit logger is responsible for:
    - Accepting (level, message, metadata) events
    - Maintaining correlation across a pipeline run

Design Notes:
    - Delivery guarantees are the adapter's concern
    - No side effects on pipeline decisions
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class AuditLogger(Protocol):
    """Abstract interface for the logging sink."""

    def set_correlation_id(self, correlation_id: str) -> None:
        """Set correlation ID for subsequent log entries."""
        ...

    def log(
        self,
        level: str,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Record one event.

        Args:
            level: debug, info, warning or error
            message: Human-readable description
            metadata: Structured context (step name, durations, ...)
        """
        ...
