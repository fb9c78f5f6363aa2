"""
Console Audit Logger.

A simple audit logger that outputs to the console.
"""

from __future__ import annotations

from contextvars import ContextVar
from datetime import datetime
from typing import Any, Dict, Optional

_QUIET_LEVELS = {"debug"}


class ConsoleAuditLogger:
    """Simple console-based audit logger."""

    def __init__(self, verbose: bool = True) -> None:
        """
        Initialize console logger.

        Args:
            verbose: If True, log all events. If False, debug events are dropped.
        """
        self._verbose = verbose
        self._correlation_id: ContextVar[Optional[str]] = ContextVar(
            "console_audit.correlation_id", default=None
        )

    def set_correlation_id(self, correlation_id: str) -> None:
        """Set correlation ID for subsequent log entries."""
        self._correlation_id.set(correlation_id)

    def log(
        self,
        level: str,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Print one event with its metadata."""
        if not self._verbose and level.lower() in _QUIET_LEVELS:
            return
        if metadata:
            message = f"{message} | " + " ".join(
                f"{k}={v!r}" for k, v in metadata.items()
            )
        self._log(level.upper(), message)

    def _log(self, level: str, message: str) -> None:
        """Internal logging method."""
        timestamp = datetime.now().strftime("%H:%M:%S")
        correlation_id = self._correlation_id.get()
        corr_id = correlation_id[:8] if correlation_id else "--------"
        print(f"[{timestamp}] [{corr_id}] [{level:5}] {message}")
