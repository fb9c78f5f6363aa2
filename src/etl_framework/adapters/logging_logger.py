"""
Standard Library Audit Logger.

Routes audit events to a ``logging`` logger. Used by default when no
logging sink is injected.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Dict, Optional

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


class LoggingAuditLogger:
    """Audit logger backed by the ``logging`` module."""

    def __init__(self, logger_name: str = "etl_framework.audit") -> None:
        self._logger = logging.getLogger(logger_name)
        # Per context, so concurrent runs sharing this sink keep their own ID
        self._correlation_id: ContextVar[Optional[str]] = ContextVar(
            f"{logger_name}.correlation_id", default=None
        )

    def set_correlation_id(self, correlation_id: str) -> None:
        self._correlation_id.set(correlation_id)

    def log(
        self,
        level: str,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        extra = {"correlation_id": self._correlation_id.get(), **(metadata or {})}
        details = " ".join(f"{k}={v!r}" for k, v in extra.items() if v is not None)
        self._logger.log(
            _LEVELS.get(level.lower(), logging.INFO),
            f"{message} | {details}" if details else message,
        )
