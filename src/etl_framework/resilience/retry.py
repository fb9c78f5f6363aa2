"""
Retry Executor - Bounded Exponential Backoff.

Runs a zero-argument operation returning ``Ok``/``Err`` until it succeeds
or the attempt cap is reached, blocking between attempts.

Design Notes:
    - Policy is local and blind: no reasoning about why an attempt failed
    - The last ``Err`` is returned unchanged on exhaustion
    - ``sleep`` is injectable so callers and tests control blocking
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from etl_framework.adapters.logging_logger import LoggingAuditLogger
from etl_framework.config.models import RetryPolicy
from etl_framework.domain.value_objects import Err, Ok, Result, is_result
from etl_framework.interfaces.audit_logger import AuditLogger

logger = logging.getLogger(__name__)


class RetryExecutor:
    """Retries ``Result``-returning operations with exponential backoff."""

    def __init__(
        self,
        audit_logger: Optional[AuditLogger] = None,
        sleep: Callable[[float], Any] = time.sleep,
    ) -> None:
        """
        Initialize retry executor.

        Args:
            audit_logger: Sink for retry_attempt_failed / retries_exhausted
            sleep: Blocking sleep taking seconds
        """
        self.audit_logger = audit_logger or LoggingAuditLogger()
        self._sleep = sleep

    def retry_with_backoff(
        self,
        operation: Callable[[], Result],
        policy: Optional[RetryPolicy] = None,
        operation_name: str = "operation",
    ) -> Result:
        """
        Execute ``operation`` until it returns ``Ok`` or attempts run out.

        Args:
            operation: Zero-argument callable returning Ok or Err
            policy: Backoff policy (defaults to RetryPolicy())
            operation_name: Name for log events

        Returns:
            The first Ok, or the last Err unchanged
        """
        policy = policy or RetryPolicy()
        attempt = 1

        while True:
            result = operation()
            if not is_result(result):
                result = Err(f"Invalid result: {result!r}")

            if isinstance(result, Ok):
                if attempt > 1:
                    logger.info(f"{operation_name} succeeded on attempt {attempt}")
                return result

            if attempt >= policy.max_attempts:
                self.audit_logger.log(
                    "error",
                    "retries_exhausted",
                    {
                        "operation": operation_name,
                        "attempts": attempt,
                        "reason": result.reason,
                    },
                )
                return result

            delay = self.calculate_delay(policy, attempt)
            self.audit_logger.log(
                "warning",
                "retry_attempt_failed",
                {
                    "operation": operation_name,
                    "attempt": attempt,
                    "max_attempts": policy.max_attempts,
                    "delay_seconds": delay,
                    "reason": result.reason,
                },
            )
            self._sleep(delay)
            attempt += 1

    @staticmethod
    def calculate_delay(policy: RetryPolicy, attempt: int) -> float:
        """Delay after failed ``attempt``: min(initial * 2^(attempt-1), max)."""
        return min(policy.initial_delay * (2 ** (attempt - 1)), policy.max_delay)


def retry_with_backoff(
    operation: Callable[[], Result],
    policy: Optional[RetryPolicy] = None,
) -> Result:
    """Run ``operation`` through a default ``RetryExecutor``."""
    return RetryExecutor().retry_with_backoff(operation, policy)
