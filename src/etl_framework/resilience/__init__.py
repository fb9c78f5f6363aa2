"""
Resilience Package - Retry with Backoff.

    - RetryExecutor: Bounded exponential backoff over Ok/Err operations

Design Principles:
    - Retry transient failures locally, surface only the final one
    - No retry of validation failures (the orchestrator routes those)
"""

from etl_framework.resilience.retry import RetryExecutor, retry_with_backoff

__all__ = ["RetryExecutor", "retry_with_backoff"]
