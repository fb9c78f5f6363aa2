"""
Observability Package - Unified Logging, Metrics, Tracing.

    - ObservabilityManager: Structured logging with correlation IDs,
      spans and metrics

Design Principles:
    - Injected into pipelines, never installed as a global
    - Structured JSON logging via structlog
    - Correlation ID propagation for end-to-end tracing
"""

from etl_framework.observability.observability_manager import (
    ObservabilityManager,
    get_correlation_id,
    set_correlation_id,
)

__all__ = [
    "ObservabilityManager",
    "get_correlation_id",
    "set_correlation_id",
]
