"""
Adapters Package - Infrastructure Implementations.

Concrete implementations of the protocols in the interfaces package.

Loggers:
    - LoggingAuditLogger: stdlib ``logging`` sink (default)
    - ConsoleAuditLogger: Simple console output

Metrics:
    - InMemoryMetricsCollector: Simple in-memory collection with spans

Design Principles:
    - All adapters implement their respective protocols
    - Easily swappable via Dependency Injection
    - No pipeline logic in adapters
"""

from etl_framework.adapters.console_logger import ConsoleAuditLogger
from etl_framework.adapters.logging_logger import LoggingAuditLogger
from etl_framework.adapters.metrics_collector import InMemoryMetricsCollector

__all__ = [
    "ConsoleAuditLogger",
    "InMemoryMetricsCollector",
    "LoggingAuditLogger",
]
