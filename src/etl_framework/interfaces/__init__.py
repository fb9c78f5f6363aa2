"""
Interfaces Layer - Abstract Protocols for Collaborators.

The core depends on these abstractions, not on concrete implementations.

Protocols:
    - AuditLogger: Logging sink for lifecycle events
    - MetricsCollector: Telemetry spans, timings and counts

Design Principles:
    - Use typing.Protocol (not ABC) for Pythonic interfaces
    - Collaborators are injected, never global
"""

from etl_framework.interfaces.audit_logger import AuditLogger
from etl_framework.interfaces.metrics_collector import MetricsCollector

__all__ = ["AuditLogger", "MetricsCollector"]
