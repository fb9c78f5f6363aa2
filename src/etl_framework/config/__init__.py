"""
Configuration Package - Models and Loaders.

    - Pydantic models for type-safe configuration
    - YAML loader with profile merging

Configuration Structure:
    - PipelineConfig: Root configuration object
    - LoggingConfig: Log level and renderer
    - RunOptions: Error strategy and retry policies for a run
    - RetryPolicy / RetryOverride: Backoff settings, default and per step

Design Principles:
    - Type-safe via Pydantic
    - Validation on load (fail fast)
"""

from etl_framework.config.loader import ConfigLoader, load_config
from etl_framework.config.models import (
    LoggingConfig,
    PipelineConfig,
    RetryOverride,
    RetryPolicy,
    RunOptions,
)

__all__ = [
    "ConfigLoader",
    "LoggingConfig",
    "PipelineConfig",
    "RetryOverride",
    "RetryPolicy",
    "RunOptions",
    "load_config",
]
