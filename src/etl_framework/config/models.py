"""
Configuration Models - Pydantic Models for Type-Safe Config.

All configuration is validated at load time using Pydantic. Run options
are validated before the first step executes.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from etl_framework.domain.entities import ErrorStrategy

RETRY_SUFFIX = "_retry"


class RetryPolicy(BaseModel):
    """Bounded exponential backoff. Delays are in seconds."""

    max_attempts: int = Field(default=3, ge=1)
    initial_delay: float = Field(default=1.0, ge=0)
    max_delay: float = Field(default=5.0, ge=0)

    model_config = {"frozen": True}

    def merged(self, override: Optional[RetryOverride]) -> RetryPolicy:
        """Apply a per-step override on top of this policy."""
        if override is None:
            return self
        return RetryPolicy.model_validate(
            {**self.model_dump(), **override.model_dump(exclude_none=True)}
        )


class RetryOverride(BaseModel):
    """Partial retry policy for a single step."""

    max_attempts: Optional[int] = Field(default=None, ge=1)
    initial_delay: Optional[float] = Field(default=None, ge=0)
    max_delay: Optional[float] = Field(default=None, ge=0)

    model_config = {"extra": "forbid"}


class RunOptions(BaseModel):
    """
    Options for one pipeline run.

    Accepts per-step overrides either under ``step_retry`` or as top-level
    ``<step>_retry`` keys:

        >>> RunOptions.model_validate({"extract_retry": {"max_attempts": 5}})
    """

    error_strategy: ErrorStrategy = ErrorStrategy.COLLECT_ERRORS
    default_retry: RetryPolicy = Field(default_factory=RetryPolicy)
    step_retry: Dict[str, RetryOverride] = Field(default_factory=dict)

    model_config = {"extra": "forbid"}

    @model_validator(mode="before")
    @classmethod
    def _collect_step_overrides(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        step_retry = dict(data.pop("step_retry", None) or {})
        for key in [k for k in data if isinstance(k, str) and k.endswith(RETRY_SUFFIX)]:
            if key == "default_retry":
                continue
            step_retry[key[: -len(RETRY_SUFFIX)]] = data.pop(key)
        data["step_retry"] = step_retry
        return data

    def retry_policy_for(self, step_name: str) -> RetryPolicy:
        """Resolve the policy for a step: its override, else the defaults."""
        return self.default_retry.merged(self.step_retry.get(step_name))


class LoggingConfig(BaseModel):
    """Logging settings for ``ObservabilityManager.from_config``."""

    level: str = Field(default="INFO")
    json_output: bool = Field(default=False, alias="json")

    model_config = {"populate_by_name": True}

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"Unknown log level: {value}")
        return value

    @property
    def level_number(self) -> int:
        return logging.getLevelName(self.level)


class PipelineConfig(BaseModel):
    """Root configuration object."""

    version: str = "1.0"
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    run: RunOptions = Field(default_factory=RunOptions)

    model_config = {"populate_by_name": True}
