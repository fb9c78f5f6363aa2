"""
Domain Layer - Core Entities and Value Objects.

This package contains the pure data types of the framework:
    - Ok, Err: Step and validator results
    - FieldError, Partitioned: The two validation failure shapes
    - Step, ErrorEntry, PipelineRunState: Run loop entities
    - PipelineSuccess, PipelineHalted: Tagged run outcomes

No I/O and no logging happens in this layer.
"""

from etl_framework.domain.entities import (
    ErrorEntry,
    ErrorStrategy,
    PipelineHalted,
    PipelineRunState,
    PipelineSuccess,
    Step,
)
from etl_framework.domain.value_objects import (
    Err,
    FieldError,
    Ok,
    Partitioned,
    StageFailure,
)

__all__ = [
    "Err",
    "ErrorEntry",
    "ErrorStrategy",
    "FieldError",
    "Ok",
    "Partitioned",
    "PipelineHalted",
    "PipelineRunState",
    "PipelineSuccess",
    "StageFailure",
    "Step",
]
