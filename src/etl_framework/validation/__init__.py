"""
Validation Package - Schema-Driven Field Checks.

    - validate: Single record, first failing field wins
    - validate_batch: Many records, partitioned into valid/invalid
    - required, of_type: Built-in predicates

Design Principles:
    - Fail on the first broken field
    - Clear, actionable error messages
    - Open for custom predicates
"""

from etl_framework.validation.schema_validator import (
    FieldValidator,
    TypeTag,
    ValidationSchema,
    is_type,
    of_type,
    required,
    validate,
    validate_batch,
)

__all__ = [
    "FieldValidator",
    "TypeTag",
    "ValidationSchema",
    "is_type",
    "of_type",
    "required",
    "validate",
    "validate_batch",
]
