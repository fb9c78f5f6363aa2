"""
Value Objects for Domain Layer.

Result shapes exchanged between step bodies, validators, the retry
executor and the orchestrator. All of them are immutable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, List, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result carrying a value."""

    value: T = None  # type: ignore[assignment]

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed result carrying a reason."""

    reason: E

    @property
    def is_ok(self) -> bool:
        return False


@dataclass(frozen=True)
class FieldError:
    """A schema check that failed on exactly one field."""

    field: Any
    reason: str

    def __str__(self) -> str:
        return f"{self.field}: {self.reason}"


@dataclass(frozen=True)
class Partitioned:
    """
    Bulk validation outcome.

    Splits a collection into the items that failed and the remainder the
    pipeline may continue with. Each invalid item is either a
    ``(record, reason)`` pair or a bare record.
    """

    invalid: List[Any] = field(default_factory=list)
    valid: Any = field(default_factory=list)

    @property
    def is_ok(self) -> bool:
        return False


@dataclass(frozen=True)
class StageFailure:
    """Failure of a named stage in the three-stage ETL runner."""

    stage: str
    reason: Any


# =============================================================================
# Type Aliases for improved readability
# =============================================================================

Result = Union[Ok[T], Err[E]]

# What a step validator may hand back to the orchestrator
ValidationOutcome = Union[Ok[Any], Partitioned, Err[Any]]


def is_result(value: Any) -> bool:
    """Check whether a value is an ``Ok`` or ``Err``."""
    return isinstance(value, (Ok, Err))
