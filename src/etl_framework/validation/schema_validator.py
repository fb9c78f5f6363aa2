"""
Schema Validator - Field Checks Driven by a Schema.

A schema maps field names to an ordered list of predicates. Each predicate
receives the field's value and returns ``Ok`` or ``Err(reason)``.

Validates:
    - Fields in schema declaration order
    - Predicates per field in list order
    - Stops at the first failure and reports (field, reason)

Design Notes:
    - Stateless and pure; safe to share across threads
    - Any callable with the predicate shape is a custom validator
"""

from __future__ import annotations

import dataclasses
import io
import json
import multiprocessing.process
import numbers
import socket
import subprocess
import threading
import weakref
from enum import Enum
from typing import Any, Callable, Iterable, List, Mapping, Sequence, Union

from pydantic import BaseModel

from etl_framework.domain.value_objects import Err, FieldError, Ok, Partitioned

FieldValidator = Callable[[Any], Union[Ok, Err]]
ValidationSchema = Mapping[Any, Sequence[FieldValidator]]


class TypeTag(str, Enum):
    """Runtime tags recognized by ``of_type``."""

    STRING = "String"
    INTEGER = "Integer"
    FLOAT = "Float"
    NUMBER = "Number"
    ATOM = "Atom"
    LIST = "List"
    BOOLEAN = "Boolean"
    TUPLE = "Tuple"
    MAP = "Map"
    FUNCTION = "Function"
    PID = "PID"
    PORT = "Port"
    REFERENCE = "Reference"
    STRUCT = "Struct"
    ANY = "Any"


def _is_struct(value: Any) -> bool:
    if isinstance(value, type):
        return False
    return (
        dataclasses.is_dataclass(value)
        or isinstance(value, BaseModel)
        or (isinstance(value, tuple) and hasattr(value, "_fields"))
    )


_TAG_CHECKS: dict = {
    TypeTag.STRING: lambda v: isinstance(v, str),
    TypeTag.INTEGER: lambda v: isinstance(v, int) and not isinstance(v, bool),
    TypeTag.FLOAT: lambda v: isinstance(v, float),
    TypeTag.NUMBER: lambda v: isinstance(v, numbers.Number) and not isinstance(v, bool),
    TypeTag.ATOM: lambda v: isinstance(v, (Enum, bool)),
    TypeTag.LIST: lambda v: isinstance(v, list),
    TypeTag.BOOLEAN: lambda v: isinstance(v, bool),
    TypeTag.TUPLE: lambda v: isinstance(v, tuple),
    TypeTag.MAP: lambda v: isinstance(v, Mapping),
    TypeTag.FUNCTION: callable,
    TypeTag.PID: lambda v: isinstance(
        v, (threading.Thread, multiprocessing.process.BaseProcess, subprocess.Popen)
    ),
    TypeTag.PORT: lambda v: isinstance(v, (socket.socket, io.IOBase)),
    TypeTag.REFERENCE: lambda v: isinstance(v, weakref.ref),
    TypeTag.STRUCT: _is_struct,
    TypeTag.ANY: lambda v: True,
}


def is_type(value: Any, expected: Union[TypeTag, str, type]) -> bool:
    """Check a value's runtime tag. A class matches by ``isinstance``."""
    if isinstance(expected, type):
        return isinstance(value, expected)
    return _TAG_CHECKS[TypeTag(expected)](value)


def render_value(value: Any) -> str:
    """Render a value for error messages; strings are double-quoted."""
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    return repr(value)


def _tag_name(expected: Union[TypeTag, str, type]) -> str:
    if isinstance(expected, type):
        return expected.__name__
    return TypeTag(expected).value


# =============================================================================
# Built-in validators
# =============================================================================


def required(value: Any) -> Union[Ok, Err]:
    """Fail iff the value is absent."""
    if value is None:
        return Err("Field is required")
    return Ok()


def of_type(expected: Union[TypeTag, str, type]) -> FieldValidator:
    """
    Build a type check.

    Absent values pass; presence is ``required``'s job.

    Args:
        expected: A TypeTag, its name (e.g. "Integer"), or a record class
    """
    if not isinstance(expected, type):
        expected = TypeTag(expected)
    name = _tag_name(expected)

    def check(value: Any) -> Union[Ok, Err]:
        if value is None or is_type(value, expected):
            return Ok()
        return Err(f"Expected type {name}, got {render_value(value)}")

    check.__name__ = f"of_type_{name}"
    return check


# =============================================================================
# Schema validation
# =============================================================================


def _field_value(value: Any, field: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, Mapping):
        return value.get(field)
    if isinstance(field, str):
        return getattr(value, field, None)
    return None


def validate(value: Any, schema: ValidationSchema) -> Union[Ok, Err]:
    """
    Validate a record against a schema.

    Args:
        value: Mapping or object with attributes
        schema: Ordered mapping of field -> list of predicates

    Returns:
        Ok(value) if every predicate passes, else Err(FieldError) for the
        first failing field
    """
    for field, predicates in schema.items():
        field_value = _field_value(value, field)
        for predicate in predicates:
            outcome = predicate(field_value)
            if isinstance(outcome, Ok):
                continue
            if isinstance(outcome, Err):
                return Err(FieldError(field, outcome.reason))
            return Err(FieldError(field, repr(outcome)))
    return Ok(value)


def validate_batch(
    records: Iterable[Any], schema: ValidationSchema
) -> Union[Ok, Partitioned]:
    """
    Validate each record, partitioning failures from the valid remainder.

    Returns:
        Ok(records) when all pass, else Partitioned whose invalid items are
        ``(record, "Invalid <field>: <reason>")`` pairs; input order is kept
    """
    records = list(records)
    valid: List[Any] = []
    invalid: List[Any] = []

    for record in records:
        outcome = validate(record, schema)
        if isinstance(outcome, Ok):
            valid.append(outcome.value)
        else:
            failure = outcome.reason
            invalid.append((record, f"Invalid {failure.field}: {failure.reason}"))

    if not invalid:
        return Ok(records)
    return Partitioned(invalid=invalid, valid=valid)
