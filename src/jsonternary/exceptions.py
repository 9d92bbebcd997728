"""Custom exception hierarchy for jsonternary."""

from __future__ import annotations

from typing import Any


class JsonTernaryError(Exception):
    """Base exception for all jsonternary errors."""


class AbsentValueError(JsonTernaryError, LookupError):
    """A payload was requested from a ``Null`` or ``Absent`` value."""


class FieldTypeMismatchError(JsonTernaryError, ValueError):
    """A present, non-null tri-state field could not be decoded as its type.

    ``field`` is the wire key (dotted for fields of nested records),
    ``expected`` the name of the declared payload type and ``actual`` the
    JSON type of the offending value.  When several tri-state fields of the
    same record fail, the first one is reported and all of them are listed
    in ``mismatches`` as ``(field, expected, actual)`` tuples.
    """

    def __init__(
        self,
        field: str,
        *,
        expected: str,
        actual: str,
        value: Any = None,
        mismatches: list[tuple[str, str, str]] | None = None,
    ) -> None:
        self.field = field
        self.expected = expected
        self.actual = actual
        self.value = value
        self.mismatches = mismatches if mismatches is not None else [(field, expected, actual)]
        super().__init__(f"field {field!r}: expected {expected}, got {actual}")


class RecordDecodeError(JsonTernaryError, ValueError):
    """The containing record could not be decoded for a reason other than a tri-state field.

    Covers malformed JSON, missing required plain fields and plain fields
    of the wrong type.  ``errors`` holds pydantic's error list.
    """

    def __init__(
        self,
        message: str,
        *,
        record: str = "",
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        self.record = record
        self.errors = errors or []
        super().__init__(message)
