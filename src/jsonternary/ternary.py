"""Tri-state values for JSON object properties.

A :class:`JsonTernary` tells apart the three states a property of a JSON
object can be in:

* ``JsonTernary.of(v)`` – the key is present and holds ``v``.
* ``JsonTernary.null()`` – the key is present and holds ``null``.
* ``JsonTernary.absent()`` – the key is not present at all.

Used as a field of a :class:`jsonternary.models.TernaryBaseModel` it
doubles as a patch instruction: overwrite, clear, or leave untouched.

The pydantic hooks below only cover the *value* side of a field.  Whether
the key is written at all is decided by the containing record, which
consults :meth:`JsonTernary.is_absent` before emission.
"""

from __future__ import annotations

import copy
import functools
from enum import StrEnum
from typing import Any, Generic, TypeVar, get_args

from pydantic import GetCoreSchemaHandler, ValidationError
from pydantic_core import PydanticCustomError, core_schema, to_jsonable_python

from jsonternary.exceptions import AbsentValueError

T = TypeVar("T")

MISMATCH_ERROR_TYPE = "ternary_type_mismatch"


class TernaryKind(StrEnum):
    VALUE = "value"
    NULL = "null"
    ABSENT = "absent"


# Case order for comparisons: Value < Null < Absent.
_KIND_ORDER: dict[TernaryKind, int] = {
    TernaryKind.VALUE: 0,
    TernaryKind.NULL: 1,
    TernaryKind.ABSENT: 2,
}


def json_type_name(value: Any) -> str:
    """Return the JSON type name of an already-parsed JSON value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def type_display_name(tp: Any) -> str:
    """Readable name of a payload type for error messages."""
    if tp is Any:
        return "Any"
    if get_args(tp):
        return repr(tp)
    return getattr(tp, "__name__", None) or repr(tp)


@functools.total_ordering
class JsonTernary(Generic[T]):
    """A JSON property that holds a value, holds ``null``, or is absent.

    Instances are immutable.  Build them through :meth:`of`, :meth:`null`
    and :meth:`absent` (or the :data:`NULL` / :data:`ABSENT` singletons).
    """

    __slots__ = ("_kind", "_value")

    _kind: TernaryKind
    _value: T | None

    def __init__(self, kind: TernaryKind | str, value: T | None = None) -> None:
        kind = TernaryKind(kind)
        if kind is not TernaryKind.VALUE and value is not None:
            raise ValueError(f"{kind} carries no payload")
        object.__setattr__(self, "_kind", kind)
        object.__setattr__(self, "_value", value)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def of(cls, value: T) -> JsonTernary[T]:
        """Present with *value*."""
        return cls(TernaryKind.VALUE, value)

    @classmethod
    def null(cls) -> JsonTernary[Any]:
        """Present as JSON ``null``."""
        return NULL

    @classmethod
    def absent(cls) -> JsonTernary[Any]:
        """Not present."""
        return ABSENT

    @classmethod
    def default(cls) -> JsonTernary[Any]:
        """The state of a field whose key is missing: :data:`ABSENT`."""
        return ABSENT

    @classmethod
    def from_optional(cls, value: T | None) -> JsonTernary[T]:
        """Map ``None`` to ``Null`` and anything else to ``Value``."""
        if value is None:
            return NULL
        return cls.of(value)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def kind(self) -> TernaryKind:
        return self._kind

    def is_value(self) -> bool:
        return self._kind is TernaryKind.VALUE

    def is_null(self) -> bool:
        return self._kind is TernaryKind.NULL

    def is_absent(self) -> bool:
        return self._kind is TernaryKind.ABSENT

    def unwrap(self) -> T:
        """Return the payload, raising :class:`AbsentValueError` for ``Null``/``Absent``."""
        if self._kind is not TernaryKind.VALUE:
            raise AbsentValueError(f"{self!r} has no value")
        return self._value  # type: ignore[return-value]

    def get(self, default: Any = None) -> Any:
        """Return the payload, or *default* for ``Null``/``Absent``."""
        if self._kind is TernaryKind.VALUE:
            return self._value
        return default

    def to_optional(self) -> T | None:
        return self.get()

    def encode(self) -> Any:
        """Return the JSON-compatible form of a ``Value`` or ``Null``.

        ``Absent`` has no JSON form; it is expressed by omitting the key,
        so asking for it raises :class:`AbsentValueError`.
        """
        if self._kind is TernaryKind.ABSENT:
            raise AbsentValueError("absent values are omitted, not encoded")
        if self._kind is TernaryKind.NULL:
            return None
        return to_jsonable_python(self._value)

    # ------------------------------------------------------------------
    # Patch semantics
    # ------------------------------------------------------------------

    def merge(self, current: T | None) -> T | None:
        """Return what a slot holding *current* holds after applying this instruction.

        ``Value(v)`` overwrites with ``v``, ``Null`` clears to ``None`` and
        ``Absent`` keeps *current*.
        """
        if self._kind is TernaryKind.VALUE:
            return self._value
        if self._kind is TernaryKind.NULL:
            return None
        return current

    # ------------------------------------------------------------------
    # Value semantics
    # ------------------------------------------------------------------

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self) -> tuple[Any, ...]:
        return (JsonTernary, (self._kind, self._value))

    def __copy__(self) -> JsonTernary[T]:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> JsonTernary[T]:
        if self._kind is not TernaryKind.VALUE:
            return self
        return JsonTernary(TernaryKind.VALUE, copy.deepcopy(self._value, memo))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JsonTernary):
            return NotImplemented
        if self._kind is not other._kind:
            return False
        return self._kind is not TernaryKind.VALUE or bool(self._value == other._value)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, JsonTernary):
            return NotImplemented
        if self._kind is not other._kind:
            return _KIND_ORDER[self._kind] < _KIND_ORDER[other._kind]
        if self._kind is TernaryKind.VALUE:
            return bool(self._value < other._value)  # type: ignore[operator]
        return False

    def __hash__(self) -> int:
        return hash((self._kind, self._value))

    def __repr__(self) -> str:
        if self._kind is TernaryKind.VALUE:
            return f"JsonTernary.of({self._value!r})"
        return f"JsonTernary.{self._kind.value}()"

    # ------------------------------------------------------------------
    # Pydantic integration
    # ------------------------------------------------------------------

    @classmethod
    def __get_pydantic_core_schema__(cls, source: Any, handler: GetCoreSchemaHandler) -> core_schema.CoreSchema:
        args = get_args(source)
        item_type = args[0] if args else Any
        item_schema = handler.generate_schema(item_type)
        expected = type_display_name(item_type)

        def validate_python(value: Any, validate_item: core_schema.ValidatorFunctionWrapHandler) -> JsonTernary[Any]:
            if isinstance(value, JsonTernary):
                if not value.is_value():
                    return value
                value = value._value
            elif value is None:
                return NULL
            try:
                return cls.of(validate_item(value))
            except ValidationError as exc:
                raise PydanticCustomError(
                    MISMATCH_ERROR_TYPE,
                    "expected {expected}, got {actual}",
                    {"expected": expected, "actual": json_type_name(value)},
                ) from exc

        def serialize(value: JsonTernary[Any], serialize_item: core_schema.SerializerFunctionWrapHandler) -> Any:
            # Absent only gets here outside a record; it has no key to drop.
            if value.is_value():
                return serialize_item(value._value)
            return None

        # JSON input runs the payload schema natively; null never reaches it.
        return core_schema.json_or_python_schema(
            json_schema=core_schema.no_info_after_validator_function(
                cls.from_optional,
                core_schema.nullable_schema(item_schema),
            ),
            python_schema=core_schema.no_info_wrap_validator_function(validate_python, item_schema),
            serialization=core_schema.wrap_serializer_function_ser_schema(serialize, schema=item_schema),
        )


NULL: JsonTernary[Any] = JsonTernary(TernaryKind.NULL)
"""The ``Null`` case: present as JSON ``null``."""

ABSENT: JsonTernary[Any] = JsonTernary(TernaryKind.ABSENT)
"""The ``Absent`` case: key omitted.  Use it as the default of record fields."""
