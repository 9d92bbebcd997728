"""Base model for records carrying tri-state fields.

Every record that declares :class:`~jsonternary.ternary.JsonTernary`
fields inherits from :class:`TernaryBaseModel` which provides:

* ``alias_generator=to_camel`` so snake_case fields travel as camelCase
  JSON keys.
* A ``model_serializer(mode="wrap")`` that drops the key of every field
  currently holding ``Absent``.  Plain pydantic always writes every
  declared field; this hook is what makes a key conditional.
* :meth:`TernaryBaseModel.decode`, which maps pydantic's
  ``ValidationError`` onto :class:`FieldTypeMismatchError` and
  :class:`RecordDecodeError`.

Tri-state fields declare ``ABSENT`` as their default so that a missing
key decodes to ``Absent``::

    class PersonEvent(TernaryBaseModel):
        person_id: int
        family_name: JsonTernary[str] = ABSENT
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any, Self, get_args, get_origin

from pydantic import (
    BaseModel,
    ConfigDict,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    ValidationError,
    model_serializer,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticSerializationError, from_json, to_json

from jsonternary.exceptions import FieldTypeMismatchError, RecordDecodeError
from jsonternary.ternary import MISMATCH_ERROR_TYPE, JsonTernary, json_type_name, type_display_name

_logger = logging.getLogger(__name__)


def iter_ternary_fields(model: BaseModel, *, by_alias: bool = False) -> Iterator[tuple[str, JsonTernary[Any]]]:
    """Yield ``(key, value)`` for every field of *model* holding a :class:`JsonTernary`.

    Keys are field names, or wire keys when *by_alias* is set.
    """
    for name, field in type(model).model_fields.items():
        value = getattr(model, name, None)
        if isinstance(value, JsonTernary):
            key = (field.serialization_alias or field.alias or name) if by_alias else name
            yield key, value


def _error_location(loc: tuple[int | str, ...]) -> str:
    return ".".join(str(part) for part in loc)


def _ternary_keys(model_cls: type[BaseModel]) -> dict[str, str]:
    """Map field names and wire keys of tri-state fields to their payload type name."""
    keys: dict[str, str] = {}
    for name, field in model_cls.model_fields.items():
        if field.annotation is not JsonTernary and get_origin(field.annotation) is not JsonTernary:
            continue
        args = get_args(field.annotation)
        expected = type_display_name(args[0] if args else Any)
        keys[name] = expected
        if field.alias:
            keys[field.alias] = expected
    return keys


def translate_validation_error(
    exc: ValidationError,
    model_cls: type[BaseModel],
    data: Any = None,
) -> FieldTypeMismatchError | RecordDecodeError:
    """Map a pydantic ``ValidationError`` onto the jsonternary error taxonomy.

    An error located under a tri-state field of *model_cls* is a type
    mismatch of that field, whatever nested payload part raised it.
    *data* is the decoded input, used to report the JSON type of the
    offending field value.
    """
    record = model_cls.__name__
    errors = exc.errors(include_url=False)
    if isinstance(data, (str, bytes, bytearray)):
        try:
            data = from_json(data)
        except ValueError:
            data = None
    ternary_keys = _ternary_keys(model_cls)

    mismatches: list[tuple[str, str, str]] = []
    seen: set[str] = set()
    first_value: Any = None
    for error in errors:
        loc = error["loc"]
        if error["type"] == MISMATCH_ERROR_TYPE:
            ctx = error.get("ctx") or {}
            field = _error_location(loc)
            expected = str(ctx.get("expected", ""))
            actual = str(ctx.get("actual", ""))
            value = error.get("input")
        elif loc and isinstance(loc[0], str) and loc[0] in ternary_keys and error["type"] != "missing":
            field = loc[0]
            expected = ternary_keys[field]
            if isinstance(data, Mapping) and field in data:
                value = data[field]
            else:
                value = error.get("input") if len(loc) == 1 else None
            actual = json_type_name(value)
        else:
            continue
        if field in seen:
            continue
        if not mismatches:
            first_value = value
        seen.add(field)
        mismatches.append((field, expected, actual))

    if mismatches:
        field, expected, actual = mismatches[0]
        _logger.debug("%s: tri-state field %s rejected (%s != %s)", record, field, actual, expected)
        return FieldTypeMismatchError(
            field,
            expected=expected,
            actual=actual,
            value=first_value,
            mismatches=mismatches,
        )

    _logger.debug("%s: record rejected with %d error(s)", record, len(errors))
    return RecordDecodeError(
        f"invalid {record}: {exc.error_count()} validation error(s)",
        record=record,
        errors=errors,
    )


class TernaryBaseModel(BaseModel):
    """Base for records with tri-state fields.

    Handles:
    * snake_case → camelCase wire keys via ``alias_generator=to_camel``
    * omission of ``Absent`` fields on ``model_dump``/``model_dump_json``
    * strict payload types: a JSON value of the wrong type is an error,
      never coerced
    * decode-error translation in :meth:`decode`
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
        strict=True,
    )

    @model_serializer(mode="wrap")
    def _omit_absent(self, handler: SerializerFunctionWrapHandler, info: SerializationInfo) -> Any:
        """Drop the key of every field currently holding ``Absent``."""
        data = handler(self)
        if not isinstance(data, dict):
            return data
        by_alias = bool(info.by_alias)
        for name, field in type(self).model_fields.items():
            value = getattr(self, name, None)
            if not isinstance(value, JsonTernary) or not value.is_absent():
                continue
            alias = field.serialization_alias or field.alias or name
            key = alias if by_alias else name
            if key not in data:
                # serialize_by_alias in the model config can override the call
                key = name if by_alias else alias
            data.pop(key, None)
        return data

    @classmethod
    def decode(cls, data: Mapping[str, Any] | str | bytes) -> Self:
        """Decode a record from a JSON document or an already-parsed object.

        Parsed objects are validated with JSON semantics.  Validation is
        strict: ``"42"``, ``true`` or ``42.0`` are not an ``int``.

        Raises
        ------
        FieldTypeMismatchError
            A present, non-null tri-state field does not hold its type.
        RecordDecodeError
            Any other failure (malformed JSON, plain fields).
        """
        try:
            document = data if isinstance(data, (str, bytes, bytearray)) else to_json(dict(data))
        except PydanticSerializationError as exc:
            raise RecordDecodeError(f"invalid {cls.__name__}: {exc}", record=cls.__name__) from exc
        try:
            return cls.model_validate_json(document, strict=True)
        except ValidationError as exc:
            raise translate_validation_error(exc, cls, data) from exc

    def encode(self, **kwargs: Any) -> str:
        """Encode to a JSON document with wire (camelCase) keys."""
        kwargs.setdefault("by_alias", True)
        return self.model_dump_json(**kwargs)

    def to_wire(self, **kwargs: Any) -> dict[str, Any]:
        """Encode to a JSON-compatible dict with wire (camelCase) keys."""
        kwargs.setdefault("by_alias", True)
        return self.model_dump(mode="json", **kwargs)

    def ternary_fields(self, *, by_alias: bool = False) -> dict[str, JsonTernary[Any]]:
        """Return the tri-state fields of this record, ``Absent`` included."""
        return dict(iter_ternary_fields(self, by_alias=by_alias))
