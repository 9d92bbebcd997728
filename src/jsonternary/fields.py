"""Presence hooks for plain ``dict`` records.

:class:`~jsonternary.models.TernaryBaseModel` covers pydantic records.
These helpers apply the same key-presence rules when a record is built
or read by hand:

* :func:`emit_field` writes a key only for ``Value`` and ``Null``.
* :func:`read_field` looks the key up first, so a missing key and a
  ``null`` reach different branches before the payload type is involved.
"""

from __future__ import annotations

import functools
from collections.abc import Mapping, MutableMapping
from typing import Any

from pydantic import TypeAdapter, ValidationError
from pydantic_core import to_json

from jsonternary.exceptions import FieldTypeMismatchError
from jsonternary.ternary import ABSENT, NULL, JsonTernary, json_type_name, type_display_name


@functools.lru_cache(maxsize=128)
def _cached_adapter(item_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(item_type)


def _adapter(item_type: Any) -> TypeAdapter[Any]:
    try:
        hash(item_type)
    except TypeError:
        # e.g. Annotated with unhashable metadata
        return TypeAdapter(item_type)
    return _cached_adapter(item_type)


def emit_field(
    target: MutableMapping[str, Any],
    key: str,
    value: JsonTernary[Any],
    item_type: Any = Any,
) -> bool:
    """Write *value* under *key* unless it is ``Absent``.

    The payload of a ``Value`` is encoded to its JSON-compatible form with
    *item_type*.  Returns ``True`` when the key was written.
    """
    if value.is_absent():
        return False
    if value.is_null():
        target[key] = None
    else:
        target[key] = _adapter(item_type).dump_python(value.unwrap(), mode="json")
    return True


def read_field(source: Mapping[str, Any], key: str, item_type: Any = Any) -> JsonTernary[Any]:
    """Read *key* from a parsed JSON object as a tri-state value.

    The value is validated as JSON, in strict mode.  Raises
    :class:`FieldTypeMismatchError` when the key holds a non-null value
    that is not an *item_type*, e.g. ``"42"`` for ``int``.
    """
    if key not in source:
        return ABSENT
    raw = source[key]
    if raw is None:
        return NULL
    try:
        return JsonTernary.of(_adapter(item_type).validate_json(to_json(raw), strict=True))
    except ValidationError as exc:
        raise FieldTypeMismatchError(
            key,
            expected=type_display_name(item_type),
            actual=json_type_name(raw),
            value=raw,
        ) from exc
