"""Merge-as-patch helpers.

A tri-state field read as an update instruction:

* ``Value(v)`` – overwrite the stored value with ``v``.
* ``Null`` – clear the stored value to ``None``.
* ``Absent`` – leave the stored value untouched.

Applying the same instruction twice leaves the target as applying it
once did.  The instruction itself is never modified; payloads are
deep-copied into the target so it never shares state with the patch.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import MutableMapping
from typing import Any, TypeVar

from pydantic import BaseModel

from jsonternary.models import iter_ternary_fields
from jsonternary.ternary import JsonTernary

_logger = logging.getLogger(__name__)

T = TypeVar("T")
ModelT = TypeVar("ModelT", bound=BaseModel)


def merge_value(current: T | None, instruction: JsonTernary[T]) -> T | None:
    """Return the content of an optional slot holding *current* after *instruction*."""
    return instruction.merge(current)


def apply_to_mapping(target: MutableMapping[str, Any], key: str, instruction: JsonTernary[Any]) -> bool:
    """Apply *instruction* to ``target[key]``.

    ``Absent`` leaves *target* as it is, even when *key* is missing.
    Returns ``True`` when *target* was written.
    """
    if instruction.is_absent():
        return False
    target[key] = copy.deepcopy(instruction.merge(target.get(key)))
    return True


def apply_to_object(target: object, attr: str, instruction: JsonTernary[Any]) -> bool:
    """Apply *instruction* to attribute *attr* of *target*.

    Returns ``True`` when the attribute was assigned.
    """
    if instruction.is_absent():
        return False
    setattr(target, attr, copy.deepcopy(instruction.merge(getattr(target, attr, None))))
    return True


def apply_patch(target: MutableMapping[str, Any], patch: BaseModel, *, by_alias: bool = False) -> list[str]:
    """Apply every tri-state field of *patch* onto *target*.

    *target* is keyed by field name, or by wire key when *by_alias* is set.
    Plain (non tri-state) fields of *patch* are not merged.  Returns the
    keys that were written, in field order.
    """
    written: list[str] = []
    for key, instruction in iter_ternary_fields(patch, by_alias=by_alias):
        if apply_to_mapping(target, key, instruction):
            written.append(key)
    if written:
        _logger.debug("Applied %s patch to keys: %s", type(patch).__name__, ", ".join(written))
    return written


def patch_model(model: ModelT, patch: BaseModel) -> ModelT:
    """Return a copy of *model* with the tri-state fields of *patch* applied.

    Only fields that exist on *model* under the same name are considered.
    *model* itself is left unchanged, which also makes this usable on
    frozen models.  A field of *model* that holds a :class:`JsonTernary`
    receives the instruction itself rather than its payload.
    """
    fields = type(model).model_fields
    update: dict[str, Any] = {}
    for name, instruction in iter_ternary_fields(patch):
        if name not in fields or instruction.is_absent():
            continue
        current = getattr(model, name)
        if isinstance(current, JsonTernary):
            # tri-state slots keep the instruction itself
            update[name] = copy.deepcopy(instruction)
        else:
            update[name] = copy.deepcopy(instruction.merge(current))
    if update:
        _logger.debug("Patching %s fields: %s", type(model).__name__, ", ".join(update))
    return model.model_copy(update=update)
