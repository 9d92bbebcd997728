"""jsonternary - Tri-state JSON fields: value, null, or absent."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("jsonternary")
except PackageNotFoundError:
    __version__ = "0+local"
from jsonternary.exceptions import (
    AbsentValueError,
    FieldTypeMismatchError,
    JsonTernaryError,
    RecordDecodeError,
)
from jsonternary.fields import emit_field, read_field
from jsonternary.models import TernaryBaseModel
from jsonternary.patch import apply_patch, apply_to_mapping, apply_to_object, merge_value, patch_model
from jsonternary.ternary import ABSENT, NULL, JsonTernary, TernaryKind

__all__ = [
    "__version__",
    "ABSENT",
    "AbsentValueError",
    "FieldTypeMismatchError",
    "JsonTernary",
    "JsonTernaryError",
    "NULL",
    "RecordDecodeError",
    "TernaryBaseModel",
    "TernaryKind",
    "apply_patch",
    "apply_to_mapping",
    "apply_to_object",
    "emit_field",
    "merge_value",
    "patch_model",
    "read_field",
]
