"""Record models with tri-state fields."""

from jsonternary.models._base import TernaryBaseModel, iter_ternary_fields, translate_validation_error

__all__ = [
    "TernaryBaseModel",
    "iter_ternary_fields",
    "translate_validation_error",
]
