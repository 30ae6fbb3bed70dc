"""Field setting exports."""

from .field_setter import FieldSetter, FieldSetterFilter
from .propagation import PropagationResult, set_all_setter_definitions
from .setter_listing import ListError, count_references, list_setters

__all__ = [
    "FieldSetter",
    "FieldSetterFilter",
    "PropagationResult",
    "set_all_setter_definitions",
    "ListError",
    "count_references",
    "list_setters",
]
