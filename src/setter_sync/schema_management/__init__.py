"""Schema management exports."""

from .schema_models import SetterDefinition, SetterUpdate, definition_key
from .schema_registry import SchemaRegistry
from .schema_store import (
    SchemaLoadError,
    SchemaUpdateError,
    load_schema_document,
    parse_setter_definitions,
    update_schema_file,
)

__all__ = [
    "SetterDefinition",
    "SetterUpdate",
    "definition_key",
    "SchemaRegistry",
    "SchemaLoadError",
    "SchemaUpdateError",
    "load_schema_document",
    "parse_setter_definitions",
    "update_schema_file",
]
