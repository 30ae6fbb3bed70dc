"""Schema document loading and setter definition updates."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .schema_models import (
    ARRAY_TYPE,
    SETTER_DEFINITION_PREFIX,
    SetterDefinition,
    SetterUpdate,
    definition_key,
)

logger = logging.getLogger(__name__)

OPENAPI_FIELD = "openAPI"
DEFINITIONS_FIELD = "definitions"
EXTENSION_FIELD = "x-k8s-cli"
SETTER_FIELD = "setter"

_SCALAR_TYPE_CHECKS = {
    "integer": lambda value: isinstance(value, int) and not isinstance(value, bool),
    "number": lambda value: isinstance(value, (int, float)) and not isinstance(value, bool),
    "boolean": lambda value: isinstance(value, bool),
}


class SchemaLoadError(Exception):
    """Raised when a schema document cannot be read or holds malformed setters."""


class SchemaUpdateError(Exception):
    """Raised when a setter definition cannot be updated."""


def load_schema_document(schema_path: Path | str) -> dict[str, Any]:
    """Read a schema document into a plain mapping."""
    return _read_schema_mapping(Path(schema_path), SchemaLoadError)


def parse_setter_definitions(document: Mapping[str, Any]) -> list[SetterDefinition]:
    """Return every setter definition of a schema document, in document order.

    Definitions under `openAPI.definitions` whose key does not carry the setter
    prefix, or which lack an `x-k8s-cli.setter` extension, are ignored.
    """
    definitions = _definitions_of(document)
    if definitions is None:
        return []
    setters: list[SetterDefinition] = []
    for key, definition in definitions.items():
        if not isinstance(key, str) or not key.startswith(SETTER_DEFINITION_PREFIX):
            continue
        if not isinstance(definition, Mapping):
            raise SchemaLoadError(f"Definition '{key}' must be a mapping.")
        setter = _setter_extension(definition)
        if setter is None:
            continue
        setters.append(_to_setter_definition(key, definition, setter))
    return setters


def update_schema_file(schema_path: Path | str, update: SetterUpdate) -> SetterDefinition:
    """Write a new value for one setter definition and persist the schema file.

    Args:
      schema_path: Path of the schema document holding the definition.
      update: Name, new value or list values, and attribution to record.

    Returns:
      The setter definition as written.

    Raises:
      SchemaUpdateError: If the setter does not exist, the values do not fit the
        declared type, or the file cannot be read or written.
    """
    path = Path(schema_path)
    document = _read_schema_mapping(path, SchemaUpdateError)
    key = definition_key(update.name)
    try:
        definitions = _definitions_of(document)
    except SchemaLoadError as exc:
        raise SchemaUpdateError(f"{exc} ({path})") from exc
    definition = definitions.get(key) if definitions is not None else None
    if not isinstance(definition, dict):
        raise SchemaUpdateError(f"No setter '{update.name}' found in {path}.")
    setter = _setter_extension(definition)
    if setter is None:
        raise SchemaUpdateError(f"Definition '{key}' in {path} is not a setter.")

    declared_type = definition.get("type")
    _apply_values(setter, update, declared_type)
    if update.description:
        definition["description"] = update.description
    if update.set_by:
        setter["setBy"] = update.set_by
    else:
        setter.pop("setBy", None)
    setter["isSet"] = True

    try:
        path.write_text(
            yaml.safe_dump(document, sort_keys=False, default_flow_style=False),
            encoding="utf-8",
        )
    except (OSError, yaml.YAMLError) as exc:
        raise SchemaUpdateError(f"Failed to write schema file {path}: {exc}") from exc
    logger.info("updated setter %s in %s", update.name, path)
    return _to_setter_definition(key, definition, setter)


def _apply_values(setter: dict[str, Any], update: SetterUpdate, declared_type: Any) -> None:
    if update.value is not None and update.list_values:
        raise SchemaUpdateError(
            f"Setter '{update.name}' accepts either a value or list values, not both."
        )
    if update.list_values:
        if declared_type not in (None, ARRAY_TYPE):
            raise SchemaUpdateError(
                f"Setter '{update.name}' is of type {declared_type} and cannot take list values."
            )
        setter["listValues"] = list(update.list_values)
        setter.pop("value", None)
        return
    if update.value is None:
        raise SchemaUpdateError(f"No value provided for setter '{update.name}'.")
    if declared_type == ARRAY_TYPE:
        raise SchemaUpdateError(
            f"Setter '{update.name}' is of type array and requires list values."
        )
    _validate_scalar_type(update.name, update.value, declared_type)
    setter["value"] = update.value
    setter.pop("listValues", None)


def _validate_scalar_type(name: str, value: str, declared_type: Any) -> None:
    check = _SCALAR_TYPE_CHECKS.get(declared_type)
    if check is None:
        return
    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError:
        parsed = None
    if not check(parsed):
        raise SchemaUpdateError(
            f"Value '{value}' for setter '{name}' is not a valid {declared_type}."
        )


def _to_setter_definition(
    key: str, definition: Mapping[str, Any], setter: Mapping[str, Any]
) -> SetterDefinition:
    name = setter.get("name") or key[len(SETTER_DEFINITION_PREFIX) :]
    raw_list = setter.get("listValues")
    if raw_list is not None and not isinstance(raw_list, list):
        raise SchemaLoadError(f"listValues of setter '{name}' must be a list.")
    raw_value = setter.get("value")
    declared_type = definition.get("type")
    return SetterDefinition(
        name=str(name),
        value=None if raw_value is None else _stringify(raw_value),
        list_values=tuple(_stringify(item) for item in raw_list or ()),
        description=str(definition.get("description") or ""),
        set_by=str(setter.get("setBy") or ""),
        type=declared_type if isinstance(declared_type, str) else None,
    )


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _definitions_of(document: Mapping[str, Any]) -> dict[str, Any] | None:
    openapi = document.get(OPENAPI_FIELD)
    if openapi is None:
        return None
    if not isinstance(openapi, Mapping):
        raise SchemaLoadError(f"'{OPENAPI_FIELD}' must be a mapping.")
    definitions = openapi.get(DEFINITIONS_FIELD)
    if definitions is None:
        return None
    if not isinstance(definitions, dict):
        raise SchemaLoadError(f"'{OPENAPI_FIELD}.{DEFINITIONS_FIELD}' must be a mapping.")
    return definitions


def _setter_extension(definition: Mapping[str, Any]) -> dict[str, Any] | None:
    extension = definition.get(EXTENSION_FIELD)
    if not isinstance(extension, Mapping):
        return None
    setter = extension.get(SETTER_FIELD)
    return setter if isinstance(setter, dict) else None


def _read_schema_mapping(path: Path, error_cls: type[Exception]) -> dict[str, Any]:
    if not path.is_file():
        raise error_cls(f"Schema file not found: {path}")
    try:
        parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise error_cls(f"Failed to read schema file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise error_cls(f"Failed to parse schema file {path}: {exc}") from exc

    if parsed is None:
        parsed = {}
    if not isinstance(parsed, dict):
        raise error_cls(f"Schema root must be a mapping: {path}")
    return parsed
