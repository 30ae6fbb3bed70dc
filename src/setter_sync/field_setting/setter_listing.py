"""Listing setter definitions of a schema file."""

from __future__ import annotations

from collections import Counter
from dataclasses import replace
from pathlib import Path

from setter_sync.resource_pipeline import (
    LocalPackageReadWriter,
    PipelineError,
    find_setter_references,
)
from setter_sync.schema_management import (
    SchemaLoadError,
    SetterDefinition,
    load_schema_document,
    parse_setter_definitions,
)


class ListError(Exception):
    """Raised when setter definitions cannot be listed."""


def list_setters(
    schema_path: Path | str, resources_path: Path | str | None = None
) -> list[SetterDefinition]:
    """Return every setter defined in a schema file, sorted by name.

    When `resources_path` is given, each definition's `count` holds the number of
    resource fields under that directory referencing it.
    """
    try:
        definitions = parse_setter_definitions(load_schema_document(schema_path))
    except SchemaLoadError as exc:
        raise ListError(str(exc)) from exc
    definitions.sort(key=lambda definition: definition.name)
    if resources_path is None:
        return definitions

    try:
        counts = count_references(resources_path)
    except PipelineError as exc:
        raise ListError(str(exc)) from exc
    return [replace(definition, count=counts[definition.name]) for definition in definitions]


def count_references(resources_path: Path | str) -> Counter[str]:
    """Count setter references per setter name under a resource directory."""
    counts: Counter[str] = Counter()
    for document in LocalPackageReadWriter(resources_path).read():
        for reference in find_setter_references(document.text, source=document.path):
            counts[reference.setter_name] += 1
    return counts
