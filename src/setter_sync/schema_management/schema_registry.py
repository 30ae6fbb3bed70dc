"""In-memory registry of setter definitions."""

from __future__ import annotations

import logging
from pathlib import Path

from .schema_models import SetterDefinition
from .schema_store import load_schema_document, parse_setter_definitions

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """Setter definitions keyed by setter name.

    Populated only through explicit loads; instances are not synchronized, so a
    registry must not be shared between concurrent setter runs.
    """

    def __init__(self) -> None:
        self._definitions: dict[str, SetterDefinition] = {}

    def add_schema_from_file(self, schema_path: Path | str) -> tuple[SetterDefinition, ...]:
        """Register every setter of a schema file, replacing same-named entries."""
        definitions = parse_setter_definitions(load_schema_document(schema_path))
        for definition in definitions:
            self._definitions[definition.name] = definition
        logger.debug("registered %d setter(s) from %s", len(definitions), schema_path)
        return tuple(definitions)

    def add(self, definition: SetterDefinition) -> None:
        self._definitions[definition.name] = definition

    def lookup(self, name: str) -> SetterDefinition | None:
        return self._definitions.get(name)

    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._definitions))

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)
