"""Propagating all setter values of a source package to destination packages."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from setter_sync.schema_management import SchemaRegistry

from .field_setter import FieldSetter
from .setter_listing import list_setters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PropagationResult:
    """Outcome of setting one setter on one destination directory."""

    setter: str
    destination: Path
    count: int


def set_all_setter_definitions(
    source_schema_path: Path | str,
    source_resources_path: Path | str,
    dest_dirs: Sequence[Path | str],
    *,
    registry: SchemaRegistry | None = None,
) -> list[PropagationResult]:
    """Set every setter value of the source schema on each destination directory.

    Destination schema files are never modified: the source schema is only
    reloaded into the registry for every pass. Each (setter, destination) pair
    runs its own read-transform-write pass over the destination directory. The
    first failure aborts the propagation; passes already written stay applied.

    Raises:
      ListError: If the source setters cannot be listed.
      SchemaLoadError: If the source schema cannot be reloaded.
      PipelineError: If a destination directory cannot be read, set, or written.
    """
    resolved_registry = registry if registry is not None else SchemaRegistry()
    definitions = list_setters(source_schema_path, source_resources_path)
    logger.info(
        "propagating %d setter(s) from %s to %d destination(s)",
        len(definitions),
        source_schema_path,
        len(dest_dirs),
    )

    # TODO: batch all setters of a destination into one pass once per-setter counts
    # can be collected from a single SetAll run.
    results: list[PropagationResult] = []
    for definition in definitions:
        setter = FieldSetter(
            name=definition.name,
            value=definition.value,
            list_values=definition.list_values,
            description=definition.description,
            set_by=definition.set_by,
            registry=resolved_registry,
        )
        for dest_dir in dest_dirs:
            count = setter.set(source_schema_path, dest_dir, update_schema=False)
            results.append(
                PropagationResult(setter=definition.name, destination=Path(dest_dir), count=count)
            )
    return results
