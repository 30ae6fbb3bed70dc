"""Read-filter-write pipeline over resource documents."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from .resource_models import ResourceDocument

ResourceFilter = Callable[[list[ResourceDocument]], list[ResourceDocument]]


class ResourceReader(Protocol):  # pylint: disable=too-few-public-methods
    def read(self) -> list[ResourceDocument]: ...


class ResourceWriter(Protocol):  # pylint: disable=too-few-public-methods
    def write(self, documents: Sequence[ResourceDocument]) -> Any: ...


@dataclass
class Pipeline:
    """Reads from every input, applies filters in order, writes to every output.

    The first error aborts the run. Outputs already written are not rolled back.
    """

    inputs: Sequence[ResourceReader]
    filters: Sequence[ResourceFilter] = field(default_factory=tuple)
    outputs: Sequence[ResourceWriter] = field(default_factory=tuple)

    def execute(self) -> list[ResourceDocument]:
        documents: list[ResourceDocument] = []
        for reader in self.inputs:
            documents.extend(reader.read())
        for resource_filter in self.filters:
            documents = list(resource_filter(documents))
        for writer in self.outputs:
            writer.write(documents)
        return documents
