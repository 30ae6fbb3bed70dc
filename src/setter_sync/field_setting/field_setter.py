"""Setting one setter value across a schema file and a resource directory."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from setter_sync.resource_pipeline import LocalPackageReadWriter, Pipeline, ResourceDocument, SetAll
from setter_sync.schema_management import SchemaRegistry, SetterUpdate, update_schema_file

logger = logging.getLogger(__name__)


@dataclass
class FieldSetter:  # pylint: disable=too-many-instance-attributes
    """Sets the value of one setter.

    Exactly one of `value` and `list_values` should be provided; `list_values`
    is used for setters whose fields are sequences.
    """

    name: str
    value: str | None = None
    list_values: tuple[str, ...] = ()
    description: str = ""
    set_by: str = ""
    registry: SchemaRegistry = field(default_factory=SchemaRegistry)

    def set(
        self, schema_path: Path | str, resources_path: Path | str, *, update_schema: bool = True
    ) -> int:
        """Update the setter definition and every resource field that references it.

        Args:
          schema_path: Schema document holding the setter definition.
          resources_path: Directory of resource documents to rewrite.
          update_schema: When false the schema file is only (re)loaded into the
            registry, never written.

        Returns:
          The number of resource fields that were set. Zero means that no field
          references the setter.

        Raises:
          SchemaUpdateError: If the schema definition cannot be updated.
          SchemaLoadError: If the schema cannot be loaded into the registry.
          PipelineError: If the resource directory cannot be read, set, or written.
        """
        if update_schema:
            update_schema_file(
                schema_path,
                SetterUpdate(
                    name=self.name,
                    value=self.value,
                    list_values=tuple(self.list_values),
                    description=self.description,
                    set_by=self.set_by,
                ),
            )
        self.registry.add_schema_from_file(schema_path)

        # files without a matching field are passed through untouched and must survive
        package = LocalPackageReadWriter(resources_path, no_delete_files=True)
        setter_filter = SetAll(name=self.name, registry=self.registry)
        Pipeline(inputs=[package], filters=[setter_filter], outputs=[package]).execute()
        logger.info(
            "set %s on %d field(s) under %s", self.name, setter_filter.count, resources_path
        )
        return setter_filter.count


@dataclass
class FieldSetterFilter:
    """Runs a field setter as one stage of a larger resource pipeline.

    The setter works on its own configured paths; the documents flowing through
    the pipeline are returned unchanged, so this stage must not be used when the
    caller needs the substituted documents.
    """

    setter: FieldSetter
    schema_path: Path | str
    resources_path: Path | str
    count: int = field(default=0, init=False)

    def __call__(self, documents: list[ResourceDocument]) -> list[ResourceDocument]:
        self.count = self.setter.set(self.schema_path, self.resources_path)
        return documents
