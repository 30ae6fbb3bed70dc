"""Filter that rewrites every field referencing one setter."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import yaml

from setter_sync.schema_management.schema_models import SetterDefinition
from setter_sync.schema_management.schema_registry import SchemaRegistry

from .package_io import PipelineError
from .resource_models import ResourceDocument, SetterReference
from .setter_references import (
    BLOCK_SCALAR_STYLES,
    block_scalar_edit,
    find_setter_references,
    is_null_scalar,
    line_break,
    render_scalar,
    render_sequence,
    sequence_end,
    value_start,
)

logger = logging.getLogger(__name__)


@dataclass
class SetAll:
    """Sets the registered value of `name` on every referencing field.

    `count` accumulates the number of matched fields across calls, including
    fields that already held the value.
    """

    name: str
    registry: SchemaRegistry
    count: int = field(default=0, init=False)

    def __call__(self, documents: list[ResourceDocument]) -> list[ResourceDocument]:
        definition = self.registry.lookup(self.name)
        if definition is None:
            raise PipelineError(f"Setter '{self.name}' is not registered.")
        return [self._apply(definition, document) for document in documents]

    def _apply(self, definition: SetterDefinition, document: ResourceDocument) -> ResourceDocument:
        edits: list[tuple[int, int, str]] = []
        for reference in find_setter_references(document.text, source=document.path):
            if reference.setter_name != self.name:
                continue
            start, end, replacement = _replacement_for(definition, reference, document)
            if edits and start < edits[-1][1]:
                # nested inside a field that is already being replaced
                continue
            edits.append((start, end, replacement))
            self.count += 1
        if not edits:
            return document

        text = document.text
        for start, end, replacement in reversed(edits):
            text = text[:start] + replacement + text[end:]
        logger.debug("set %s on %d field(s) in %s", self.name, len(edits), document.path)
        return document.with_text(text)


def _replacement_for(
    definition: SetterDefinition, reference: SetterReference, document: ResourceDocument
) -> tuple[int, int, str]:
    node = reference.node
    text = document.text
    location = f"{document.path}:{reference.line} ({reference.field})"
    if isinstance(node, yaml.ScalarNode):
        if definition.is_list:
            if not is_null_scalar(node):
                raise PipelineError(
                    f"List setter '{definition.name}' cannot be applied to scalar field "
                    f"{location}."
                )
            return _scalar_edit(text, node, render_sequence(definition.list_values, node))
        if definition.value is None:
            raise PipelineError(f"Setter '{definition.name}' has no value to set on {location}.")
        if node.style in BLOCK_SCALAR_STYLES:
            return block_scalar_edit(definition.value, text, node)
        return _scalar_edit(text, node, render_scalar(definition.value, node))
    if isinstance(node, yaml.SequenceNode):
        if not definition.is_list:
            raise PipelineError(
                f"Scalar setter '{definition.name}' cannot be applied to sequence field "
                f"{location}."
            )
        start = value_start(text, node)
        column = start - (text.rfind("\n", 0, start) + 1)
        replacement = render_sequence(
            definition.list_values, node, column=column, newline=line_break(text)
        )
        return start, sequence_end(node), replacement
    raise PipelineError(
        f"Setter '{definition.name}' cannot be applied to mapping field {location}."
    )


def _scalar_edit(text: str, node: yaml.ScalarNode, replacement: str) -> tuple[int, int, str]:
    start = value_start(text, node)
    end = node.end_mark.index
    if start == end:
        # empty value directly after the colon or the node properties
        replacement = f" {replacement}"
    return start, end, replacement
