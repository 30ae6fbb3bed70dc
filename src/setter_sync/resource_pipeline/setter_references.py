"""Locating setter references in resource documents and rendering new values."""

from __future__ import annotations

import json
import re
from collections.abc import Sequence
from pathlib import Path

import yaml
from yaml.resolver import Resolver

from .package_io import PipelineError
from .resource_models import SetterReference

REFERENCE_KEYS: tuple[str, ...] = ("$openapi", "$kpt-set")
STR_TAG = "tag:yaml.org,2002:str"
NULL_TAG = "tag:yaml.org,2002:null"
BLOCK_SCALAR_STYLES = ("|", ">")

_VALUE_COMMENT = re.compile(r"^\s*#(.*)$")
# key line of a block collection or block scalar: `key: [&anchor] [!tag] [|-] # comment`
_KEY_COMMENT = re.compile(r"^\s*:\s*(?:[&!]\S*\s+)*(?:[|>][-+0-9]*\s+)?#(.*)$")
_PROPERTY = re.compile(r"[&!]\S*\s*")
_BLANKS_AND_COMMENTS = re.compile(r"(?:\s+|#[^\n]*)*")
_FLOW_INDICATORS = frozenset(",[]{}#&*!|>'\"%@`")
_RESOLVER = Resolver()


def find_setter_references(
    text: str, *, source: Path | str = "<string>"
) -> list[SetterReference]:
    """Return every field of a (multi-document) YAML text that references a setter.

    A reference is a line comment holding a JSON object such as
    `{"$openapi": "image-tag"}`. Flow scalars and flow collections carry it
    after their value; block collections and block scalars carry it on the
    key line.

    Raises:
      PipelineError: If the text is not valid YAML.
    """
    try:
        roots = list(yaml.compose_all(text, Loader=yaml.SafeLoader))
    except yaml.YAMLError as exc:
        raise PipelineError(f"Failed to parse resource file {source}: {exc}") from exc

    references: list[SetterReference] = []
    seen: set[int] = set()
    for root in roots:
        if root is not None:
            _collect_references(root, text, references, seen)
    return references


def line_break(text: str) -> str:
    """Return the line break used by a document."""
    return "\r\n" if "\r\n" in text else "\n"


def value_start(text: str, node: yaml.Node) -> int:
    """Return the offset where a node's value begins, past its anchor and tag.

    For block sequences this is the first `-` indicator.
    """
    index = node.start_mark.index
    end = node.end_mark.index
    while index < end and text[index] in "&!":
        index = _skip(_PROPERTY, text, index)
    if isinstance(node, yaml.SequenceNode) and not node.flow_style and node.value:
        return _skip(_BLANKS_AND_COMMENTS, text, index)
    return min(index, end)


def is_null_scalar(node: yaml.Node) -> bool:
    """Return whether a node is an untagged null or empty plain scalar."""
    return isinstance(node, yaml.ScalarNode) and node.style is None and node.tag == NULL_TAG


def render_scalar(value: str, node: yaml.ScalarNode) -> str:
    """Render a new scalar value so it keeps the field's quoting and type."""
    style = node.style if node.style in ("'", '"') else None
    if style is None and node.tag != STR_TAG and _plain_tag(value) != STR_TAG:
        return value
    return _dump_string(value, style)


def render_sequence(
    values: Sequence[str],
    node: yaml.Node,
    *,
    column: int | None = None,
    newline: str = "\n",
) -> str:
    """Render list values in the layout of the sequence they replace.

    Items follow the quoting and type of the first existing item. Anything
    other than a non-empty block sequence is replaced by a flow sequence.
    """
    items_node = node.value if isinstance(node, yaml.SequenceNode) else []
    template = items_node[0] if items_node else None
    if not items_node or getattr(node, "flow_style", False) or not values:
        items = (_render_item(value, template, flow=True) for value in values)
        return "[" + ", ".join(items) + "]"
    indent = " " * (node.start_mark.column if column is None else column)
    return f"{newline}{indent}".join(
        f"- {_render_item(value, template, flow=False)}" for value in values
    )


def sequence_end(node: yaml.SequenceNode) -> int:
    """Return the text offset right after the last item of a sequence."""
    if node.flow_style or not node.value:
        return node.end_mark.index
    return node.value[-1].end_mark.index


def block_scalar_edit(value: str, text: str, node: yaml.ScalarNode) -> tuple[int, int, str]:
    """Return the span of a block scalar's body and the body that replaces it.

    The header line (indicator, chomping and reference comment) is kept.

    Raises:
      PipelineError: If the value cannot be written as a block scalar body.
    """
    newline = line_break(text)
    header_end = text.find("\n", value_start(text, node))
    if header_end == -1:
        start = end = len(text)
    else:
        start = header_end + 1
        end = max(start, len(text[: node.end_mark.index].rstrip()))

    body = text[start:end]
    content_lines = [line for line in body.splitlines() if line.strip()]
    if content_lines:
        indent = len(content_lines[0]) - len(content_lines[0].lstrip(" "))
    else:
        line_start = text.rfind("\n", 0, node.start_mark.index) + 1
        key_line = text[line_start:]
        indent = len(key_line) - len(key_line.lstrip(" ")) + 2

    lines = value.removesuffix("\n").split("\n")
    if lines[0].startswith(" "):
        raise PipelineError(
            f"Value {value!r} starts with a space and cannot replace a block scalar."
        )
    pad = " " * indent
    replacement = newline.join(pad + line if line else "" for line in lines)
    if header_end == -1:
        replacement = newline + replacement
    elif start == end and start < len(text):
        replacement += newline
    return start, end, replacement


def _collect_references(
    node: yaml.Node, text: str, references: list[SetterReference], seen: set[int]
) -> None:
    if id(node) in seen:
        return
    seen.add(id(node))
    if isinstance(node, yaml.MappingNode):
        for key_node, value_node in node.value:
            if id(value_node) in seen:
                # alias of a node collected earlier
                continue
            name = _referenced_setter(text, key_node, value_node)
            if name is not None:
                references.append(
                    SetterReference(setter_name=name, field=str(key_node.value), node=value_node)
                )
            _collect_references(value_node, text, references, seen)
    elif isinstance(node, yaml.SequenceNode):
        for item in node.value:
            _collect_references(item, text, references, seen)


def _referenced_setter(text: str, key_node: yaml.Node, value_node: yaml.Node) -> str | None:
    if isinstance(value_node, yaml.ScalarNode):
        on_key_line = value_node.style in BLOCK_SCALAR_STYLES
    else:
        on_key_line = not getattr(value_node, "flow_style", False)
    if on_key_line:
        comment = _trailing_comment(text, key_node.end_mark.index, _KEY_COMMENT)
    else:
        comment = _trailing_comment(text, value_node.end_mark.index, _VALUE_COMMENT)
    if comment is None:
        return None
    try:
        payload = json.loads(comment)
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    for key in REFERENCE_KEYS:
        name = payload.get(key)
        if isinstance(name, str) and name:
            return name
    return None


def _trailing_comment(text: str, index: int, pattern: re.Pattern[str]) -> str | None:
    line_end = text.find("\n", index)
    if line_end == -1:
        line_end = len(text)
    match = pattern.match(text[index:line_end].rstrip("\r"))
    return match.group(1).strip() if match else None


def _skip(pattern: re.Pattern[str], text: str, index: int) -> int:
    match = pattern.match(text, index)
    return match.end() if match else index


def _plain_tag(value: str) -> str:
    return _RESOLVER.resolve(yaml.ScalarNode, value, (True, False))


def _dump_string(value: str, style: str | None = None) -> str:
    if "\n" in value:
        style = '"'
    rendered = yaml.safe_dump(
        value, default_style=style, width=float("inf"), allow_unicode=True
    )
    if rendered.endswith("\n...\n"):
        rendered = rendered[: -len("\n...\n")]
    return rendered.rstrip("\n")


def _render_item(value: str, template: yaml.Node | None, *, flow: bool) -> str:
    if flow and any(char in _FLOW_INDICATORS for char in value):
        return _dump_string(value, '"')
    if isinstance(template, yaml.ScalarNode):
        return render_scalar(value, template)
    return _dump_string(value)
