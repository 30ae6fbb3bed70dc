"""Setter definition entities."""

from __future__ import annotations

from dataclasses import dataclass

SETTER_DEFINITION_PREFIX = "io.k8s.cli.setters."
ARRAY_TYPE = "array"


@dataclass(frozen=True)
class SetterDefinition:  # pylint: disable=too-many-instance-attributes
    """One named setter as declared in a schema document.

    `value` and `list_values` are mutually exclusive; `list_values` is used when
    the referencing fields are sequences.
    """

    name: str
    value: str | None = None
    list_values: tuple[str, ...] = ()
    description: str = ""
    set_by: str = ""
    type: str | None = None
    count: int = 0

    @property
    def is_list(self) -> bool:
        return bool(self.list_values) or self.type == ARRAY_TYPE


@dataclass(frozen=True)
class SetterUpdate:
    """Request to change the value of one setter definition."""

    name: str
    value: str | None = None
    list_values: tuple[str, ...] = ()
    description: str = ""
    set_by: str = ""


def definition_key(name: str) -> str:
    """Return the `openAPI.definitions` key for a setter name."""
    return f"{SETTER_DEFINITION_PREFIX}{name}"
