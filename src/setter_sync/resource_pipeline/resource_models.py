"""Resource document entities."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

import yaml


@dataclass(frozen=True)
class ResourceDocument:
    """One resource file together with the content it was read with."""

    path: Path
    original_text: str
    text: str

    @property
    def modified(self) -> bool:
        return self.text != self.original_text

    def with_text(self, text: str) -> ResourceDocument:
        return replace(self, text=text)


@dataclass(frozen=True)
class SetterReference:
    """A field whose line comment names the setter controlling its value."""

    setter_name: str
    field: str
    node: yaml.Node

    @property
    def start(self) -> int:
        return self.node.start_mark.index

    @property
    def line(self) -> int:
        return self.node.start_mark.line + 1
