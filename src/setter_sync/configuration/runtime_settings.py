"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SourcePackage:
    """Package whose setter definitions are propagated."""

    schema_path: Path
    resources_path: Path


@dataclass(frozen=True)
class Configuration:
    """Top-level propagation configuration aggregate."""

    path: Path
    source: SourcePackage
    destinations: tuple[Path, ...]
