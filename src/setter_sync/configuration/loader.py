"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import Configuration, SourcePackage


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the propagation configuration file.

    Relative paths are resolved against the directory holding the file.
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Failed to read configuration file {path}: {exc}") from exc

    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    base_path = path.resolve().parent
    source = _parse_source_section(parsed.get("source"), base_path)
    destinations = _parse_destinations(parsed.get("destinations"), base_path)
    if source.resources_path in destinations:
        raise ConfigurationError("destinations must not include the source resources directory.")

    return Configuration(path=path, source=source, destinations=destinations)


def _parse_source_section(value: Any, base_path: Path) -> SourcePackage:
    section = _require_mapping(value, "source")
    schema_path = _resolve_path(
        base_path, _require_non_empty_string(section.get("schema"), "source.schema")
    )
    resources_raw = _optional_string(section.get("resources"), "source.resources")
    resources_path = (
        _resolve_path(base_path, resources_raw) if resources_raw else schema_path.parent
    )
    return SourcePackage(schema_path=schema_path, resources_path=resources_path)


def _parse_destinations(value: Any, base_path: Path) -> tuple[Path, ...]:
    if value is None:
        raise ConfigurationError("destinations is required.")
    raw_entries: list[str] = []
    if isinstance(value, str):
        raw_entries = [value]
    elif isinstance(value, Sequence):
        for item in value:
            raw_entries.append(_require_non_empty_string(item, "destinations entries"))
    else:
        raise ConfigurationError("destinations must be a string or list of strings.")

    destinations: list[Path] = []
    for raw in raw_entries:
        stripped = raw.strip()
        if not stripped:
            continue
        resolved = _resolve_path(base_path, stripped)
        if resolved not in destinations:
            destinations.append(resolved)
    if not destinations:
        raise ConfigurationError("destinations must contain at least one directory.")
    return tuple(destinations)


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path).expanduser()
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None
