"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "setter-sync.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Propagation configuration for setter-sync.
# Relative paths are resolved against the directory holding this file.

source:
  # Schema document holding the setter definitions (openAPI.definitions).
  schema: "Kptfile"
  # Resource directory of the source package; defaults to the schema's directory.
  # resources: "."

# Directories whose resource fields receive the source setter values.
# Their own schema documents are never modified.
destinations:
  - "<REQUIRED>"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML propagation configuration template with inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
