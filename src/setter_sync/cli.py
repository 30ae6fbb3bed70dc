"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from setter_sync.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    load_configuration,
    write_placeholder_configuration,
)
from setter_sync.field_setting import (
    FieldSetter,
    ListError,
    list_setters,
    set_all_setter_definitions,
)
from setter_sync.resource_pipeline import PipelineError
from setter_sync.schema_management import SchemaLoadError, SchemaUpdateError

_SETTER_ERRORS = (SchemaUpdateError, SchemaLoadError, PipelineError, ListError)
_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="setter-sync")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log progress to stderr.")
def cli(verbose: bool) -> None:
    """Set setter values in schema files and propagate them to resource documents."""
    _configure_logging(verbose)


@cli.command(name="set")
@click.argument("name")
@click.argument("values", nargs=-1, required=True)
@click.option(
    "--schema",
    "schema_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the schema document holding the setter definition",
)
@click.option(
    "--resources",
    "resources_path",
    required=False,
    type=click.Path(path_type=str),
    help="Resource directory to update; defaults to the schema's directory",
)
@click.option("--description", default="", help="Description recorded on the setter definition")
@click.option(
    "--set-by", "set_by", default="", help="Attribution recorded on the setter definition"
)
@click.option(
    "--list",
    "as_list",
    is_flag=True,
    default=False,
    help="Treat a single VALUE as a one-item list value.",
)
def set_value(
    name: str,
    values: tuple[str, ...],
    schema_path: str,
    resources_path: str | None,
    description: str,
    set_by: str,
    as_list: bool,
) -> None:
    """Set setter NAME to VALUE; more than one VALUE sets list values."""
    use_list = as_list or len(values) > 1
    setter = FieldSetter(
        name=name,
        value=None if use_list else values[0],
        list_values=values if use_list else (),
        description=description,
        set_by=set_by,
    )
    resolved_resources = resources_path or str(Path(schema_path).parent)
    try:
        count = setter.set(schema_path, resolved_resources)
    except _SETTER_ERRORS as exc:
        raise CliError(str(exc)) from exc
    click.echo(f"set {count} field(s)")


@cli.command(name="list")
@click.option(
    "--schema",
    "schema_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the schema document holding the setter definitions",
)
@click.option(
    "--resources",
    "resources_path",
    required=False,
    type=click.Path(path_type=str),
    help="Resource directory whose setter references are counted",
)
def list_command(schema_path: str, resources_path: str | None) -> None:
    """List the setters defined in a schema document."""
    try:
        definitions = list_setters(schema_path, resources_path)
    except ListError as exc:
        raise CliError(str(exc)) from exc

    rows = [("NAME", "VALUE", "SET BY", "DESCRIPTION", "COUNT")]
    for definition in definitions:
        value = (
            "[" + ",".join(definition.list_values) + "]"
            if definition.is_list
            else definition.value or ""
        )
        rows.append(
            (
                definition.name,
                value,
                definition.set_by,
                definition.description,
                str(definition.count) if resources_path else "",
            )
        )
    widths = [max(len(row[column]) for row in rows) for column in range(len(rows[0]))]
    for row in rows:
        click.echo("  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip())


@cli.command(name="propagate")
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to the YAML propagation configuration",
)
@click.option(
    "--schema",
    "schema_path",
    required=False,
    type=click.Path(path_type=str),
    help="Source schema document; overrides source.schema",
)
@click.option(
    "--resources",
    "resources_path",
    required=False,
    type=click.Path(path_type=str),
    help="Source resource directory; overrides source.resources",
)
@click.option(
    "--dest",
    "dest_dirs",
    multiple=True,
    type=click.Path(path_type=str),
    help="Destination directory; repeatable, overrides destinations",
)
def propagate(
    config_path: str | None,
    schema_path: str | None,
    resources_path: str | None,
    dest_dirs: tuple[str, ...],
) -> None:
    """Apply every setter of a source package to destination packages."""
    source_schema, source_resources, destinations = _resolve_propagation_targets(
        config_path, schema_path, resources_path, dest_dirs
    )
    try:
        results = set_all_setter_definitions(source_schema, source_resources, destinations)
    except _SETTER_ERRORS as exc:
        raise CliError(str(exc)) from exc
    for result in results:
        click.echo(f"{result.setter}\t{result.destination}\t{result.count}")


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML propagation configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML propagation configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


def _resolve_propagation_targets(
    config_path: str | None,
    schema_path: str | None,
    resources_path: str | None,
    dest_dirs: tuple[str, ...],
) -> tuple[Path, Path, tuple[Path, ...]]:
    if config_path:
        try:
            configuration = load_configuration(config_path)
        except ConfigurationError as exc:
            raise CliError(str(exc)) from exc
        source_schema = configuration.source.schema_path
        source_resources = configuration.source.resources_path
        destinations = configuration.destinations
    elif schema_path:
        source_schema = Path(schema_path)
        source_resources = source_schema.parent
        destinations = ()
    else:
        raise CliError("Either --config or --schema is required.")

    if schema_path:
        source_schema = Path(schema_path)
    if resources_path:
        source_resources = Path(resources_path)
    if dest_dirs:
        destinations = tuple(Path(dest_dir) for dest_dir in dest_dirs)
    if not destinations:
        raise CliError("At least one --dest directory is required.")
    return source_schema, source_resources, destinations


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    package_logger = logging.getLogger("setter_sync")
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    package_logger.handlers = [handler]
    package_logger.setLevel(logging.DEBUG)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
