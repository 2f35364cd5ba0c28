"""Command-line entry point for sysctlconf."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
import yaml
from omegaconf.errors import OmegaConfBaseException

from sysctlconf.config import load_config
from sysctlconf.parser import LoadError, load
from sysctlconf.reporting.report import emit_config, emit_validation_success
from sysctlconf.schema import SchemaLoadError, SchemaValidationError, load_schema, validate

app = typer.Typer(help="sysctlconf: parse and validate sysctl.conf-style configuration files.")

LOG = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s :: %(message)s",
    )


def _fail(message: str) -> typer.Exit:
    typer.secho(message, fg=typer.colors.RED, err=True)
    return typer.Exit(code=1)


@app.command("parse")
def parse_command(
    path: Path = typer.Argument(..., help="sysctl.conf-style file to parse."),
    output_format: str | None = typer.Option(
        None,
        "--format",
        "-f",
        help="Output format: tree, json or plain.",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Optional YAML settings file to load before applying CLI overrides.",
    ),
    export_json: Path | None = typer.Option(
        None,
        "--export-json",
        help="Optional JSON export path.",
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level (DEBUG, INFO, ...)."),
) -> None:
    """Load a config file and print the parsed tree."""
    _configure_logging(log_level)

    overrides = {
        "output.format": output_format,
        "output.export_json": str(export_json) if export_json is not None else None,
    }
    try:
        config = load_config(config_path=config_file, overrides=overrides)
    except (OSError, yaml.YAMLError, OmegaConfBaseException) as exc:
        raise _fail(f"settings error: {exc}") from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    try:
        node = load(path)
    except LoadError as exc:
        raise _fail(f"error: {exc}") from exc

    LOG.info("Parsed %s into %d top-level key(s)", path, len(node))
    try:
        emit_config(node, config, title=str(path))
    except OSError as exc:
        raise _fail(f"export error: {exc}") from exc


@app.command("validate")
def validate_command(
    path: Path = typer.Argument(..., help="sysctl.conf-style file to validate."),
    schema_file: Path = typer.Option(
        ...,
        "--schema",
        "-s",
        help="Schema file declaring a type for every allowed key.",
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level (DEBUG, INFO, ...)."),
) -> None:
    """Check that every key of a config file is declared in a schema with a matching type."""
    _configure_logging(log_level)

    try:
        schema = load_schema(schema_file)
    except SchemaLoadError as exc:
        raise _fail(f"schema error: {exc}") from exc

    try:
        node = load(path)
    except LoadError as exc:
        raise _fail(f"error: {exc}") from exc

    try:
        validate(node, schema)
    except SchemaValidationError as exc:
        raise _fail(str(exc)) from exc

    emit_validation_success(node, schema, source=str(path))


if __name__ == "__main__":  # pragma: no cover
    app()
