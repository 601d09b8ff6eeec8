"""Process commands for the field-mapper CLI."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from field_mapper.engine import Engine
from field_mapper.models import ProcessRequest
from field_mapper.render import OutputFormat
from field_mapper.settings import Settings

from .common import (
    DEBUG_OPTION,
    FIELD_CONFIG_OPTION,
    LOG_FORMAT_OPTION,
    LOG_LEVEL_OPTION,
    QUIET_OPTION,
    LogFormat,
    load_mapping_file,
    parse_mapping_pairs,
    resolve_field_config,
    resolve_logging,
)

app = typer.Typer(
    help=(
        "Map a CSV/XLSX file onto the configured fields.\n\n"
        "Rows with every mandatory field resolved go to the processed output; "
        "the rest go to the missing-data output."
    ),
    no_args_is_help=True,
    rich_markup_mode="markdown",
)


@app.command("file")
def process_file(
    input_file: Path = typer.Option(
        ...,
        "--input",
        "-i",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Source file (.csv or .xlsx; first sheet only).",
    ),
    mapping_pairs: Optional[List[str]] = typer.Option(
        None,
        "--map",
        "-m",
        help="Field mapping as FIELD=Source Header. Repeat for each field.",
    ),
    mappings_file: Optional[Path] = typer.Option(
        None,
        "--mappings-file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help='JSON object of field mappings, e.g. {"Client_Code": "Account Number"}. --map entries override it.',
    ),
    output_format: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Output format: xlsx (alias excel), csv (pipe-delimited) or markdown. Default: settings.",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        help="Directory for generated artifacts (default: settings output_dir).",
    ),
    run_id: Optional[str] = typer.Option(
        None,
        "--run-id",
        help="Artifact name prefix (default: a generated unique id).",
    ),
    field_config: Optional[Path] = FIELD_CONFIG_OPTION,
    log_format: Optional[LogFormat] = LOG_FORMAT_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
    debug: bool = DEBUG_OPTION,
    quiet: bool = QUIET_OPTION,
) -> None:
    """Process a single input file and print the summary."""

    if output_format is not None and OutputFormat.lookup(output_format) is None:
        raise typer.BadParameter(
            f"Unknown output format {output_format!r}; choose xlsx, excel, csv or markdown.",
            param_hint="format",
        )

    settings = Settings.load()
    effective_format, effective_level = resolve_logging(
        log_format=log_format,
        log_level=log_level,
        debug=debug,
        quiet=quiet,
        settings=settings,
    )
    engine_settings = settings.model_copy(update={"log_format": effective_format, "log_level": effective_level})
    engine = Engine(field_config=resolve_field_config(field_config, settings), settings=engine_settings)

    mapping: dict[str, str] = {}
    if mappings_file is not None:
        mapping.update(load_mapping_file(mappings_file))
    mapping.update(parse_mapping_pairs(mapping_pairs or []))

    result = engine.process(
        ProcessRequest(
            input_file=input_file,
            mapping=mapping,
            output_format=output_format,
            output_dir=output_dir,
            run_id=run_id,
        )
    )

    if result.summary is not None:
        typer.echo(result.summary.render())
    if result.artifact is not None:
        typer.echo(f"Processed data: {result.artifact.path}")
        if result.artifact.missing_path is not None:
            typer.echo(f"Missing data: {result.artifact.missing_path}")
    if result.error is not None:
        typer.echo(result.error.message, err=True)

    raise typer.Exit(code=0 if result.ok else 1)


__all__ = ["app"]
