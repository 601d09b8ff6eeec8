"""Field configuration commands for the field-mapper CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from field_mapper.settings import Settings

from .common import FIELD_CONFIG_OPTION, resolve_field_config

app = typer.Typer(
    help="Inspect the field configuration.",
    no_args_is_help=True,
)


@app.command("show")
def show(
    field_config: Optional[Path] = FIELD_CONFIG_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print the configuration as JSON."),
) -> None:
    """Print the configured fields in output order."""

    config = resolve_field_config(field_config, Settings.load())
    if as_json:
        typer.echo(json.dumps(config.describe(), indent=2))
        return

    for definition in config.fields:
        flag = "mandatory" if definition.mandatory else "optional"
        typer.echo(f"{definition.name}\t{definition.display_name}\t{flag}")


@app.command("validate")
def validate(field_config: Optional[Path] = FIELD_CONFIG_OPTION) -> None:
    """Validate a field configuration file."""

    config = resolve_field_config(field_config, Settings.load())
    mandatory = config.mandatory_fields()
    typer.echo(f"OK: {len(config.fields)} fields, {len(mandatory)} mandatory ({', '.join(mandatory) or 'none'})")


__all__ = ["app"]
