"""CLI entrypoint for :mod:`field_mapper`.

Exposes the field-mapper CLI with:

- `process` - map a source file onto the configured fields (subcommand: `file`).
- `config`  - inspect the field configuration (subcommands: `show`, `validate`).
- `version` - print the package version.
"""

from __future__ import annotations

import typer

from field_mapper import __version__
from field_mapper.cli.config import app as config_app
from field_mapper.cli.process import app as process_app


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


app = typer.Typer(
    help=(
        "Field Mapper: map spreadsheet columns onto a canonical field list.\n\n"
        "Rows with every mandatory field resolved are written to the processed output; "
        "the rest are written to the missing-data output.\n\n"
        "## Quick Start Workflow\n\n"
        "### 1. Inspect the configured fields\n"
        "```bash\n"
        "field-mapper config show\n"
        "```\n\n"
        "### 2. Process a file\n"
        "```bash\n"
        "field-mapper process file \\\n"
        "    --input accounts.csv \\\n"
        '    --map "Client_Code=Account Number" \\\n'
        '    --map "Customer_ID=Customer ID" \\\n'
        "    --format markdown\n"
        "```\n"
    ),
    no_args_is_help=True,
    rich_markup_mode="markdown",
)

# Subcommand groups
app.add_typer(process_app, name="process")
app.add_typer(config_app, name="config")


@app.callback()
def root(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Print the version and exit.",
    ),
) -> None:
    pass


@app.command("version")
def version_command() -> None:
    """Print the package version."""
    typer.echo(__version__)


def main() -> None:
    """Entrypoint used by console scripts and `python -m field_mapper`."""
    app()


__all__ = ["app", "main"]
