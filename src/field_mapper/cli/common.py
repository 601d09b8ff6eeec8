"""Shared helpers/options for the field-mapper CLI.

Keep this module dependency-light; it should be safe to import from any CLI command module.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

import typer
from typer import BadParameter

from field_mapper.config import FieldConfig, load_field_config
from field_mapper.exceptions import ConfigError
from field_mapper.settings import Settings


class LogFormat(str, Enum):
    """Supported log output formats."""

    text = "text"
    ndjson = "ndjson"


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def resolve_log_level(log_level: Optional[str], default_level: int) -> int:
    """Resolve a string log level to a logging level constant."""
    if not log_level:
        return default_level

    resolved = logging.getLevelNamesMapping().get(str(log_level).upper())
    if isinstance(resolved, int):
        return resolved

    raise BadParameter(f"Invalid log level: {log_level}", param_hint="log_level")


def resolve_logging(
    *,
    log_format: Optional[LogFormat],
    log_level: Optional[str],
    debug: bool,
    quiet: bool,
    settings: Settings,
) -> tuple[str, int]:
    """Compute effective log format/level with explicit precedence.

    Precedence: --quiet > --debug > --log-level > settings.
    """
    effective_format = log_format.value if log_format else settings.log_format
    base_level = resolve_log_level(log_level, settings.log_level)

    if quiet:
        effective_level = logging.WARNING
    elif debug:
        effective_level = logging.DEBUG
    else:
        effective_level = base_level

    return effective_format, effective_level


# ---------------------------------------------------------------------------
# Field configuration
# ---------------------------------------------------------------------------


def resolve_field_config(field_config: Optional[Path], settings: Settings) -> FieldConfig:
    """Load the field configuration from --field-config, settings, or the bundled default."""
    path = field_config if field_config is not None else settings.field_config
    try:
        return load_field_config(path)
    except ConfigError as exc:
        raise BadParameter(str(exc), param_hint="field_config") from exc


# ---------------------------------------------------------------------------
# Mapping input
# ---------------------------------------------------------------------------


def parse_mapping_pairs(pairs: Iterable[str]) -> dict[str, str]:
    """Parse repeated ``FIELD=Source Header`` options.

    Only the first ``=`` splits, so headers may contain ``=``. An empty header
    (``FIELD=``) explicitly leaves the field unmapped.
    """
    mapping: dict[str, str] = {}
    for pair in pairs:
        name, sep, header = pair.partition("=")
        name = name.strip()
        if not sep or not name:
            raise BadParameter(f"Expected FIELD=HEADER, got {pair!r}", param_hint="map")
        mapping[name] = header
    return mapping


def load_mapping_file(path: Path) -> dict[str, str]:
    """Load a JSON object of ``{"field": "Source Header"}`` pairs."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise BadParameter(f"Invalid field mappings file {path}: {exc}", param_hint="mappings_file") from exc

    if not isinstance(data, dict):
        raise BadParameter("Field mappings file must contain a JSON object", param_hint="mappings_file")

    mapping: dict[str, str] = {}
    for name, header in data.items():
        if header is None:
            continue
        if not isinstance(header, str):
            raise BadParameter(
                f"Mapping for {name!r} must be a string, got {type(header).__name__}",
                param_hint="mappings_file",
            )
        mapping[str(name)] = header
    return mapping


# ---------------------------------------------------------------------------
# Common reusable Typer options
# ---------------------------------------------------------------------------

FIELD_CONFIG_OPTION = typer.Option(
    None,
    "--field-config",
    exists=True,
    file_okay=True,
    dir_okay=False,
    resolve_path=True,
    help="Field configuration JSON (or set FIELD_MAPPER_FIELD_CONFIG / settings.toml). Defaults to the bundled file.",
)

LOG_FORMAT_OPTION = typer.Option(
    None,
    "--log-format",
    case_sensitive=False,
    help="Log output format.",
)

LOG_LEVEL_OPTION = typer.Option(
    None,
    "--log-level",
    case_sensitive=False,
    help="Log level (debug, info, warning, error, critical).",
)

DEBUG_OPTION = typer.Option(
    False,
    "--debug",
    help="Enable debug logging and verbose diagnostics.",
)

QUIET_OPTION = typer.Option(
    False,
    "--quiet",
    help="Reduce output to warnings and errors.",
)


__all__ = [
    "LogFormat",
    "load_mapping_file",
    "parse_mapping_pairs",
    "resolve_field_config",
    "resolve_log_level",
    "resolve_logging",
    "FIELD_CONFIG_OPTION",
    "LOG_FORMAT_OPTION",
    "LOG_LEVEL_OPTION",
    "DEBUG_OPTION",
    "QUIET_OPTION",
]
