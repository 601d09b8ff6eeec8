"""Pipe-delimited text renderer: one file for processed rows, one for missing rows."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Sequence

from field_mapper.exceptions import RenderError
from field_mapper.mapping.batch import MappedOutput
from field_mapper.render.base import ArtifactTarget, OutputFormat, RenderedArtifact, atomic_text_writer

DELIMITER = "|"


def write_delimited(path: Path, header: Sequence[str], rows: Sequence[Sequence[str]]) -> Path:
    try:
        with atomic_text_writer(path) as handle:
            writer = csv.writer(handle, delimiter=DELIMITER, lineterminator="\n")
            writer.writerow(header)
            writer.writerows(rows)
    except OSError as exc:
        raise RenderError(f"error creating CSV file {path}: {exc}") from exc
    return path


def render_delimited(output: MappedOutput, target: ArtifactTarget) -> RenderedArtifact:
    processed_path = write_delimited(
        target.processed_path(OutputFormat.CSV), output.field_order, output.processed_rows
    )
    missing_path = write_delimited(
        target.missing_path(OutputFormat.CSV), output.field_order, output.missing_rows
    )
    return RenderedArtifact(
        format=OutputFormat.CSV,
        path=processed_path,
        missing_path=missing_path,
        media_type=OutputFormat.CSV.media_type,
    )


__all__ = ["DELIMITER", "render_delimited", "write_delimited"]
