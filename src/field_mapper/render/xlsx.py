"""Workbook renderer: ProcessedData and MissingData sheets in one file."""

from __future__ import annotations

from contextlib import suppress
from typing import Sequence

from openpyxl import Workbook
from openpyxl.utils.exceptions import IllegalCharacterError

from field_mapper.exceptions import RenderError
from field_mapper.mapping.batch import MappedOutput
from field_mapper.render.base import ArtifactTarget, OutputFormat, RenderedArtifact

PROCESSED_SHEET = "ProcessedData"
MISSING_SHEET = "MissingData"


def create_output_workbook() -> Workbook:
    """Create a clean output workbook with no default sheet."""

    workbook = Workbook()
    if workbook.worksheets:
        workbook.remove(workbook.worksheets[0])
    return workbook


def _append_sheet(workbook: Workbook, title: str, header: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    sheet = workbook.create_sheet(title=title)
    sheet.append(list(header))
    for row in rows:
        sheet.append(list(row))
        # Source text is data; never let a leading "=" turn into a formula.
        for cell in sheet[sheet.max_row]:
            if cell.data_type == "f":
                cell.data_type = "s"


def build_workbook(output: MappedOutput) -> Workbook:
    workbook = create_output_workbook()
    _append_sheet(workbook, PROCESSED_SHEET, output.field_order, output.processed_rows)
    _append_sheet(workbook, MISSING_SHEET, output.field_order, output.missing_rows)
    return workbook


def render_xlsx(output: MappedOutput, target: ArtifactTarget) -> RenderedArtifact:
    output_path = target.processed_path(OutputFormat.XLSX)
    tmp_path = output_path.with_suffix(".xlsx.tmp")

    try:
        workbook = build_workbook(output)
    except IllegalCharacterError as exc:
        raise RenderError(f"error building output workbook: {exc}") from exc

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        workbook.save(tmp_path)
        tmp_path.replace(output_path)
    except OSError as exc:
        raise RenderError(f"error saving output file {output_path}: {exc}") from exc
    finally:
        with suppress(Exception):
            workbook.close()
        with suppress(OSError):
            tmp_path.unlink()

    return RenderedArtifact(
        format=OutputFormat.XLSX,
        path=output_path,
        missing_path=None,
        media_type=OutputFormat.XLSX.media_type,
    )


__all__ = ["MISSING_SHEET", "PROCESSED_SHEET", "build_workbook", "create_output_workbook", "render_xlsx"]
