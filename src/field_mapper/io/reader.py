"""Tabular source readers.

Both readers return a :data:`RawTable`: a list of string rows where row 0 is
the header row. Rows are not padded; consumers treat short rows as having
empty trailing cells.
"""

from __future__ import annotations

import csv
import io
import zipfile
from contextlib import suppress
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, BinaryIO, Iterable, TextIO

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from field_mapper.exceptions import ReadError, UnsupportedFormatError

RawTable = list[list[str]]

CSV_EXTENSIONS = frozenset({".csv"})
SPREADSHEET_EXTENSIONS = frozenset({".xlsx", ".xlsm"})
SUPPORTED_EXTENSIONS = CSV_EXTENSIONS | SPREADSHEET_EXTENSIONS


def source_kind(name: str | Path) -> str:
    """Return ``"csv"`` or ``"spreadsheet"`` for a file name, by extension."""

    suffix = Path(name).suffix.lower()
    if suffix in CSV_EXTENSIONS:
        return "csv"
    if suffix in SPREADSHEET_EXTENSIONS:
        return "spreadsheet"
    raise UnsupportedFormatError(
        f"Unsupported file format `{suffix or Path(name).name}`: only .csv and .xlsx files are allowed"
    )


def cell_text(value: Any) -> str:
    """Render a worksheet cell value the way it is displayed."""

    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ", timespec="seconds")
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


def _trim_row(values: Iterable[Any]) -> list[str]:
    cells = [cell_text(value) for value in values]
    while cells and cells[-1] == "":
        cells.pop()
    return cells


def _drop_trailing_empty_rows(rows: RawTable) -> RawTable:
    while rows and not rows[-1]:
        rows.pop()
    return rows


def _parse_csv(handle: TextIO, *, source: str) -> RawTable:
    try:
        reader = csv.reader(handle, strict=True)
        return [list(record) for record in reader if record]
    except (csv.Error, UnicodeDecodeError) as exc:
        raise ReadError(f"Error reading CSV file {source}: {exc}") from exc


def _parse_workbook(handle: Path | BinaryIO, *, source: str) -> RawTable:
    try:
        workbook = load_workbook(filename=handle, read_only=True, data_only=True)
    except (OSError, zipfile.BadZipFile, InvalidFileException, KeyError, ValueError) as exc:
        raise ReadError(f"Error opening xlsx file {source}: {exc}") from exc

    try:
        if not workbook.worksheets:
            return []
        worksheet = workbook.worksheets[0]
        rows = [_trim_row(values) for values in worksheet.iter_rows(values_only=True)]
    except (KeyError, ValueError, zipfile.BadZipFile) as exc:
        raise ReadError(f"Error reading sheet rows from {source}: {exc}") from exc
    finally:
        with suppress(Exception):
            workbook.close()

    return _drop_trailing_empty_rows(rows)


def read_csv_table(path: Path) -> RawTable:
    try:
        with path.open("r", encoding="utf-8-sig", newline="") as handle:
            return _parse_csv(handle, source=str(path))
    except OSError as exc:
        raise ReadError(f"Error opening CSV file {path}: {exc}") from exc


def read_spreadsheet_table(path: Path) -> RawTable:
    if not path.is_file():
        raise ReadError(f"Error opening xlsx file {path}: file not found")
    return _parse_workbook(path, source=str(path))


def read_table(path: Path | str) -> RawTable:
    """Read a CSV file or the first sheet of a workbook into a :data:`RawTable`."""

    source = Path(path)
    if source_kind(source) == "csv":
        return read_csv_table(source)
    return read_spreadsheet_table(source)


def read_table_bytes(payload: bytes, filename: str) -> RawTable:
    """Read an in-memory upload; ``filename`` selects the format by extension."""

    if source_kind(filename) == "csv":
        try:
            text = payload.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ReadError(f"Error reading CSV file {filename}: {exc}") from exc
        return _parse_csv(io.StringIO(text, newline=""), source=filename)
    return _parse_workbook(io.BytesIO(payload), source=filename)


__all__ = [
    "CSV_EXTENSIONS",
    "RawTable",
    "SPREADSHEET_EXTENSIONS",
    "SUPPORTED_EXTENSIONS",
    "cell_text",
    "read_csv_table",
    "read_spreadsheet_table",
    "read_table",
    "read_table_bytes",
    "source_kind",
]
