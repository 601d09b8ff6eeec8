from datetime import date, datetime, time
from pathlib import Path

import pytest
from openpyxl import Workbook

from field_mapper.exceptions import ReadError, UnsupportedFormatError
from field_mapper.io.reader import cell_text, read_table, read_table_bytes, source_kind


def test_source_kind_by_extension():
    assert source_kind("data.csv") == "csv"
    assert source_kind("DATA.XLSX") == "spreadsheet"
    assert source_kind(Path("macro.xlsm")) == "spreadsheet"

    with pytest.raises(UnsupportedFormatError):
        source_kind("notes.txt")
    with pytest.raises(UnsupportedFormatError):
        source_kind("no_extension")


def test_csv_handles_bom_quotes_and_blank_lines(tmp_path: Path):
    path = tmp_path / "rows.csv"
    path.write_text('\ufeffName,Note\n"Doe, John","said ""hi"""\n\nJane,\n', encoding="utf-8")

    assert read_table(path) == [
        ["Name", "Note"],
        ["Doe, John", 'said "hi"'],
        ["Jane", ""],
    ]


def test_csv_keeps_ragged_rows(tmp_path: Path):
    path = tmp_path / "ragged.csv"
    path.write_text("a,b,c\n1\n1,2,3,4\n", encoding="utf-8")

    assert read_table(path) == [["a", "b", "c"], ["1"], ["1", "2", "3", "4"]]


def test_empty_csv_is_not_an_error(tmp_path: Path):
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")

    assert read_table(path) == []


def test_csv_malformed_quoting_is_a_read_error(tmp_path: Path):
    path = tmp_path / "bad.csv"
    path.write_text('a,b\n"x"y,z\n', encoding="utf-8")

    with pytest.raises(ReadError):
        read_table(path)


def test_missing_files_are_read_errors(tmp_path: Path):
    with pytest.raises(ReadError):
        read_table(tmp_path / "missing.csv")
    with pytest.raises(ReadError):
        read_table(tmp_path / "missing.xlsx")


def test_unsupported_extension(tmp_path: Path):
    path = tmp_path / "input.txt"
    path.write_text("a,b\n", encoding="utf-8")

    with pytest.raises(UnsupportedFormatError):
        read_table(path)


def test_spreadsheet_reads_first_sheet_as_text(tmp_path: Path):
    workbook = Workbook()
    first = workbook.active
    first.title = "Data"
    first.append(["id", "amount", "active", "opened", None])
    first.append([1001, 2.5, True, datetime(2024, 1, 1), None])
    first.append([1002, 3.0, False, datetime(2024, 1, 2, 12, 0), None])
    first.append([None, None])
    second = workbook.create_sheet("Other")
    second.append(["ignored"])
    path = tmp_path / "input.xlsx"
    workbook.save(path)
    workbook.close()

    assert read_table(path) == [
        ["id", "amount", "active", "opened"],
        ["1001", "2.5", "TRUE", "2024-01-01"],
        ["1002", "3", "FALSE", "2024-01-02 12:00:00"],
    ]


def test_corrupt_spreadsheet_is_a_read_error(tmp_path: Path):
    path = tmp_path / "corrupt.xlsx"
    path.write_text("not a zip archive", encoding="utf-8")

    with pytest.raises(ReadError):
        read_table(path)


def test_read_table_bytes(scenario_xlsx: Path):
    assert read_table_bytes(b"h1,h2\nv1,v2\n", "upload.csv") == [["h1", "h2"], ["v1", "v2"]]

    table = read_table_bytes(scenario_xlsx.read_bytes(), "upload.xlsx")
    assert table[0] == ["Account Number", "Account Active", "Customer Name", "Customer ID"]
    assert table[1] == ["1234", "Yes", "John Doe", "1001"]

    with pytest.raises(ReadError):
        read_table_bytes(b"\xff\xfe\x00bad", "upload.csv")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, ""),
        ("  padded ", "  padded "),
        (True, "TRUE"),
        (42, "42"),
        (42.0, "42"),
        (0.25, "0.25"),
        (date(2024, 5, 6), "2024-05-06"),
        (time(8, 15), "08:15:00"),
    ],
)
def test_cell_text(value, expected):
    assert cell_text(value) == expected
