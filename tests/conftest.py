from __future__ import annotations

import os
from pathlib import Path

import pytest
from openpyxl import Workbook

from field_mapper.config import FieldConfig, parse_field_config
from field_mapper.settings import ENV_PREFIX, Settings

SCENARIO_HEADERS = ["Account Number", "Account Active", "Customer Name", "Customer ID"]
SCENARIO_ROWS = [
    ["1234", "Yes", "John Doe", "1001"],
    ["2345", "No", "Jane Smith", "1002"],
]


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep settings.toml/.env/env vars from the developer machine out of tests."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)


@pytest.fixture
def scenario_config() -> FieldConfig:
    return parse_field_config(
        {
            "fields": [
                {"name": "Client Code", "displayName": "Client Code", "isMandatory": True},
                {"name": "Customer ID", "displayName": "Customer ID", "isMandatory": False},
            ]
        }
    )


@pytest.fixture
def scenario_table() -> list[list[str]]:
    return [list(SCENARIO_HEADERS), *(list(row) for row in SCENARIO_ROWS)]


@pytest.fixture
def scenario_csv(tmp_path: Path) -> Path:
    path = tmp_path / "accounts.csv"
    lines = [",".join(SCENARIO_HEADERS), *(",".join(row) for row in SCENARIO_ROWS)]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def scenario_xlsx(tmp_path: Path) -> Path:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Accounts"
    sheet.append(SCENARIO_HEADERS)
    for row in SCENARIO_ROWS:
        sheet.append(row)

    path = tmp_path / "accounts.xlsx"
    workbook.save(path)
    workbook.close()
    return path


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(output_dir=tmp_path / "out")
