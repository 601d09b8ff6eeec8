"""Shared types for output renderers."""

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager, suppress
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import IO, Iterator


class OutputFormat(str, Enum):
    """Supported output encodings."""

    XLSX = "xlsx"
    CSV = "csv"
    MARKDOWN = "markdown"

    @property
    def extension(self) -> str:
        return {"xlsx": ".xlsx", "csv": ".csv", "markdown": ".md"}[self.value]

    @property
    def media_type(self) -> str:
        return {
            "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            "csv": "text/csv",
            "markdown": "text/markdown",
        }[self.value]

    @classmethod
    def lookup(cls, value: "str | OutputFormat | None") -> "OutputFormat | None":
        """Exact lookup; ``None`` for values that are not a known format or alias."""

        if isinstance(value, OutputFormat):
            return value
        key = (value or "").strip().lower()
        if not key:
            return cls.XLSX
        return _ALIASES.get(key)

    @classmethod
    def parse(cls, value: "str | OutputFormat | None") -> "OutputFormat":
        """Resolve a selector; anything unrecognised renders as a workbook."""
        return cls.lookup(value) or cls.XLSX


_ALIASES = {
    "xlsx": OutputFormat.XLSX,
    "excel": OutputFormat.XLSX,
    "csv": OutputFormat.CSV,
    "markdown": OutputFormat.MARKDOWN,
    "md": OutputFormat.MARKDOWN,
}


@dataclass(frozen=True)
class ArtifactTarget:
    """Where to write artifacts; ``run_id`` keeps concurrent requests apart."""

    output_dir: Path
    run_id: str

    def processed_path(self, fmt: OutputFormat) -> Path:
        return self.output_dir / f"{self.run_id}_processed_data{fmt.extension}"

    def missing_path(self, fmt: OutputFormat) -> Path:
        return self.output_dir / f"{self.run_id}_missing_data{fmt.extension}"


@dataclass(frozen=True)
class RenderedArtifact:
    format: OutputFormat
    path: Path
    missing_path: Path | None
    media_type: str

    @property
    def paths(self) -> list[Path]:
        return [self.path] if self.missing_path is None else [self.path, self.missing_path]


@contextmanager
def atomic_text_writer(path: Path) -> Iterator[IO[str]]:
    """Write text to a sibling temp file and move it over ``path`` on success."""

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            yield handle
        tmp_path.replace(path)
    finally:
        with suppress(FileNotFoundError):
            tmp_path.unlink()


__all__ = ["ArtifactTarget", "OutputFormat", "RenderedArtifact", "atomic_text_writer"]
