"""Processing summary built from row classification results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence


@dataclass(frozen=True)
class MissingRowReport:
    """Mandatory fields that failed for one input line (1-based, header is line 1)."""

    line_number: int
    fields: tuple[str, ...]

    def describe(self) -> str:
        return f"Row {self.line_number}: Missing mandatory fields - {', '.join(self.fields)}"


@dataclass(frozen=True)
class Summary:
    total_rows: int
    successful_rows: int
    missing_rows: int
    details: tuple[MissingRowReport, ...] = field(default_factory=tuple)

    def lines(self) -> list[str]:
        return [report.describe() for report in self.details]

    def render(self) -> str:
        parts = ["Data Mapping Summary:\n"]
        parts.extend(f"{line}\n" for line in self.lines())
        parts.append(f"\nTotal Rows Processed: {self.total_rows}\n")
        parts.append(f"Successful Rows: {self.successful_rows}\n")
        parts.append(f"Rows with Missing Data: {self.missing_rows}\n")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_rows": self.total_rows,
            "successful_rows": self.successful_rows,
            "missing_rows": self.missing_rows,
            "details": self.lines(),
        }

    def __str__(self) -> str:
        return self.render()


class SummaryBuilder:
    """Accumulate row outcomes in input order."""

    def __init__(self) -> None:
        self._total = 0
        self._successful = 0
        self._missing = 0
        self._details: list[MissingRowReport] = []

    def record(self, *, line_number: int, failed_fields: Sequence[str]) -> None:
        self._total += 1
        if not failed_fields:
            self._successful += 1
            return
        self._missing += 1
        self._details.append(MissingRowReport(line_number=line_number, fields=tuple(failed_fields)))

    def build(self) -> Summary:
        return Summary(
            total_rows=self._total,
            successful_rows=self._successful,
            missing_rows=self._missing,
            details=tuple(self._details),
        )


__all__ = ["MissingRowReport", "Summary", "SummaryBuilder"]
