"""Per-row field resolution and classification."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from field_mapper.config.field_config import FieldDefinition

MISSING_MARKER = "MISSING"

FieldMapping = Mapping[str, str | None]


def normalize_header(value: str | None) -> str:
    """Comparison key for headers: surrounding whitespace stripped, lowercased."""
    return (value or "").strip().lower()


def normalize_headers(headers: Sequence[str]) -> list[str]:
    return [normalize_header(header) for header in headers]


def find_column(normalized_headers: Sequence[str], mapped_column: str | None) -> int | None:
    """Index of the leftmost header equal to ``mapped_column`` after normalization."""

    target = normalize_header(mapped_column)
    for index, header in enumerate(normalized_headers):
        if header == target:
            return index
    return None


@dataclass(frozen=True)
class RowOutcome:
    """Result of mapping one data row onto the canonical field order."""

    processed: list[str]
    missing: list[str]
    failed_fields: list[str]
    is_complete: bool


@dataclass(frozen=True)
class _FieldPlan:
    name: str
    mandatory: bool
    mapped_column: str  # "" when the field has no mapping
    column_index: int | None


class RowMapper:
    """Resolve canonical fields for data rows that share one header row.

    The column lookup for every field is computed once at construction, so
    mapping a row is a single pass over the field order. A mapping value that
    is empty or only whitespace leaves the field unmapped.
    """

    def __init__(
        self,
        *,
        normalized_headers: Sequence[str],
        mapping: FieldMapping,
        field_order: Sequence[str],
        fields: Mapping[str, FieldDefinition],
    ) -> None:
        self.field_order = list(field_order)
        self._plan: list[_FieldPlan] = []
        for name in self.field_order:
            definition = fields.get(name)
            raw = mapping.get(name) or ""
            mapped_column = raw if raw.strip() else ""
            self._plan.append(
                _FieldPlan(
                    name=name,
                    mandatory=bool(definition and definition.mandatory),
                    mapped_column=mapped_column,
                    column_index=find_column(normalized_headers, mapped_column) if mapped_column else None,
                )
            )

    def map_row(self, row: Sequence[str]) -> RowOutcome:
        processed: list[str] = []
        missing: list[str] = []
        failed: list[str] = []

        for plan in self._plan:
            if not plan.mapped_column and not plan.mandatory:
                # Intentionally unmapped optional field.
                processed.append("")
                missing.append("")
                continue

            index = plan.column_index
            if index is not None and index < len(row) and (row[index] or "").strip():
                processed.append(row[index])
                missing.append(row[index])
                continue

            processed.append("")
            missing.append(MISSING_MARKER)
            if plan.mandatory:
                failed.append(plan.name)

        return RowOutcome(processed=processed, missing=missing, failed_fields=failed, is_complete=not failed)


def map_row(
    row: Sequence[str],
    normalized_headers: Sequence[str],
    mapping: FieldMapping,
    field_order: Sequence[str],
    fields: Mapping[str, FieldDefinition],
) -> RowOutcome:
    """Map a single row; prefer :class:`RowMapper` when mapping many rows."""

    mapper = RowMapper(
        normalized_headers=normalized_headers,
        mapping=mapping,
        field_order=field_order,
        fields=fields,
    )
    return mapper.map_row(row)


__all__ = [
    "MISSING_MARKER",
    "FieldMapping",
    "RowMapper",
    "RowOutcome",
    "find_column",
    "map_row",
    "normalize_header",
    "normalize_headers",
]
