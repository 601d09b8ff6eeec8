"""Batch classification of a raw table into processed and missing rows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from field_mapper.config.field_config import FieldConfig
from field_mapper.exceptions import NoDataError
from field_mapper.mapping.row_mapper import FieldMapping, RowMapper, normalize_headers
from field_mapper.mapping.summary import Summary, SummaryBuilder


@dataclass(frozen=True)
class MappedOutput:
    """Everything a renderer needs: header order, both row sets and the summary."""

    field_order: list[str]
    processed_rows: list[list[str]]
    missing_rows: list[list[str]]
    summary: Summary


@dataclass(frozen=True)
class BatchResult:
    field_order: list[str]
    processed_rows: list[list[str]]
    missing_rows: list[list[str]]
    summary: Summary

    def to_output(self) -> MappedOutput:
        return MappedOutput(
            field_order=list(self.field_order),
            processed_rows=self.processed_rows,
            missing_rows=self.missing_rows,
            summary=self.summary,
        )


def resolve_field_order(field_config: FieldConfig, mapping: FieldMapping) -> list[str]:
    """Configured order, followed by mapped names the configuration does not know."""

    order = field_config.ordered_fields()
    known = set(order)
    for name in mapping:
        if name not in known:
            order.append(name)
            known.add(name)
    return order


def unmapped_mandatory_fields(field_config: FieldConfig, mapping: FieldMapping) -> list[str]:
    return [
        definition.name
        for definition in field_config.fields
        if definition.mandatory and not (mapping.get(definition.name) or "").strip()
    ]


def classify_rows(
    table: Sequence[Sequence[str]],
    mapping: FieldMapping,
    field_config: FieldConfig,
) -> BatchResult:
    """Map every data row and split them into processed and missing rows.

    Raises :class:`NoDataError` for a table without any rows (not even a header).
    """

    if not table:
        raise NoDataError("No data found in the file.")

    field_order = resolve_field_order(field_config, mapping)
    mapper = RowMapper(
        normalized_headers=normalize_headers(table[0]),
        mapping=mapping,
        field_order=field_order,
        fields=field_config.index(),
    )

    processed_rows: list[list[str]] = []
    missing_rows: list[list[str]] = []
    summary = SummaryBuilder()

    for index, row in enumerate(table):
        if index == 0:
            continue
        outcome = mapper.map_row(row)
        if outcome.is_complete:
            processed_rows.append(outcome.processed)
        else:
            missing_rows.append(outcome.missing)
        summary.record(line_number=index + 1, failed_fields=outcome.failed_fields)

    return BatchResult(
        field_order=field_order,
        processed_rows=processed_rows,
        missing_rows=missing_rows,
        summary=summary.build(),
    )


__all__ = [
    "BatchResult",
    "MappedOutput",
    "classify_rows",
    "resolve_field_order",
    "unmapped_mandatory_fields",
]
