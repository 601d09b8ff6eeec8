"""Column mapping and row classification."""

from field_mapper.mapping.batch import (
    BatchResult,
    MappedOutput,
    classify_rows,
    resolve_field_order,
    unmapped_mandatory_fields,
)
from field_mapper.mapping.row_mapper import (
    MISSING_MARKER,
    RowMapper,
    RowOutcome,
    map_row,
    normalize_header,
    normalize_headers,
)
from field_mapper.mapping.summary import MissingRowReport, Summary

__all__ = [
    "MISSING_MARKER",
    "BatchResult",
    "MappedOutput",
    "MissingRowReport",
    "RowMapper",
    "RowOutcome",
    "Summary",
    "classify_rows",
    "map_row",
    "normalize_header",
    "normalize_headers",
    "resolve_field_order",
    "unmapped_mandatory_fields",
]
