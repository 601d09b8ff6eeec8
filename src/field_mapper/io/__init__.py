"""Source file readers."""

from field_mapper.io.reader import RawTable, read_table, read_table_bytes, source_kind

__all__ = ["RawTable", "read_table", "read_table_bytes", "source_kind"]
