"""Input adapters that normalize raw source tables."""

from .sources import (
    COLUMN_ALIASES,
    SourceRow,
    load_records_from_csv,
    load_source_csv,
    parse_flags,
    parse_number,
    parse_positions,
    row_to_record,
    rows_to_records,
)

__all__ = [
    "COLUMN_ALIASES",
    "SourceRow",
    "load_records_from_csv",
    "load_source_csv",
    "parse_flags",
    "parse_number",
    "parse_positions",
    "row_to_record",
    "rows_to_records",
]
