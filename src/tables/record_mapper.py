"""Sparse typed record mapping.

This module aligns data rows to their header and keeps only the
populated columns, so an absent key always means "not supplied".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from core.types import ParsedTable, TypedRecord


@dataclass(frozen=True)
class MappedTable:
    """Records produced from one parsed table.

    Attributes:
        records: Sparse records in source row order.
        dropped_rows: Rows discarded as empty or missing required columns.
    """

    records: tuple[TypedRecord, ...]
    dropped_rows: int


def map_row(header: Sequence[str], row: Sequence[str]) -> TypedRecord | None:
    """Build a sparse record from one row.

    Args:
        header: Column names.
        row: Values positionally aligned to the header.

    Returns:
        Mapping of column name to non-empty value, or None when the row
        has no populated column.
    """
    record: TypedRecord = {}
    for column, value in zip(header, row):
        if value:
            record[column] = value
    return record or None


def map_rows(
    table: ParsedTable,
    required_columns: Sequence[str] = (),
    require_identifiers: bool = False,
) -> MappedTable:
    """Map every data row of a table into sparse records.

    Args:
        table: Parsed header and rows.
        required_columns: Identifying columns of the table.
        require_identifiers: Also drop rows missing any required column.

    Returns:
        Kept records and the count of dropped rows.
    """
    records: list[TypedRecord] = []
    dropped_rows = 0
    for row in table.rows:
        record = map_row(table.header, row)
        if record is None or (require_identifiers and not _has_columns(record, required_columns)):
            dropped_rows += 1
            continue
        records.append(record)
    return MappedTable(records=tuple(records), dropped_rows=dropped_rows)


def _has_columns(record: TypedRecord, columns: Sequence[str]) -> bool:
    return all(column in record for column in columns)
