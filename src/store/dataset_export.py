"""Dataset serialization and file export.

This module renders datasets as JSON payloads for downstream format
converters and writes single tables back out as delimited text.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Mapping, Sequence

from core.errors import TransitExportError
from core.types import Dataset, table_field_names
from tables.delimited_parser import format_line


def dataset_to_payload(dataset: Dataset) -> dict[str, object]:
    """Serialize a dataset into a JSON-safe payload.

    Args:
        dataset: Parsed dataset.

    Returns:
        Dictionary with one list per table plus the issue list.
    """
    payload: dict[str, object] = {
        name: [dict(record) for record in dataset.table(name)] for name in table_field_names()
    }
    payload["issues"] = [asdict(issue) for issue in dataset.issues]
    return payload


def write_dataset_json(dataset: Dataset, output_path: Path) -> Path:
    """Write a dataset payload as indented JSON.

    Args:
        dataset: Parsed dataset.
        output_path: Destination file path; parent directories are created.

    Returns:
        Written file path.

    Raises:
        TransitExportError: If the file cannot be written.
    """
    body = json.dumps(dataset_to_payload(dataset), indent=2, ensure_ascii=False) + "\n"
    return _write_text(output_path, body)


def write_table_delimited(dataset: Dataset, table_name: str, output_path: Path) -> Path:
    """Write one dataset table as comma-delimited text.

    The header is the union of record keys in first-seen order; absent
    keys are written as empty fields.

    Args:
        dataset: Parsed dataset.
        table_name: Dataset table field name, e.g. ``stops``.
        output_path: Destination file path.

    Returns:
        Written file path.

    Raises:
        TransitExportError: If the table name is unknown or writing fails.
    """
    if table_name not in table_field_names():
        raise TransitExportError(
            f"Unknown table '{table_name}'. Valid tables: {', '.join(table_field_names())}."
        )
    records = dataset.table(table_name)
    header = _collect_header(records)
    lines = [format_line(header)]
    lines.extend(format_line(record.get(column, "") for column in header) for record in records)
    return _write_text(output_path, "\n".join(lines) + "\n")


def _collect_header(records: Sequence[Mapping[str, str]]) -> list[str]:
    header: dict[str, None] = {}
    for record in records:
        for column in record:
            header.setdefault(column, None)
    return list(header)


def _write_text(output_path: Path, body: str) -> Path:
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(body, encoding="utf-8")
    except OSError as error:
        raise TransitExportError(f"Failed to write {output_path}: {error}") from error
    return output_path
