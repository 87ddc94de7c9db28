"""Comma-delimited table parsing.

This module splits decoded member text into header and data rows.
Quoted fields may contain separators and doubled quotes; records are
line based, so quoted fields never span lines.
"""

from __future__ import annotations

from typing import Iterable

from core.constants import BYTE_ORDER_MARK, FIELD_SEPARATOR, QUOTE_CHAR
from core.errors import InvalidTableError
from core.types import ParsedTable

_ESCAPED_QUOTE = QUOTE_CHAR * 2


def parse_line(line: str) -> list[str]:
    """Split one delimited line into trimmed fields.

    A quote toggles quoted state, except that two quotes inside a quoted
    field produce one literal quote. Separators inside quotes are kept.

    Args:
        line: One line of text without its line terminator.

    Returns:
        Field values in column order; always at least one field.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    index = 0
    while index < len(line):
        char = line[index]
        if char == QUOTE_CHAR:
            if in_quotes and line.startswith(QUOTE_CHAR, index + 1):
                current.append(QUOTE_CHAR)
                index += 1
            else:
                in_quotes = not in_quotes
        elif char == FIELD_SEPARATOR and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        index += 1
    fields.append("".join(current).strip())
    return fields


def parse_table(text: str) -> ParsedTable:
    """Parse decoded member text into a header and data rows.

    Args:
        text: Full member text, optionally starting with a byte-order mark.

    Returns:
        Header row and data rows in source order; blank lines are skipped.

    Raises:
        InvalidTableError: If fewer than two non-blank lines are present.
    """
    content = text.removeprefix(BYTE_ORDER_MARK)
    lines = [line for line in content.split("\n") if line.strip()]
    if len(lines) < 2:
        raise InvalidTableError(
            f"Invalid delimited table: expected a header and at least one data row, "
            f"found {len(lines)} non-blank line(s)."
        )
    header = tuple(parse_line(lines[0]))
    rows = tuple(tuple(parse_line(line)) for line in lines[1:])
    return ParsedTable(header=header, rows=rows)


def format_line(fields: Iterable[str]) -> str:
    """Join fields into one delimited line that parses back to them.

    Fields containing a separator or a quote are wrapped in quotes with
    internal quotes doubled. Surrounding whitespace is not preserved.
    """
    return FIELD_SEPARATOR.join(_format_field(value) for value in fields)


def _format_field(value: str) -> str:
    if FIELD_SEPARATOR in value or QUOTE_CHAR in value:
        return QUOTE_CHAR + value.replace(QUOTE_CHAR, _ESCAPED_QUOTE) + QUOTE_CHAR
    return value
