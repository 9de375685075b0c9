"""Minimal CSV parser for remote CSV sources.

Deliberately small: a double quote toggles an in-quotes flag (the quote
itself is dropped) and commas inside quotes are literal. Escaped quotes
("") and newlines inside quoted fields are not supported. Fields are
whitespace-trimmed, and the first non-blank line is always the header.
"""

from typing import Optional

from dashpipe.core.rows import Row


def parse_csv_line(line: str) -> list[str]:
    """Split one CSV line into trimmed fields."""
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields


def parse_csv(text: str, limit: Optional[int] = None) -> list[Row]:
    """Parse CSV text into rows keyed by the header line.

    Args:
        text: Whole CSV document.
        limit: Keep only the first ``limit`` data lines (the header is not counted).

    Returns:
        One row per data line. Lines shorter than the header are padded
        with ``''``; extra fields are dropped.
    """
    lines = [line for line in text.split("\n") if line.strip()]
    if not lines:
        return []

    headers = parse_csv_line(lines[0])
    data_lines = lines[1 : limit + 1] if limit else lines[1:]

    rows: list[Row] = []
    for line in data_lines:
        values = parse_csv_line(line)
        rows.append(
            {
                header: values[index] if index < len(values) else ""
                for index, header in enumerate(headers)
            }
        )
    return rows
