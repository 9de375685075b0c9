"""Schema inference over sampled rows."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, List

from dashpipe.core.schema.models import ColumnSchema, ColumnType, Schema
from dashpipe.core.type_mapping import is_number, is_numeric_literal

DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%m/%d/%Y",
]

BOOLEAN_LITERALS = ("true", "false")


def is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def is_boolean_value(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    return isinstance(value, str) and value.strip().lower() in BOOLEAN_LITERALS


def is_numeric_value(value: Any) -> bool:
    if is_number(value):
        return True
    return isinstance(value, str) and is_numeric_literal(value)


def is_date_value(value: Any) -> bool:
    """True for date objects and strings in a recognizable date format."""
    if isinstance(value, (date, datetime)):
        return True
    if not isinstance(value, str):
        return False

    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            datetime.strptime(text, fmt)
            return True
        except ValueError:
            continue

    # ISO-8601 with fractional seconds or offsets, e.g. 2024-01-01T10:00:00.000Z
    try:
        datetime.fromisoformat(text.replace("Z", "+00:00"))
        return True
    except ValueError:
        return False


class SchemaInferrer:
    """Infers a column schema from a row sample.

    Columns are the keys of the first row. Types are decided from the
    non-empty values of the first ``sample_size`` rows; nullability looks at
    every row it is given.
    """

    def __init__(self, sample_size: int = 10) -> None:
        if sample_size < 1:
            raise ValueError("sample_size must be at least 1")
        self.sample_size = sample_size

    def infer(self, rows: Any) -> Schema:
        """Infer schema from a list of rows (or a single row object)."""
        if isinstance(rows, dict):
            rows = [rows]
        if not isinstance(rows, list) or not rows or not isinstance(rows[0], dict):
            return Schema(columns=[])

        records = [row for row in rows if isinstance(row, dict)]
        sample = records[: self.sample_size]

        columns = [
            ColumnSchema(
                name=name,
                type=self.infer_type(row.get(name) for row in sample),
                nullable=any(is_empty(row.get(name)) for row in records),
            )
            for name in records[0].keys()
        ]
        return Schema(columns=columns)

    def infer_type(self, values: Iterable[Any]) -> ColumnType:
        """Classify a column from its sampled values."""
        present: List[Any] = [v for v in values if not is_empty(v)]
        if not present:
            return "string"
        if all(is_boolean_value(v) for v in present):
            return "boolean"
        if all(is_numeric_value(v) for v in present):
            return "number"
        if all(is_date_value(v) for v in present):
            return "date"
        return "string"
