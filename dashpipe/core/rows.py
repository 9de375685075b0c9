"""Row types and helpers shared by connectors, transforms and the server."""

from typing import Any, Union

Row = dict[str, Any]

# What a fetch returns: normally a list of rows, but API and JSON sources
# may answer with a single object, which is passed through as-is.
FetchData = Union[list[Any], dict[str, Any]]


def row_count(data: Any) -> int:
    """Number of rows in fetched data; a single object counts as one."""
    if isinstance(data, list):
        return len(data)
    return 1


def row_columns(data: Any) -> list[str]:
    """Column names taken from the first row of a list of rows."""
    if isinstance(data, list) and data and isinstance(data[0], dict):
        return list(data[0].keys())
    return []


def truncate(data: Any, limit: int | None) -> Any:
    """Keep the first ``limit`` items of a list; anything else is returned unchanged."""
    if isinstance(data, list) and limit:
        return data[:limit]
    return data
