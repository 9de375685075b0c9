"""Sort stage: stable single-column sort."""

from functools import cmp_to_key
from typing import Optional

from dashpipe.core.rows import Row
from dashpipe.core.type_mapping import MISSING, compare
from dashpipe.models.transform_config import SortConfig, TransformConfig
from dashpipe.transforms.registry import register_stage


class SortStage:
    """Sorts rows by one column.

    ``direction`` 'asc' sorts ascending, anything else descending. Values
    that cannot be ordered against each other tie, and ties keep their input
    order.
    """

    def __init__(self, sort: SortConfig):
        self._column = sort.column
        self._descending = sort.direction != "asc"

    def _compare_rows(self, left: Row, right: Row) -> int:
        result = compare(left.get(self._column, MISSING), right.get(self._column, MISSING))
        return -result if self._descending else result

    def apply(self, rows: list[Row]) -> list[Row]:
        return sorted(rows, key=cmp_to_key(self._compare_rows))


@register_stage("sort")
def create_sort_stage(config: TransformConfig) -> Optional[SortStage]:
    """Factory for SortStage."""
    if config.sort is None:
        return None
    return SortStage(config.sort)
