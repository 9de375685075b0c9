"""Filter stage: keep rows matching every predicate."""

import logging
import math
from typing import Any, Callable, Optional

from dashpipe.core.rows import Row
from dashpipe.core.type_mapping import MISSING, strict_equals, to_number, to_text
from dashpipe.models.transform_config import FilterCondition, TransformConfig
from dashpipe.transforms.registry import register_stage

logger = logging.getLogger(__name__)

Predicate = Callable[[Any, Any], bool]


def _numeric(test: Callable[[float, float], bool]) -> Predicate:
    def predicate(cell: Any, value: Any) -> bool:
        a = to_number(cell)
        b = to_number(value)
        if math.isnan(a) or math.isnan(b):
            return False
        return test(a, b)

    return predicate


def _contains(cell: Any, value: Any) -> bool:
    return to_text(value).lower() in to_text(cell).lower()


OPERATORS: dict[str, Predicate] = {
    "equals": strict_equals,
    "not_equals": lambda cell, value: not strict_equals(cell, value),
    "contains": _contains,
    "greater_than": _numeric(lambda a, b: a > b),
    "less_than": _numeric(lambda a, b: a < b),
    "greater_equal": _numeric(lambda a, b: a >= b),
    "less_equal": _numeric(lambda a, b: a <= b),
}


def matches(row: Row, condition: FilterCondition) -> bool:
    """Evaluate one condition against a row. Unknown operators always match."""
    predicate = OPERATORS.get(condition.operator)
    if predicate is None:
        return True
    return predicate(row.get(condition.column, MISSING), condition.value)


class FilterStage:
    """Keeps rows for which all conditions hold (logical AND)."""

    def __init__(self, conditions: list[FilterCondition]):
        self._conditions = conditions
        unknown = [c.operator for c in conditions if c.operator not in OPERATORS]
        if unknown:
            logger.warning(
                f"Unknown filter operators are ignored: {unknown}",
                extra={"context": {"operators": ", ".join(OPERATORS)}},
            )

    def apply(self, rows: list[Row]) -> list[Row]:
        return [
            row
            for row in rows
            if all(matches(row, condition) for condition in self._conditions)
        ]


@register_stage("filter")
def create_filter_stage(config: TransformConfig) -> Optional[FilterStage]:
    """Factory for FilterStage; skipped when no filters are configured."""
    if not config.filters:
        return None
    return FilterStage(config.filters)
