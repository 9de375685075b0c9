"""Aggregate stage: collapse rows into a single summary row."""

import math
from typing import Callable, Optional

from dashpipe.core.rows import Row
from dashpipe.core.type_mapping import MISSING, normalize_number, to_number
from dashpipe.models.transform_config import TransformConfig
from dashpipe.transforms.registry import register_stage

Aggregator = Callable[[list[float]], float]


def _avg(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0


AGGREGATORS: dict[str, Aggregator] = {
    "sum": lambda values: sum(values, 0),
    "avg": _avg,
    "min": lambda values: min(values) if values else 0,
    "max": lambda values: max(values) if values else 0,
    "count": len,
}


class AggregateStage:
    """Computes one ``{column}_{operation}`` value per aggregation pair.

    Column values are coerced to numbers and non-numeric values dropped.
    All results land in one output row. Unknown operations are skipped.
    """

    def __init__(self, aggregations: dict[str, str]):
        self._aggregations = aggregations

    def _values(self, rows: list[Row], column: str) -> list[float]:
        numbers = (to_number(row.get(column, MISSING)) for row in rows)
        return [n for n in numbers if not math.isnan(n)]

    def apply(self, rows: list[Row]) -> list[Row]:
        result: Row = {}
        for column, operation in self._aggregations.items():
            aggregator = AGGREGATORS.get(operation)
            if aggregator is None:
                continue
            value = aggregator(self._values(rows, column))
            result[f"{column}_{operation}"] = normalize_number(value)
        return [result]


@register_stage("aggregate")
def create_aggregate_stage(config: TransformConfig) -> Optional[AggregateStage]:
    """Factory for AggregateStage."""
    if config.aggregations is None:
        return None
    return AggregateStage(config.aggregations)
