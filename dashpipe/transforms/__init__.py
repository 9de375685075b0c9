"""Transform pipeline module for row set transformations.

Provides:
- TransformPipeline: fixed-order executor (filter, sort, aggregate, group, paginate)
- Stage registry: registration and retrieval of stage factories
- Built-in stages
"""

# Registry must be imported first (stage modules use register_stage decorator)
from dashpipe.transforms.registry import (
    Stage,
    StageFactory,
    clear_registry,
    get_stage,
    list_stage_types,
    register_stage,
)

# Stage modules register themselves via @register_stage decorator
from dashpipe.transforms.aggregate import AggregateStage, create_aggregate_stage
from dashpipe.transforms.filter import FilterStage, create_filter_stage
from dashpipe.transforms.group import GroupStage, create_group_stage
from dashpipe.transforms.paginate import PaginateStage, create_paginate_stage
from dashpipe.transforms.pipeline import STAGE_ORDER, TransformPipeline
from dashpipe.transforms.sort import SortStage, create_sort_stage


def reregister_builtins() -> None:
    """Re-register built-in stages after the registry is cleared (tests only)."""
    current = list_stage_types()
    builtins = {
        "filter": create_filter_stage,
        "sort": create_sort_stage,
        "aggregate": create_aggregate_stage,
        "group": create_group_stage,
        "paginate": create_paginate_stage,
    }
    for stage_type, factory in builtins.items():
        if stage_type not in current:
            register_stage(stage_type, factory)


__all__ = [
    # Pipeline
    "TransformPipeline",
    "STAGE_ORDER",
    # Registry
    "register_stage",
    "get_stage",
    "list_stage_types",
    "clear_registry",
    "reregister_builtins",
    "Stage",
    "StageFactory",
    # Stage classes
    "FilterStage",
    "SortStage",
    "AggregateStage",
    "GroupStage",
    "PaginateStage",
    # Factory functions
    "create_filter_stage",
    "create_sort_stage",
    "create_aggregate_stage",
    "create_group_stage",
    "create_paginate_stage",
]
