"""Paginate stage: select one page of rows."""

from typing import Optional

from dashpipe.core.rows import Row
from dashpipe.models.transform_config import PaginationConfig, TransformConfig
from dashpipe.transforms.registry import register_stage


class PaginateStage:
    """Returns rows ``[(page - 1) * page_size, page * page_size)``.

    Pages past the end are empty, as are page numbers and sizes below 1.
    """

    def __init__(self, pagination: PaginationConfig):
        self._page = pagination.page
        self._page_size = pagination.page_size

    def apply(self, rows: list[Row]) -> list[Row]:
        if self._page < 1 or self._page_size < 1:
            return []
        start = (self._page - 1) * self._page_size
        return rows[start : start + self._page_size]


@register_stage("paginate")
def create_paginate_stage(config: TransformConfig) -> Optional[PaginateStage]:
    """Factory for PaginateStage."""
    if config.pagination is None:
        return None
    return PaginateStage(config.pagination)
