"""Transform configuration model.

Each field switches on one pipeline stage. Stages always run in the order
filter -> sort -> aggregate -> group -> paginate, whatever order the keys
arrive in.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FilterCondition(BaseModel):
    """A single row predicate."""

    column: str = Field(description="Column to test")
    operator: str = Field(
        description=(
            "equals, not_equals, contains, greater_than, less_than, "
            "greater_equal or less_equal; unknown operators keep every row"
        )
    )
    value: Any = Field(default=None, description="Value to compare against")


class SortConfig(BaseModel):
    """Single-column stable sort."""

    column: str = Field(description="Column to sort by")
    direction: str = Field(
        default="asc", description="'asc' sorts ascending; any other value descending"
    )


class PaginationConfig(BaseModel):
    """1-indexed page selection; pages below 1 or of size below 1 are empty."""

    model_config = ConfigDict(populate_by_name=True)

    page: int = Field(default=1, description="Page number, starting at 1")
    page_size: int = Field(default=10, alias="pageSize", description="Rows per page")


class TransformConfig(BaseModel):
    """Configuration for the transform pipeline."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    filters: Optional[List[FilterCondition]] = Field(
        default=None, description="Predicates combined with logical AND"
    )
    sort: Optional[SortConfig] = Field(default=None, description="Sort specification")
    aggregations: Optional[dict[str, str]] = Field(
        default=None,
        description="Column to operation map (sum, avg, min, max, count)",
    )
    group_by: Optional[str] = Field(
        default=None, alias="groupBy", description="Column to group rows by"
    )
    pagination: Optional[PaginationConfig] = Field(
        default=None, description="Page selection"
    )
