"""Request bodies accepted by the HTTP server."""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from dashpipe.models.transform_config import FilterCondition


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class FetchDataRequest(_Body):
    data_source_id: Optional[str] = Field(
        default=None, alias="dataSourceId", description="Cache key for the fetched rows"
    )
    config: dict[str, Any]


class TransformDataRequest(_Body):
    data: Any = None
    transform_config: dict[str, Any] = Field(default_factory=dict, alias="transformConfig")


class ValidateSourceRequest(_Body):
    config: dict[str, Any]


class PreviewDataRequest(_Body):
    config: dict[str, Any]
    limit: int = Field(default=10, ge=1)


class ImportDataRequest(_Body):
    data_source_id: str = Field(alias="dataSourceId")
    data: List[dict[str, Any]]
    schema_config: Optional[dict[str, Any]] = Field(default=None, alias="schema")


class UpdateRowRequest(_Body):
    row_index: int = Field(alias="rowIndex", ge=0)
    row_data: dict[str, Any] = Field(alias="rowData")


class QueryDataRequest(_Body):
    filters: Optional[List[FilterCondition]] = None
    limit: Optional[int] = Field(default=None, ge=1)
    offset: Optional[int] = Field(default=None, ge=0)
