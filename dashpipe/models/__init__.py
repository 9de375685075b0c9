"""Models module for source, transform and data source definitions."""

from dashpipe.models.data_source import DataSource, DataSourceCreate, DataSourceUpdate
from dashpipe.models.loader import (
    load_config_file,
    load_source_config,
    load_transform_config,
)
from dashpipe.models.source_config import (
    SOURCE_KINDS,
    ApiSourceConfig,
    CsvSourceConfig,
    JsonSourceConfig,
    SourceConfig,
    StaticSourceConfig,
)
from dashpipe.models.templates import SecretRef, render_secrets
from dashpipe.models.transform_config import (
    FilterCondition,
    PaginationConfig,
    SortConfig,
    TransformConfig,
)

__all__ = [
    "SourceConfig",
    "SOURCE_KINDS",
    "ApiSourceConfig",
    "CsvSourceConfig",
    "JsonSourceConfig",
    "StaticSourceConfig",
    "TransformConfig",
    "FilterCondition",
    "SortConfig",
    "PaginationConfig",
    "DataSource",
    "DataSourceCreate",
    "DataSourceUpdate",
    "SecretRef",
    "render_secrets",
    "load_source_config",
    "load_transform_config",
    "load_config_file",
]
