"""Core module for dashpipe package."""

from dashpipe.core.exceptions import (
    AuthError,
    ConfigError,
    DashPipeError,
    NotFoundError,
    SourceFetchError,
    StorageError,
    TransformError,
    UnsupportedSourceError,
)
from dashpipe.core.parallel import AsyncParallelExecutor
from dashpipe.core.rows import FetchData, Row
from dashpipe.core.schema import ColumnSchema, ColumnType, Schema, SchemaInferrer
from dashpipe.core.storage import (
    CachedRows,
    DataSourceStore,
    InMemoryDataSourceStore,
    InMemoryRowCache,
    LocalJsonDataSourceStore,
    RowCache,
    create_store,
)

__all__ = [
    "Row",
    "FetchData",
    "DashPipeError",
    "ConfigError",
    "UnsupportedSourceError",
    "SourceFetchError",
    "TransformError",
    "StorageError",
    "NotFoundError",
    "AuthError",
    "Schema",
    "ColumnSchema",
    "ColumnType",
    "SchemaInferrer",
    "DataSourceStore",
    "InMemoryDataSourceStore",
    "LocalJsonDataSourceStore",
    "create_store",
    "RowCache",
    "InMemoryRowCache",
    "CachedRows",
    "AsyncParallelExecutor",
]
