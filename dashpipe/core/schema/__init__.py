"""Schema package: column models and inference."""

from dashpipe.core.schema.inference import SchemaInferrer
from dashpipe.core.schema.models import ColumnSchema, ColumnType, Schema

__all__ = [
    "ColumnSchema",
    "ColumnType",
    "Schema",
    "SchemaInferrer",
]
