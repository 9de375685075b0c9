"""dashpipe - Tabular data ingestion, schema inference and transformation.

Fetches rows from REST APIs, remote CSV/JSON files or a synthetic generator,
infers a column schema and reshapes rows with a fixed filter, sort,
aggregate, group, paginate pipeline for dashboard widgets.
"""

__version__ = "0.1.0"

# Public API
from dashpipe.api import (
    fetch_source,
    infer_schema,
    preview_source,
    transform_rows,
    validate_source,
)

# Exceptions
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
from dashpipe.core.schema import ColumnSchema, Schema
from dashpipe.core.validation import SourceValidator, ValidationResult

# Models
from dashpipe.models import SourceConfig, TransformConfig, load_source_config

__all__ = [
    # Version
    "__version__",
    # Public API
    "fetch_source",
    "preview_source",
    "validate_source",
    "infer_schema",
    "transform_rows",
    # Core classes
    "Schema",
    "ColumnSchema",
    "SourceValidator",
    "ValidationResult",
    "SourceConfig",
    "TransformConfig",
    "load_source_config",
    # Exceptions
    "DashPipeError",
    "ConfigError",
    "UnsupportedSourceError",
    "SourceFetchError",
    "TransformError",
    "StorageError",
    "NotFoundError",
    "AuthError",
]
