"""Public Python API for dashpipe package.

This module provides the main entry points used by the CLI and the HTTP
server: fetching, previewing and validating sources, inferring schemas and
transforming row sets.
"""

import logging
from typing import Any, Optional

import httpx

from dashpipe.connectors import get_connector
from dashpipe.core.exceptions import UnsupportedSourceError
from dashpipe.core.rows import FetchData, Row, row_count
from dashpipe.core.schema import Schema, SchemaInferrer
from dashpipe.core.settings import get_settings
from dashpipe.core.validation import SourceValidator, ValidationResult
from dashpipe.models.loader import load_source_config, load_transform_config
from dashpipe.transforms import TransformPipeline

logger = logging.getLogger(__name__)


async def fetch_source(
    config: Any,
    limit: Optional[int] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> FetchData:
    """Fetch rows from a source.

    Args:
        config: Source config model, raw mapping or path to a YAML/JSON file
        limit: Maximum rows to return (overrides the config ``limit``)
        client: Optional shared HTTP client

    Returns:
        Rows, or the single object an API/JSON source answered with

    Raises:
        ConfigError: If the config is invalid (UnsupportedSourceError for unknown kinds)
        SourceFetchError: If the network call, HTTP status or parsing fails

    Example:
        >>> rows = asyncio.run(fetch_source({"type": "static", "dataType": "sales", "limit": 5}))
        >>> len(rows)
        5
    """
    source_config = load_source_config(config)
    connector = get_connector(source_config)
    data = await connector.fetch(limit=limit, client=client)
    logger.info(
        f"Fetched {row_count(data)} rows",
        extra={"source_type": source_config.type},
    )
    return data


async def preview_source(
    config: Any,
    limit: Optional[int] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> FetchData:
    """Fetch a small preview (``preview_limit`` rows by default).

    Unknown source kinds preview as an empty list.
    """
    limit = limit or get_settings().preview_limit
    try:
        return await fetch_source(config, limit=limit, client=client)
    except UnsupportedSourceError as e:
        logger.warning(f"Nothing to preview: {e.message}")
        return []


async def validate_source(
    config: Any,
    client: Optional[httpx.AsyncClient] = None,
) -> ValidationResult:
    """Validate a source with a small trial fetch; never raises."""
    settings = get_settings()
    validator = SourceValidator(
        sample_limit=settings.validation_sample_size,
        sample_size=settings.schema_sample_size,
    )
    return await validator.validate(config, client=client)


def infer_schema(rows: Any, sample_size: Optional[int] = None) -> Schema:
    """Infer column names, types and nullability from rows."""
    inferrer = SchemaInferrer(sample_size=sample_size or get_settings().schema_sample_size)
    return inferrer.infer(rows)


def transform_rows(rows: Any, transform_config: Any = None) -> list[Row]:
    """Apply filter, sort, aggregate, group and paginate stages to rows.

    Raises:
        TransformError: If the config or rows are malformed, or a stage fails
    """
    config = load_transform_config(transform_config)
    return TransformPipeline(config).apply(rows)
