"""FastAPI application exposing the pipeline and data source storage."""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dashpipe import __version__
from dashpipe.api import fetch_source, preview_source, transform_rows, validate_source
from dashpipe.core.exceptions import (
    AuthError,
    ConfigError,
    DashPipeError,
    NotFoundError,
    StorageError,
    UnsupportedSourceError,
)
from dashpipe.core.rows import FetchData, row_columns, row_count
from dashpipe.core.schema import Schema
from dashpipe.core.settings import Settings, get_settings
from dashpipe.core.storage import DataSourceStore, InMemoryRowCache, RowCache, create_store
from dashpipe.core.validation import ValidationResult
from dashpipe.models.data_source import DataSourceCreate, DataSourceUpdate, utc_now
from dashpipe.models.loader import load_source_config
from dashpipe.server.auth import Principal, require_principal
from dashpipe.server.requests import (
    FetchDataRequest,
    ImportDataRequest,
    PreviewDataRequest,
    QueryDataRequest,
    TransformDataRequest,
    UpdateRowRequest,
    ValidateSourceRequest,
)
from dashpipe.transforms import FilterStage

logger = logging.getLogger(__name__)


def _failure(error: str, exc: DashPipeError, status_code: int = 400, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={**extra, "error": error, "details": exc.message},
    )


def _fetched(data: FetchData, last_updated: str) -> dict[str, Any]:
    return {
        "data": data,
        "metadata": {
            "rowCount": row_count(data),
            "columns": row_columns(data),
            "lastUpdated": last_updated,
        },
    }


def get_store(request: Request) -> DataSourceStore:
    return request.app.state.store


def get_cache(request: Request) -> RowCache:
    return request.app.state.cache


async def get_http_client(request: Request) -> AsyncIterator[httpx.AsyncClient]:
    """One outbound client per request."""
    settings: Settings = request.app.state.settings
    async with httpx.AsyncClient(
        timeout=settings.http_timeout,
        follow_redirects=True,
        transport=request.app.state.transport,
    ) as client:
        yield client


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthError)
    async def auth_error(request: Request, exc: AuthError) -> JSONResponse:
        logger.info(f"Rejected request to {request.url.path}: {exc.message}")
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": exc.message})

    @app.exception_handler(StorageError)
    async def storage_error(request: Request, exc: StorageError) -> JSONResponse:
        logger.error(f"Storage failure: {exc}")
        return _failure("Storage failure", exc, status_code=500)

    @app.exception_handler(DashPipeError)
    async def dashpipe_error(request: Request, exc: DashPipeError) -> JSONResponse:
        return _failure("Request failed", exc)

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "details": str(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[DataSourceStore] = None,
    cache: Optional[RowCache] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Process settings (defaults to ``get_settings()``)
        store: Data source store (defaults to ``create_store(settings.storage)``)
        cache: Row cache for fetched data (defaults to an in-memory cache)
        transport: httpx transport for outbound calls, e.g. a MockTransport in tests
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(f"Starting dashpipe server {__version__}")
        yield
        logger.info("dashpipe server shutdown complete")

    app = FastAPI(
        title="dashpipe",
        description="Tabular data ingestion, schema inference and transformation",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store if store is not None else create_store(settings.storage)
    app.state.cache = (
        cache if cache is not None else InMemoryRowCache(settings.row_cache_size)
    )
    app.state.transport = transport

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_error_handlers(app)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy", "service": "dashpipe", "version": __version__}

    # Pipeline endpoints

    @app.post("/fetch-data")
    async def fetch_data(
        body: FetchDataRequest,
        principal: Principal = Depends(require_principal),
        client: httpx.AsyncClient = Depends(get_http_client),
        cache: RowCache = Depends(get_cache),
    ) -> Any:
        try:
            data = await fetch_source(body.config, client=client)
        except DashPipeError as e:
            logger.warning(f"Data fetch failed: {e}")
            return _failure("Failed to fetch data", e)

        last_updated = utc_now()
        if body.data_source_id:
            entry = cache.put(principal.user_id, body.data_source_id, data)
            last_updated = entry.last_updated

        return _fetched(data, last_updated)

    @app.get("/cached-data/{data_source_id}")
    async def cached_data(
        data_source_id: str,
        principal: Principal = Depends(require_principal),
        cache: RowCache = Depends(get_cache),
    ) -> Any:
        entry = cache.get(principal.user_id, data_source_id)
        if entry is None:
            return JSONResponse(status_code=404, content={"error": "No cached data"})
        return _fetched(entry.rows, entry.last_updated)

    @app.post("/transform-data")
    async def transform_data(
        body: TransformDataRequest,
        principal: Principal = Depends(require_principal),
    ) -> Any:
        try:
            rows = transform_rows(body.data, body.transform_config)
        except DashPipeError as e:
            logger.warning(f"Data transform failed: {e}")
            return _failure("Failed to transform data", e)

        return {
            "data": rows,
            "metadata": {
                "originalRowCount": row_count(body.data),
                "transformedRowCount": len(rows),
                "transformations": list(body.transform_config.keys()),
            },
        }

    @app.post("/validate-source")
    async def validate_data_source(
        body: ValidateSourceRequest,
        principal: Principal = Depends(require_principal),
        client: httpx.AsyncClient = Depends(get_http_client),
    ) -> Any:
        try:
            source_config = load_source_config(body.config)
        except UnsupportedSourceError:
            result = ValidationResult(is_valid=True, inferred_schema=Schema(), sample_data=[])
        except ConfigError as e:
            return _failure("Failed to validate data source", e, isValid=False)
        else:
            result = await validate_source(source_config, client=client)

        return {
            **result.model_dump(mode="json", by_alias=True),
            "message": result.message,
        }

    @app.post("/preview-data")
    async def preview_data(
        body: PreviewDataRequest,
        principal: Principal = Depends(require_principal),
        client: httpx.AsyncClient = Depends(get_http_client),
    ) -> Any:
        try:
            data = await preview_source(body.config, limit=body.limit, client=client)
        except DashPipeError as e:
            logger.warning(f"Data preview failed: {e}")
            return _failure("Failed to preview data", e)

        return {
            "data": data,
            "metadata": {
                "rowCount": row_count(data),
                "columns": row_columns(data),
                "isPreview": True,
                "limit": body.limit,
            },
        }

    # Data source records

    @app.get("/data-sources")
    def list_data_sources(
        principal: Principal = Depends(require_principal),
        store: DataSourceStore = Depends(get_store),
    ) -> Any:
        sources = store.list(principal.user_id)
        return {"data": [s.model_dump(by_alias=True) for s in sources]}

    @app.post("/data-sources", status_code=201)
    def create_data_source(
        body: DataSourceCreate,
        principal: Principal = Depends(require_principal),
        store: DataSourceStore = Depends(get_store),
    ) -> Any:
        source = store.create(principal.user_id, body)
        return {"data": source.model_dump(by_alias=True)}

    @app.get("/data-sources/{source_id}")
    def get_data_source(
        source_id: str,
        principal: Principal = Depends(require_principal),
        store: DataSourceStore = Depends(get_store),
    ) -> Any:
        return {"data": store.get(principal.user_id, source_id).model_dump(by_alias=True)}

    @app.put("/data-sources/{source_id}")
    def update_data_source(
        source_id: str,
        body: DataSourceUpdate,
        principal: Principal = Depends(require_principal),
        store: DataSourceStore = Depends(get_store),
    ) -> Any:
        source = store.update(principal.user_id, source_id, body)
        return {"data": source.model_dump(by_alias=True)}

    @app.delete("/data-sources/{source_id}")
    def delete_data_source(
        source_id: str,
        principal: Principal = Depends(require_principal),
        store: DataSourceStore = Depends(get_store),
    ) -> Any:
        store.delete(principal.user_id, source_id)
        return {"message": "Data source deleted successfully"}

    # Imported rows

    @app.post("/data/import")
    def import_data(
        body: ImportDataRequest,
        principal: Principal = Depends(require_principal),
        store: DataSourceStore = Depends(get_store),
    ) -> Any:
        count = store.import_rows(
            principal.user_id, body.data_source_id, body.data, schema=body.schema_config
        )
        return {
            "data": {
                "message": "Data imported successfully",
                "rowCount": count,
                "dataSourceId": body.data_source_id,
            }
        }

    @app.get("/data/{source_id}")
    def get_data(
        source_id: str,
        principal: Principal = Depends(require_principal),
        store: DataSourceStore = Depends(get_store),
    ) -> Any:
        source = store.get(principal.user_id, source_id)
        rows = store.get_rows(principal.user_id, source_id)
        return {
            "data": {
                "rows": rows,
                "schema": source.schema_config or None,
                "metadata": {
                    "rowCount": len(rows),
                    "dataSourceId": source_id,
                    "lastUpdated": source.updated_at,
                },
            }
        }

    @app.put("/data/{source_id}")
    def update_data_row(
        source_id: str,
        body: UpdateRowRequest,
        principal: Principal = Depends(require_principal),
        store: DataSourceStore = Depends(get_store),
    ) -> Any:
        store.update_row(principal.user_id, source_id, body.row_index, body.row_data)
        return {"data": {"message": "Row updated successfully"}}

    @app.delete("/data/{source_id}")
    def clear_data(
        source_id: str,
        principal: Principal = Depends(require_principal),
        store: DataSourceStore = Depends(get_store),
    ) -> Any:
        store.clear_rows(principal.user_id, source_id)
        return {"data": {"message": "Data cleared successfully"}}

    @app.post("/data/{source_id}/query")
    def query_data(
        source_id: str,
        body: QueryDataRequest,
        principal: Principal = Depends(require_principal),
        store: DataSourceStore = Depends(get_store),
    ) -> Any:
        rows = store.get_rows(principal.user_id, source_id)
        if body.limit:
            start = body.offset or 0
            rows = rows[start : start + body.limit]

        filtered = FilterStage(body.filters).apply(rows) if body.filters else rows
        return {
            "data": {
                "rows": filtered,
                "metadata": {
                    "totalRows": len(rows),
                    "filteredRows": len(filtered),
                    "hasMore": bool(body.limit and len(rows) == body.limit),
                },
            }
        }

    return app
