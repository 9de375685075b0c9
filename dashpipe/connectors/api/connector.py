"""API connector for reading data from REST APIs."""

import logging
from typing import Any, Optional

import httpx

from dashpipe.connectors.http import DataPath, http_client, parse_json_body, send_request
from dashpipe.connectors.registry import register_connector
from dashpipe.core.rows import FetchData, row_count, truncate
from dashpipe.models.source_config import ApiSourceConfig

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {"Content-Type": "application/json"}


class ApiConnector:
    """Connector for REST APIs answering with JSON.

    A list response is truncated to ``limit``; an object response is
    returned unchanged. Headers arrive with secret references already
    resolved by the config loader.
    """

    def __init__(self, config: ApiSourceConfig):
        """Initialize ApiConnector.

        Args:
            config: Validated API source configuration.

        Raises:
            ConfigError: If ``data_path`` is not a valid JSONPath.
        """
        self._config = config
        self._url = config.url
        self._method = config.method
        self._params = dict(config.params)
        self._headers = {**DEFAULT_HEADERS, **config.headers}
        self._body = config.body
        self._data_path = DataPath(config.data_path) if config.data_path else None

    def _request_body(self) -> Any:
        if self._method == "GET":
            return None
        return self._body

    async def fetch(
        self,
        limit: Optional[int] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> FetchData:
        """Fetch the API response.

        Args:
            limit: Truncate list responses to this many items.
            client: Optional HTTP client.

        Returns:
            Parsed JSON: list (possibly truncated) or object.

        Raises:
            SourceFetchError: On network failure, non-2xx status, or invalid JSON.
        """
        logger.info(
            f"Fetching {self._method} {self._url}",
            extra={"source_type": "api"},
        )

        async with http_client(client) as http:
            response = await send_request(
                http,
                self._method,
                self._url,
                label="API request",
                headers=self._headers,
                params=self._params,
                json_body=self._request_body(),
            )
            data = parse_json_body(response, self._url)

        if self._data_path is not None:
            data = self._data_path.extract(data)

        data = truncate(data, limit or self._config.limit)
        logger.debug(
            f"API returned {row_count(data)} rows",
            extra={"source_type": "api"},
        )
        return data


@register_connector("api")
def create_api_connector(config: ApiSourceConfig) -> ApiConnector:
    """Factory function to create an ApiConnector instance.

    Args:
        config: API source configuration.

    Returns:
        ApiConnector instance.
    """
    return ApiConnector(config)
