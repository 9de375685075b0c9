"""JSON connector for reading remote JSON documents."""

import logging
from typing import Optional

import httpx

from dashpipe.connectors.http import DataPath, http_client, parse_json_body, send_request
from dashpipe.connectors.registry import register_connector
from dashpipe.core.rows import FetchData, truncate
from dashpipe.models.source_config import JsonSourceConfig

logger = logging.getLogger(__name__)


class JsonConnector:
    """Connector for JSON documents fetched with GET."""

    def __init__(self, config: JsonSourceConfig):
        self._config = config
        self._url = config.url
        self._headers = dict(config.headers)
        self._params = dict(config.params)
        self._data_path = DataPath(config.data_path) if config.data_path else None

    async def fetch(
        self,
        limit: Optional[int] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> FetchData:
        """Download the document; arrays are truncated to ``limit``."""
        logger.info(f"Fetching JSON {self._url}", extra={"source_type": "json"})

        async with http_client(client) as http:
            response = await send_request(
                http,
                "GET",
                self._url,
                label="JSON fetch",
                headers=self._headers,
                params=self._params,
            )
            data = parse_json_body(response, self._url)

        if self._data_path is not None:
            data = self._data_path.extract(data)

        return truncate(data, limit or self._config.limit)


@register_connector("json")
def create_json_connector(config: JsonSourceConfig) -> JsonConnector:
    """Factory function to create a JsonConnector instance."""
    return JsonConnector(config)
