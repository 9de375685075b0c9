"""CSV connector for reading remote CSV files."""

import logging
from typing import Optional

import httpx

from dashpipe.connectors.csv.parser import parse_csv
from dashpipe.connectors.http import http_client, send_request
from dashpipe.connectors.registry import register_connector
from dashpipe.core.rows import Row
from dashpipe.models.source_config import CsvSourceConfig

logger = logging.getLogger(__name__)


class CsvConnector:
    """Connector for CSV files served over HTTP.

    Every value comes back as a string; type detection is left to the
    schema inferrer.
    """

    def __init__(self, config: CsvSourceConfig):
        """Initialize CsvConnector.

        Args:
            config: Validated CSV source configuration.
        """
        self._config = config
        self._url = config.url
        self._headers = dict(config.headers)
        self._params = dict(config.params)

    async def fetch(
        self,
        limit: Optional[int] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> list[Row]:
        """Download and parse the CSV file.

        Args:
            limit: Number of data lines to keep (header excluded).
            client: Optional HTTP client.

        Returns:
            Rows keyed by the header line.

        Raises:
            SourceFetchError: On network failure or non-2xx status.
        """
        logger.info(f"Fetching CSV {self._url}", extra={"source_type": "csv"})

        async with http_client(client) as http:
            response = await send_request(
                http,
                "GET",
                self._url,
                label="CSV fetch",
                headers=self._headers,
                params=self._params,
            )
            text = response.text

        rows = parse_csv(text, limit or self._config.limit)
        logger.debug(f"Parsed {len(rows)} CSV rows", extra={"source_type": "csv"})
        return rows


@register_connector("csv")
def create_csv_connector(config: CsvSourceConfig) -> CsvConnector:
    """Factory function to create a CsvConnector instance.

    Args:
        config: CSV source configuration.

    Returns:
        CsvConnector instance.
    """
    return CsvConnector(config)
