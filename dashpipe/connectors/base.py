"""Base protocol for source connectors.

This module defines the core abstraction for data connectors:
- Connector: fetches the rows of one configured source
"""

from typing import Optional, Protocol, runtime_checkable

import httpx

from dashpipe.core.rows import FetchData


@runtime_checkable
class Connector(Protocol):
    """Protocol for connectors that fetch rows from a source.

    One connector exists per source kind. Each call is independent: the
    connector holds only its config, never rows from a previous call.

    Example:
        class CsvConnector:
            async def fetch(self, limit=None, client=None) -> FetchData:
                response = await send_request(client, "GET", self._url, ...)
                return parse_csv(response.text, limit)
    """

    async def fetch(
        self,
        limit: Optional[int] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> FetchData:
        """Fetch rows from the source.

        Args:
            limit: Return at most this many rows when the result is a list.
            client: HTTP client to use; a short-lived one is opened if omitted.

        Returns:
            A list of rows, or a single object for API/JSON sources that
            answer with one.

        Raises:
            SourceFetchError: If the network call, HTTP status, or parsing fails.
        """
        ...
