"""HTTP helpers shared by the api, csv and json connectors."""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

import httpx
from jsonpath_ng import parse as parse_jsonpath

from dashpipe.core.exceptions import ConfigError, SourceFetchError
from dashpipe.core.settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def http_client(
    client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the caller's client, or a short-lived one closed on exit."""
    if client is not None:
        yield client
        return

    async with httpx.AsyncClient(
        timeout=timeout or get_settings().http_timeout,
        follow_redirects=True,
    ) as owned:
        yield owned


async def send_request(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    label: str,
    headers: Optional[dict[str, str]] = None,
    params: Optional[dict[str, Any]] = None,
    json_body: Any = None,
) -> httpx.Response:
    """Send one request and require a 2xx answer.

    Args:
        client: HTTP client.
        method: HTTP method.
        url: Target URL; ``params`` are appended as a query string.
        label: Prefix for error messages (e.g. 'API request', 'CSV fetch').

    Raises:
        SourceFetchError: kind='network' for transport failures and timeouts,
            kind='http' for non-2xx responses (status and body preserved).
    """
    try:
        response = await client.request(
            method,
            url,
            headers=headers or None,
            params=params or None,
            json=json_body,
        )
    except httpx.TimeoutException as e:
        raise SourceFetchError(
            f"{label} timed out",
            kind="network",
            context={"url": url},
        ) from e
    except httpx.HTTPError as e:
        raise SourceFetchError(
            f"{label} failed: {e}",
            kind="network",
            context={"url": url},
        ) from e

    if not response.is_success:
        body = response.text
        logger.error(
            f"{label} failed with status {response.status_code}",
            extra={"context": {"url": url}},
        )
        raise SourceFetchError(
            f"{label} failed: {response.status_code} {response.reason_phrase} - {body}",
            kind="http",
            status_code=response.status_code,
            body=body,
            context={"url": url},
        )
    return response


def parse_json_body(response: httpx.Response, url: str) -> Any:
    """Decode a JSON response body.

    Raises:
        SourceFetchError: kind='parse' if the body is not valid JSON.
    """
    try:
        return response.json()
    except ValueError as e:
        raise SourceFetchError(
            f"Response is not valid JSON: {e}",
            kind="parse",
            context={"url": url},
        ) from e


class DataPath:
    """Compiled JSONPath selecting the row array inside a response."""

    def __init__(self, expression: str):
        try:
            self._expr = parse_jsonpath(expression)
        except Exception as e:
            raise ConfigError(
                f"Invalid data path '{expression}': {e}",
                context={"data_path": expression},
            ) from e
        self.expression = expression

    def extract(self, document: Any) -> Any:
        """Return the first match, or an empty list when nothing matches."""
        matches = self._expr.find(document)
        if not matches:
            return []
        return matches[0].value
