"""Static connector producing synthetic rows without any I/O."""

import logging
from typing import Optional

import httpx

from dashpipe.connectors.registry import register_connector
from dashpipe.connectors.static.generator import generate_rows
from dashpipe.core.rows import Row
from dashpipe.core.settings import get_settings
from dashpipe.models.source_config import StaticSourceConfig

logger = logging.getLogger(__name__)


class StaticConnector:
    """Connector that generates demo rows for a data category.

    Row count is the fetch ``limit``, then the config ``limit``, then the
    ``static_default_count`` setting (100).
    """

    def __init__(self, config: StaticSourceConfig):
        self._config = config
        self._data_type = config.data_type
        self._seed = config.seed

    async def fetch(
        self,
        limit: Optional[int] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> list[Row]:
        """Generate rows. ``client`` is accepted for interface parity and unused."""
        count = limit or self._config.limit or get_settings().static_default_count
        logger.debug(
            f"Generating {count} '{self._data_type}' rows",
            extra={"source_type": "static"},
        )
        return generate_rows(self._data_type, count, seed=self._seed)


@register_connector("static")
def create_static_connector(config: StaticSourceConfig) -> StaticConnector:
    """Factory function to create a StaticConnector instance."""
    return StaticConnector(config)
