"""REST API connector."""

from dashpipe.connectors.api.connector import ApiConnector, create_api_connector

__all__ = ["ApiConnector", "create_api_connector"]
