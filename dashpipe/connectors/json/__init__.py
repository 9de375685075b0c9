"""JSON document connector."""

from dashpipe.connectors.json.connector import JsonConnector, create_json_connector

__all__ = ["JsonConnector", "create_json_connector"]
