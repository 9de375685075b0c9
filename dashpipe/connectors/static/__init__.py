"""Synthetic data connector."""

from dashpipe.connectors.static.connector import StaticConnector, create_static_connector
from dashpipe.connectors.static.generator import generate_rows

__all__ = ["StaticConnector", "create_static_connector", "generate_rows"]
