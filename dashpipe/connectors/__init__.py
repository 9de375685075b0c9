"""Connector protocol and registry for source connectors.

This module exposes:
- Connector: protocol implemented by every source connector
- Registry functions: register_connector, get_connector, list_connector_types
- Connector implementations: ApiConnector, CsvConnector, JsonConnector, StaticConnector
"""

from dashpipe.connectors.base import Connector

# Registry must be imported first (connector modules use decorators on import)
from dashpipe.connectors.registry import (
    ConnectorFactory,
    clear_registries,
    get_connector,
    list_connector_types,
    register_connector,
)

# Connector modules register themselves via @register_connector decorator on import
from dashpipe.connectors.api.connector import ApiConnector, create_api_connector
from dashpipe.connectors.csv.connector import CsvConnector, create_csv_connector
from dashpipe.connectors.json.connector import JsonConnector, create_json_connector
from dashpipe.connectors.static.connector import (
    StaticConnector,
    create_static_connector,
)


def reregister_builtins() -> None:
    """Re-register built-in connectors after registry is cleared.

    This is intended for tests that call clear_registries() but need
    the built-in connectors available afterwards.
    """
    current = list_connector_types()
    if "api" not in current:
        register_connector("api", create_api_connector)
    if "csv" not in current:
        register_connector("csv", create_csv_connector)
    if "json" not in current:
        register_connector("json", create_json_connector)
    if "static" not in current:
        register_connector("static", create_static_connector)


__all__ = [
    "Connector",
    "ConnectorFactory",
    "register_connector",
    "reregister_builtins",
    "get_connector",
    "list_connector_types",
    "clear_registries",
    "ApiConnector",
    "CsvConnector",
    "JsonConnector",
    "StaticConnector",
    "create_api_connector",
    "create_csv_connector",
    "create_json_connector",
    "create_static_connector",
]
