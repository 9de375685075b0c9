"""Connector registry for managing connector factories.

This module provides a registry pattern for connector implementations.
Each source kind of the ``SourceConfig`` union has exactly one factory; the
factory is picked once, from the config's ``type`` tag, when a fetch starts.
"""

from __future__ import annotations

from typing import Any, Callable, overload

from dashpipe.connectors.base import Connector
from dashpipe.core.exceptions import ConfigError, UnsupportedSourceError

ConnectorFactory = Callable[[Any], Connector]

# Global registry
_connector_registry: dict[str, ConnectorFactory] = {}


@overload
def register_connector(connector_type: str) -> Callable[[ConnectorFactory], ConnectorFactory]: ...


@overload
def register_connector(connector_type: str, factory: ConnectorFactory) -> None: ...


def register_connector(
    connector_type: str,
    factory: ConnectorFactory | None = None,
) -> Callable[[ConnectorFactory], ConnectorFactory] | None:
    """Register a connector factory.

    Can be used as a decorator or called directly:

        # As decorator
        @register_connector("csv")
        def create_csv_connector(config):
            return CsvConnector(config)

        # Direct call
        register_connector("csv", create_csv_connector)

    Args:
        connector_type: Source kind the factory handles (e.g., 'api', 'csv').
        factory: Factory function (optional if used as decorator).

    Raises:
        ConfigError: If a connector with the same type is already registered.
    """

    def _register(f: ConnectorFactory) -> ConnectorFactory:
        if connector_type in _connector_registry:
            raise ConfigError(
                f"Connector '{connector_type}' is already registered",
                context={"connector_type": connector_type},
            )
        _connector_registry[connector_type] = f
        return f

    if factory is not None:
        _register(factory)
        return None

    return _register


def get_connector(config: Any) -> Connector:
    """Create the connector for a validated source config.

    Args:
        config: One of the ``SourceConfig`` union members.

    Returns:
        A Connector instance bound to the config.

    Raises:
        UnsupportedSourceError: If no connector handles the config's type.
    """
    connector_type = getattr(config, "type", None)
    factory = _connector_registry.get(connector_type)
    if factory is None:
        available = ", ".join(sorted(_connector_registry.keys())) or "(none)"
        raise UnsupportedSourceError(
            f"Unsupported data source type: {connector_type}",
            context={"connector_type": connector_type, "available_types": available},
        )
    return factory(config)


def list_connector_types() -> list[str]:
    """Return a list of all registered connector types."""
    return sorted(_connector_registry.keys())


def clear_registries() -> None:
    """Clear all registered connectors. Intended for testing only."""
    _connector_registry.clear()
