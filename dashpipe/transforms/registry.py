"""Stage registry for managing transform stage factories."""

from typing import Callable, Optional, Protocol, overload, runtime_checkable

from dashpipe.core.exceptions import TransformError
from dashpipe.core.rows import Row
from dashpipe.models.transform_config import TransformConfig


@runtime_checkable
class Stage(Protocol):
    """Protocol for transform stages."""

    def apply(self, rows: list[Row]) -> list[Row]:
        """Apply the stage and return a new row list."""
        ...


# A factory returns None when its part of the config is absent
StageFactory = Callable[[TransformConfig], Optional[Stage]]

_stage_registry: dict[str, StageFactory] = {}


@overload
def register_stage(
    stage_type: str,
) -> Callable[[StageFactory], StageFactory]: ...


@overload
def register_stage(stage_type: str, factory: StageFactory) -> None: ...


def register_stage(
    stage_type: str,
    factory: StageFactory | None = None,
) -> Callable[[StageFactory], StageFactory] | None:
    """Register a stage factory.

    Can be used as a decorator or called directly:

        # As decorator
        @register_stage("filter")
        def create_filter_stage(config):
            return FilterStage(config.filters) if config.filters else None

        # Direct call
        register_stage("filter", create_filter_stage)

    Args:
        stage_type: Unique identifier for the stage (e.g., 'filter').
        factory: Factory function (optional if used as decorator).

    Raises:
        TransformError: If a stage with the same type is already registered.
    """

    def _register(f: StageFactory) -> StageFactory:
        if stage_type in _stage_registry:
            raise TransformError(
                f"Stage '{stage_type}' is already registered",
                context={"stage_type": stage_type},
            )
        _stage_registry[stage_type] = f
        return f

    if factory is not None:
        _register(factory)
        return None

    return _register


def get_stage(stage_type: str, config: TransformConfig) -> Optional[Stage]:
    """Create a stage instance using the registered factory.

    Args:
        stage_type: The stage type to instantiate.
        config: Full transform configuration.

    Returns:
        A Stage instance, or None if the config does not enable the stage.

    Raises:
        TransformError: If the stage type is not registered.
    """
    factory = _stage_registry.get(stage_type)
    if factory is None:
        available = ", ".join(sorted(_stage_registry.keys())) or "(none)"
        raise TransformError(
            f"Unknown stage type: '{stage_type}'",
            context={"stage_type": stage_type, "available_types": available},
        )
    return factory(config)


def list_stage_types() -> list[str]:
    """Return a sorted list of all registered stage types."""
    return sorted(_stage_registry.keys())


def clear_registry() -> None:
    """Clear all registered stages.

    Intended for testing only.
    """
    _stage_registry.clear()
