"""Config loading: YAML/JSON files or mappings to validated models."""

from pathlib import Path
from typing import Any, Mapping, Union

import yaml
from pydantic import ValidationError

from dashpipe.core.exceptions import ConfigError, TransformError, UnsupportedSourceError
from dashpipe.models.source_config import (
    SOURCE_KINDS,
    SourceConfig,
    source_config_adapter,
)
from dashpipe.models.templates import render_secrets
from dashpipe.models.transform_config import TransformConfig

ConfigInput = Union[str, Path, Mapping[str, Any]]


def load_source_config(
    source: ConfigInput | Any,
    secrets: Mapping[str, str] | None = None,
) -> SourceConfig:
    """
    Load and validate a source config, resolving secret references.

    Args:
        source: Path to a YAML/JSON file, a raw mapping, or an already
            validated source config (returned unchanged)
        secrets: Secret lookup (defaults to the process environment)

    Returns:
        ApiSourceConfig, CsvSourceConfig, JsonSourceConfig or StaticSourceConfig

    Raises:
        UnsupportedSourceError: If ``type`` names no known source kind
        ConfigError: If the file cannot be read, a secret is missing, or validation fails
    """
    if isinstance(source, (str, Path)):
        raw = load_config_file(source)
    elif isinstance(source, Mapping):
        raw = dict(source)
    elif getattr(source, "type", None) in SOURCE_KINDS:
        return source
    else:
        raise ConfigError(
            "Source config must be a mapping",
            context={"config_type": type(source).__name__},
        )

    kind = raw.get("type")
    if kind not in SOURCE_KINDS:
        raise UnsupportedSourceError(
            f"Unsupported data source type: {kind}",
            context={"type": kind, "available_types": ", ".join(SOURCE_KINDS)},
        )

    rendered = render_secrets(raw, secrets)

    try:
        return source_config_adapter.validate_python(rendered)
    except ValidationError as e:
        raise ConfigError(
            f"Source config validation failed: {_first_error(e)}",
            context={"type": kind},
        ) from e


def load_transform_config(config: TransformConfig | Mapping[str, Any] | None) -> TransformConfig:
    """
    Validate a transform config mapping.

    Raises:
        TransformError: If the mapping is malformed
    """
    if isinstance(config, TransformConfig):
        return config
    if config is None:
        return TransformConfig()
    if not isinstance(config, Mapping):
        raise TransformError(
            "Transform config must be a mapping",
            context={"config_type": type(config).__name__},
        )
    try:
        return TransformConfig.model_validate(dict(config))
    except ValidationError as e:
        raise TransformError(
            f"Transform config validation failed: {_first_error(e)}"
        ) from e


def load_config_file(path: str | Path) -> dict[str, Any]:
    """
    Read a YAML (or JSON) config file into a dictionary.

    Raises:
        ConfigError: If the file is missing, unparsable, or not a mapping
    """
    config_path = Path(path)
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}", context={"path": str(path)})
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML in config file: {e}", context={"path": str(path)}
        ) from e

    if not isinstance(data, dict):
        raise ConfigError(
            "Config file must contain a mapping",
            context={"path": str(path)},
        )
    return data


def _first_error(error: ValidationError) -> str:
    details = error.errors()
    if not details:
        return str(error)
    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message
