"""Source configuration models.

A source config is a tagged union on ``type``: ``api``, ``csv``, ``json`` or
``static``. Keys that do not apply to a kind are ignored rather than
rejected. Configs coming from users should be built with
``dashpipe.models.loader.load_source_config`` so secret references are
resolved before validation.
"""

import re
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

# Matches {{NAME}} and {{ env_var('NAME') }} placeholders left in a value
UNRESOLVED_PLACEHOLDER = re.compile(r"\{\{[^}]*\}\}")


def _reject_placeholders(value: Any, field_name: str) -> Any:
    """Refuse values that still carry a secret placeholder."""
    texts: list[str] = []
    if isinstance(value, str):
        texts = [value]
    elif isinstance(value, dict):
        texts = [v for v in value.values() if isinstance(v, str)]
    for text in texts:
        if UNRESOLVED_PLACEHOLDER.search(text):
            raise ValueError(
                f"'{field_name}' contains an unresolved secret reference; "
                "load the config with load_source_config()"
            )
    return value


class BaseSourceConfig(BaseModel):
    """Fields shared by every source kind."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    limit: Optional[int] = Field(
        default=None, description="Maximum number of rows to return", ge=1
    )


class HttpSourceConfig(BaseSourceConfig):
    """Fields shared by sources fetched over HTTP."""

    url: str = Field(description="Location of the data")
    headers: dict[str, str] = Field(
        default_factory=dict, description="HTTP headers (secret references resolved)"
    )
    params: dict[str, Any] = Field(
        default_factory=dict, description="Query string parameters"
    )

    @field_validator("url", "headers", "params")
    @classmethod
    def validate_resolved(cls, v, info):
        """Validate no secret placeholder survived config loading."""
        return _reject_placeholders(v, info.field_name)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate the URL uses an HTTP scheme."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"url must start with http:// or https://, got '{v}'")
        return v


class ApiSourceConfig(HttpSourceConfig):
    """REST API source: any method, JSON response."""

    type: Literal["api"] = "api"

    method: HttpMethod = Field(default="GET", description="HTTP method")
    body: Optional[Any] = Field(
        default=None, description="JSON request body for non-GET methods"
    )
    data_path: Optional[str] = Field(
        default=None,
        alias="dataPath",
        description="JSONPath to the row array inside the response (e.g. 'data.items')",
    )

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v):
        """Accept lower-case method names."""
        return v.upper() if isinstance(v, str) else v


class CsvSourceConfig(HttpSourceConfig):
    """Remote CSV file whose first line is the header."""

    type: Literal["csv"] = "csv"


class JsonSourceConfig(HttpSourceConfig):
    """Remote JSON document."""

    type: Literal["json"] = "json"

    data_path: Optional[str] = Field(
        default=None,
        alias="dataPath",
        description="JSONPath to the row array inside the document",
    )


class StaticSourceConfig(BaseSourceConfig):
    """Synthetic rows for demos: 'sales', 'users' or a generic shape."""

    type: Literal["static"] = "static"

    data_type: str = Field(
        default="sales",
        alias="dataType",
        description="Synthetic data category ('sales', 'users', anything else is generic)",
    )
    seed: Optional[int] = Field(
        default=None, description="Random seed for reproducible rows"
    )


SourceConfig = Annotated[
    Union[ApiSourceConfig, CsvSourceConfig, JsonSourceConfig, StaticSourceConfig],
    Field(discriminator="type"),
]

SOURCE_KINDS: tuple[str, ...] = ("api", "csv", "json", "static")

source_config_adapter: TypeAdapter = TypeAdapter(SourceConfig)
