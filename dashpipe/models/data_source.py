"""Stored data source records."""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> str:
    """Current time as an ISO-8601 UTC string."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


class DataSource(BaseModel):
    """A saved data source belonging to one owner."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(description="Data source identifier")
    owner_id: str = Field(description="Identifier of the owning user")
    name: str = Field(description="Display name")
    type: str = Field(description="Source kind (api, csv, json, static)")
    connection_config: dict[str, Any] = Field(
        default_factory=dict, description="Raw source config, secret references unresolved"
    )
    schema_config: dict[str, Any] = Field(
        default_factory=dict, description="Inferred or imported schema"
    )
    is_active: bool = Field(default=True)
    created_at: str = Field(default_factory=utc_now)
    updated_at: str = Field(default_factory=utc_now)


class DataSourceCreate(BaseModel):
    """Fields accepted when creating a data source."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(min_length=1)
    type: str
    connection_config: dict[str, Any] = Field(default_factory=dict)
    schema_config: dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True


class DataSourceUpdate(BaseModel):
    """Partial update of a data source; unset fields are left alone."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: Optional[str] = None
    type: Optional[str] = None
    connection_config: Optional[dict[str, Any]] = None
    schema_config: Optional[dict[str, Any]] = None
    is_active: Optional[bool] = None
