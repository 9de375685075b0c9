"""Process settings loaded from the environment."""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings for the dashpipe service and CLI.

    Every field can be set through a ``DASHPIPE_``-prefixed environment
    variable or a ``.env`` file, e.g. ``DASHPIPE_HTTP_TIMEOUT=10``.
    """

    model_config = SettingsConfigDict(
        env_prefix="DASHPIPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Emit JSON log lines")

    # Fetching
    http_timeout: float = Field(
        default=30.0, description="Outbound HTTP timeout in seconds", gt=0
    )
    preview_limit: int = Field(default=10, description="Default preview size", ge=1)
    validation_sample_size: int = Field(
        default=5, description="Rows fetched when validating a source", ge=1
    )
    schema_sample_size: int = Field(
        default=10, description="Rows sampled for type inference", ge=1
    )
    static_default_count: int = Field(
        default=100, description="Rows generated by static sources without a limit", ge=1
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Bind address for `dashpipe serve`")
    port: int = Field(default=8000, description="Bind port for `dashpipe serve`")
    auth_secret: Optional[SecretStr] = Field(
        default=None, description="Key used to verify bearer token signatures"
    )
    auth_algorithm: str = Field(default="HS256", description="Token signature algorithm")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    storage: str = Field(
        default="local:.dashpipe",
        description="Data source store: 'memory' or 'local[:directory]'",
    )
    row_cache_size: int = Field(
        default=256, description="Fetched results kept for /cached-data", ge=1
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level names."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
