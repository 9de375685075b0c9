"""Exception hierarchy for the dashpipe package."""

from typing import Any


class DashPipeError(Exception):
    """Base exception for all dashpipe errors."""

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigError(DashPipeError):
    """Raised when a source, transform, or settings configuration is invalid."""

    pass


class UnsupportedSourceError(ConfigError):
    """Raised when a source config names a kind no connector handles."""

    pass


class SourceFetchError(DashPipeError):
    """Raised when fetching rows from a source fails.

    ``kind`` is one of ``network``, ``http`` or ``parse``. For HTTP failures
    ``status_code`` and ``body`` carry the upstream response.
    """

    def __init__(
        self,
        message: str,
        kind: str = "network",
        status_code: int | None = None,
        body: str | None = None,
        context: dict | None = None,
    ):
        ctx: dict[str, Any] = {"kind": kind}
        if status_code is not None:
            ctx["status_code"] = status_code
        ctx.update(context or {})
        super().__init__(message, context=ctx)
        self.kind = kind
        self.status_code = status_code
        self.body = body


class TransformError(DashPipeError):
    """Raised when transform execution fails."""

    pass


class StorageError(DashPipeError):
    """Raised when data source storage operations fail."""

    pass


class NotFoundError(StorageError):
    """Raised when a stored record does not exist for the requesting owner."""

    pass


class AuthError(DashPipeError):
    """Raised when a bearer token cannot be verified."""

    pass
