"""HTTP server exposing fetch, transform, validate and preview endpoints."""

from dashpipe.server.app import create_app
from dashpipe.server.auth import Principal, verify_token

__all__ = ["create_app", "Principal", "verify_token"]
