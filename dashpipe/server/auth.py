"""Bearer token verification for the HTTP server."""

import logging
from typing import Any, Optional

import jwt
from fastapi import Request
from pydantic import BaseModel, Field

from dashpipe.core.exceptions import AuthError
from dashpipe.core.settings import Settings

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class Principal(BaseModel):
    """The authenticated caller."""

    user_id: str = Field(description="Value of the token's sub (or user_id) claim")
    claims: dict[str, Any] = Field(default_factory=dict)


def verify_token(token: str, secret: Optional[str], algorithm: str = "HS256") -> Principal:
    """Verify a JWT's signature and expiry and return its principal.

    Args:
        token: Encoded JWT
        secret: Verification key; without one every token is rejected
        algorithm: Expected signature algorithm

    Raises:
        AuthError: If the token is malformed, forged, expired or has no user claim
    """
    if not secret:
        raise AuthError("Token verification is not configured")

    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": ["exp"]},
        )
    except jwt.PyJWTError as e:
        raise AuthError(f"Invalid token: {e}") from e

    user_id = claims.get("sub") or claims.get("user_id")
    if not user_id:
        raise AuthError("Token has no user claim")

    return Principal(user_id=str(user_id), claims=claims)


def bearer_token(authorization: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AuthError("Missing bearer token")
    return authorization[len(BEARER_PREFIX):].strip()


def require_principal(request: Request) -> Principal:
    """FastAPI dependency authenticating the request."""
    settings: Settings = request.app.state.settings
    secret = settings.auth_secret.get_secret_value() if settings.auth_secret else None
    token = bearer_token(request.headers.get("Authorization"))
    principal = verify_token(token, secret, settings.auth_algorithm)
    logger.debug(f"Authenticated user {principal.user_id}")
    return principal
