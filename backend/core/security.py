"""
Bearer token handling.

Tokens are HS256 JWTs issued by the external identity provider. The
`sub` claim carries the user's email; an optional `name` claim seeds the
profile on first sign-in.

Dependencies: PyJWT, backend.configs
System role: Token creation (development/tests) and validation
"""

import logging
import time
from typing import Any

import jwt

from backend.configs import get_settings
from backend.core.exceptions import NotAuthenticatedError

logger = logging.getLogger(__name__)


def create_access_token(
    email: str,
    name: str | None = None,
    ttl_seconds: int | None = None,
) -> str:
    """Issue a signed token for `email` (local development and tests)."""
    auth = get_settings().auth
    now = int(time.time())
    payload: dict[str, Any] = {
        "sub": email,
        "iat": now,
        "exp": now + (ttl_seconds or auth.token_ttl_seconds),
        "type": "access",
    }
    if name:
        payload["name"] = name
    if auth.issuer:
        payload["iss"] = auth.issuer
    return jwt.encode(payload, auth.secret_key, algorithm=auth.algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Validate a bearer token and return its claims.

    Raises:
        NotAuthenticatedError: If the token is expired, malformed or has no subject
    """
    auth = get_settings().auth
    options = {"require": ["sub", "exp"]}
    try:
        claims = jwt.decode(
            token,
            auth.secret_key,
            algorithms=[auth.algorithm],
            issuer=auth.issuer,
            options=options,
        )
    except jwt.ExpiredSignatureError:
        raise NotAuthenticatedError("Token expired")
    except jwt.InvalidTokenError as e:
        logger.info("Rejected bearer token", extra={"reason": str(e)})
        raise NotAuthenticatedError("Invalid token")

    if not str(claims.get("sub", "")).strip():
        raise NotAuthenticatedError("Invalid token")
    return claims


def get_bearer_token(auth_header: str | None) -> str | None:
    if not auth_header:
        return None
    parts = auth_header.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None
