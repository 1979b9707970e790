"""
User authentication for the note API.

Verifies bearer access tokens against the auth backend and extracts user
identity. Verified tokens are cached for a few minutes so every request does
not round-trip to the backend.
"""

from __future__ import annotations

from dataclasses import dataclass

from cachetools import TTLCache
from fastapi import HTTPException, Request, status

from ainote.config import AUTH_TOKEN_CACHE_SIZE, AUTH_TOKEN_CACHE_TTL_SECONDS
from ainote.infrastructure.auth_backend import AuthBackendClient, AuthBackendError
from ainote.observability.logging import get_logger

logger = get_logger(__name__)


@dataclass
class AuthenticatedUser:
    """The user behind a verified access token."""

    id: str
    email: str
    token: str

    def __str__(self) -> str:
        return f"User({self.id})"


# Shorter than the backend's token lifetime so revoked tokens expire quickly
_token_cache: TTLCache[str, AuthenticatedUser] = TTLCache(
    maxsize=AUTH_TOKEN_CACHE_SIZE, ttl=AUTH_TOKEN_CACHE_TTL_SECONDS
)


async def verify_access_token(token: str, client: AuthBackendClient) -> AuthenticatedUser:
    """
    Resolve an access token to a user.

    Raises:
        HTTPException: 401 if the token is rejected, 503 if the backend is unreachable
    """
    if token in _token_cache:
        return _token_cache[token]

    try:
        auth_user = await client.get_user(token)
    except AuthBackendError as e:
        if e.status is None or e.status >= 500:
            logger.error("Token validation failed: %s", e)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Authentication service unavailable",
            ) from e
        logger.warning("Invalid token (status=%s)", e.status)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    user = AuthenticatedUser(id=auth_user.id, email=auth_user.email, token=token)
    _token_cache[token] = user

    logger.info("Authenticated user: %s (cache size: %d)", user, len(_token_cache))
    return user


def extract_bearer_token(authorization: str | None) -> str:
    """Extract token from Authorization header."""
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format. Expected: Bearer <token>",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return parts[1]


async def get_current_user(request: Request) -> AuthenticatedUser:
    """
    FastAPI dependency to get the current authenticated user.

    Usage:
        @router.get("/endpoint")
        async def endpoint(user: AuthenticatedUser = Depends(get_current_user)):
            ...
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    return await verify_access_token(token, request.app.state.auth_client)


def forget_token(token: str) -> None:
    """Drop a token from the cache (after logout)."""
    _token_cache.pop(token, None)


def clear_token_cache() -> None:
    """Clear the token cache. Useful for testing."""
    _token_cache.clear()


async def get_optional_user(request: Request) -> AuthenticatedUser | None:
    """
    Like get_current_user, but anonymous callers (no header, rejected token,
    auth backend down) get None instead of an error.
    """
    authorization = request.headers.get("Authorization")
    if not authorization:
        return None

    try:
        token = extract_bearer_token(authorization)
        return await verify_access_token(token, request.app.state.auth_client)
    except HTTPException as e:
        logger.info("Treating request as anonymous (status=%d)", e.status_code)
        return None
