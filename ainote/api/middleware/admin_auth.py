"""API key authentication for admin endpoints"""

from __future__ import annotations

import os
import secrets

from fastapi import Header, HTTPException, status

from ainote.observability.logging import get_logger

logger = get_logger(__name__)


class APIKeyAuth:
    """
    Shared-secret authentication for operator endpoints.

    The key is read from AINOTE_ADMIN_API_KEY when the instance is created.
    Without a key, admin endpoints are open (development only; app startup
    refuses to run that way in production).
    """

    def __init__(self):
        self.api_key = os.getenv("AINOTE_ADMIN_API_KEY")
        if not self.api_key:
            logger.warning("AINOTE_ADMIN_API_KEY not set - admin endpoints are unprotected!")

    def verify_api_key(self, authorization: str | None = Header(None)) -> bool:
        """
        Verify API key from Authorization header ("Bearer {api_key}").
        """
        if not self.api_key:
            return True

        if not authorization:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Missing authorization header",
                headers={"WWW-Authenticate": "Bearer"},
            )

        try:
            scheme, token = authorization.split()
            if scheme.lower() != "bearer":
                raise ValueError("Invalid authentication scheme")
        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid authorization header format. Expected: Bearer {api_key}",
                headers={"WWW-Authenticate": "Bearer"},
            ) from e

        # Timing-safe comparison
        if not secrets.compare_digest(token, self.api_key):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Invalid API key",
            )

        return True
