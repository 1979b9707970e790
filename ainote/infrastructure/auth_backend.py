"""
Client for the hosted authentication backend (GoTrue REST API, as served by
Supabase Auth).

The backend owns users, password hashing and access tokens; this module only
forwards requests and normalizes failures into AuthBackendError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx

from ainote.config import AUTH_ANON_KEY, AUTH_REDIRECT_URL, AUTH_REQUEST_TIMEOUT, AUTH_URL
from ainote.observability.logging import get_logger

logger = get_logger(__name__)


class AuthBackendError(Exception):
    """
    A failed auth backend call.

    ``message`` is the backend's own message (classified later by
    handle_auth_error); ``status`` is the HTTP status, or None when the
    request never got a response.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        self.message = message
        self.status = status
        super().__init__(message)


@dataclass
class AuthUser:
    id: str
    email: str
    user_metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> AuthUser:
        return cls(
            id=payload["id"],
            email=payload.get("email") or "",
            user_metadata=payload.get("user_metadata") or {},
        )


@dataclass
class AuthSession:
    access_token: str
    refresh_token: str | None
    expires_in: int | None
    user: AuthUser


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("msg", "message", "error_description", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return f"HTTP {response.status_code}"


class AuthBackendClient:
    """
    Async client; one instance per app.

    Args:
        base_url: backend URL (AINOTE_AUTH_URL), without the /auth/v1 suffix
        api_key: public (anon) API key sent as the ``apikey`` header
        transport: optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: str = AUTH_URL,
        api_key: str = AUTH_ANON_KEY,
        timeout: float = AUTH_REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        token: str | None = None,
    ) -> dict[str, Any]:
        if not self.base_url:
            raise AuthBackendError("Auth backend is not configured", status=503)

        headers = {"apikey": self.api_key}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        async with httpx.AsyncClient(
            base_url=f"{self.base_url}/auth/v1",
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.request(
                    method, path, json=json, params=params, headers=headers
                )
            except httpx.TimeoutException as e:
                logger.warning("Auth backend request timed out: %s %s", method, path)
                raise AuthBackendError("Network request timed out") from e
            except httpx.RequestError as e:
                logger.error("Auth backend request failed: %s", e)
                raise AuthBackendError("Network request failed") from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.info("Auth backend rejected %s %s (%d)", method, path, response.status_code)
            raise AuthBackendError(message, status=response.status_code)

        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    async def sign_up(self, email: str, password: str) -> AuthUser:
        payload = await self._request("POST", "/signup", json={"email": email, "password": password})
        # Returns a session when email confirmation is disabled, a bare user otherwise
        return AuthUser.from_payload(payload.get("user") or payload)

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        payload = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return AuthSession(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token"),
            expires_in=payload.get("expires_in"),
            user=AuthUser.from_payload(payload["user"]),
        )

    async def get_user(self, token: str) -> AuthUser:
        return AuthUser.from_payload(await self._request("GET", "/user", token=token))

    async def sign_out(self, token: str) -> None:
        await self._request("POST", "/logout", token=token)

    async def send_password_reset(self, email: str, redirect_to: str = AUTH_REDIRECT_URL) -> None:
        await self._request(
            "POST", "/recover", json={"email": email}, params={"redirect_to": redirect_to}
        )

    async def update_password(self, token: str, password: str) -> AuthUser:
        payload = await self._request("PUT", "/user", json={"password": password}, token=token)
        return AuthUser.from_payload(payload)
