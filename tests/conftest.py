"""
Shared fixtures for the AI note pad tests.

Every test gets its own SQLite file (AINOTE_DB_PATH) and fresh in-memory
telemetry and token cache. API tests use a fake auth backend and a fake
text generator so nothing leaves the process.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

import pytest
from fastapi.testclient import TestClient

from ainote.api.middleware.user_auth import clear_token_cache
from ainote.drafts import DraftStorage, MemoryKeyValueStore
from ainote.infrastructure.auth_backend import AuthBackendError, AuthSession, AuthUser
from ainote.infrastructure.database import init_database, reset_pool
from ainote.llm.gemini import GenerationResult
from ainote.observability.telemetry import reset_telemetry
from ainote.utils.ai_errors import AIErrorType

LONG_CONTENT = (
    "Quarterly planning meeting. We agreed to ship the offline editor in May, "
    "move the search rewrite to June and hire two more backend engineers."
)


@pytest.fixture(autouse=True)
def isolated_state(tmp_path, monkeypatch):
    """Point the pool at a fresh database and clear process-wide caches."""
    monkeypatch.setenv("AINOTE_DB_PATH", str(tmp_path / "ainote.db"))
    monkeypatch.delenv("AINOTE_ADMIN_API_KEY", raising=False)
    reset_pool()
    init_database()
    clear_token_cache()
    reset_telemetry()
    yield
    reset_pool()
    clear_token_cache()


class FakeTextGenerator:
    """TextGenerator that replays queued results and records prompts."""

    def __init__(self, *texts: str, model_name: str = "gemini-1.5-flash") -> None:
        self.model_name = model_name
        self.results: deque[GenerationResult] = deque(
            GenerationResult(success=True, text=t) for t in texts
        )
        self.prompts: list[str] = []

    def queue(self, *texts: str) -> None:
        self.results.extend(GenerationResult(success=True, text=t) for t in texts)

    def fail(self, error_type: AIErrorType, message: str, action: str = "retry") -> None:
        self.results.append(
            GenerationResult(success=False, error=message, error_type=error_type, action=action)
        )

    def generate_text(self, prompt: str, counter_prefix: str = "llm") -> GenerationResult:
        self.prompts.append(prompt)
        if self.results:
            return self.results.popleft()
        return GenerationResult(success=True, text="- default summary line")


@dataclass
class FakeAuthClient:
    """In-memory stand-in for AuthBackendClient."""

    passwords: dict[str, str] = field(default_factory=dict)
    users: dict[str, AuthUser] = field(default_factory=dict)
    tokens: dict[str, AuthUser] = field(default_factory=dict)
    unconfirmed: set[str] = field(default_factory=set)
    reset_requests: list[str] = field(default_factory=list)
    signed_out: list[str] = field(default_factory=list)
    offline: bool = False

    def _check_online(self) -> None:
        if self.offline:
            raise AuthBackendError("Network request failed")

    def add_user(self, email: str, password: str = "Password1!") -> str:
        """Register a confirmed user and return a valid access token."""
        user = AuthUser(id=f"user-{len(self.users) + 1}", email=email)
        self.users[email] = user
        self.passwords[email] = password
        token = f"token-{user.id}"
        self.tokens[token] = user
        return token

    async def sign_up(self, email: str, password: str) -> AuthUser:
        self._check_online()
        if email in self.users:
            raise AuthBackendError("User already registered", 422)
        user = AuthUser(id=f"user-{len(self.users) + 1}", email=email)
        self.users[email] = user
        self.passwords[email] = password
        return user

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        self._check_online()
        if self.passwords.get(email) != password:
            raise AuthBackendError("Invalid login credentials", 400)
        if email in self.unconfirmed:
            raise AuthBackendError("Email not confirmed", 400)
        user = self.users[email]
        token = f"token-{user.id}"
        self.tokens[token] = user
        return AuthSession(access_token=token, refresh_token="refresh", expires_in=3600, user=user)

    async def get_user(self, token: str) -> AuthUser:
        self._check_online()
        if token not in self.tokens:
            raise AuthBackendError("Invalid JWT", 401)
        return self.tokens[token]

    async def sign_out(self, token: str) -> None:
        self.signed_out.append(token)
        self.tokens.pop(token, None)

    async def send_password_reset(self, email: str, redirect_to: str = "") -> None:
        self._check_online()
        self.reset_requests.append(email)

    async def update_password(self, token: str, password: str) -> AuthUser:
        user = self.tokens[token]
        self.passwords[user.email] = password
        return user


@pytest.fixture
def generator():
    return FakeTextGenerator()


@pytest.fixture
def auth_client():
    return FakeAuthClient()


@pytest.fixture
def client(generator, auth_client):
    from ainote.api.app import create_app

    app = create_app(
        text_generator=generator,
        auth_client=auth_client,
        draft_storage=DraftStorage(MemoryKeyValueStore()),
    )
    return TestClient(app)


@pytest.fixture
def auth_headers(auth_client):
    token = auth_client.add_user("alice@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_generator():
    return FakeTextGenerator


@pytest.fixture
def long_content():
    return LONG_CONTENT
