"""Tests for admin API key authentication"""

from __future__ import annotations

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from ainote.api.middleware.admin_auth import APIKeyAuth


def create_test_app(monkeypatch, api_key: str | None = None):
    """Create test FastAPI app with protected endpoint"""
    if api_key is not None:
        monkeypatch.setenv("AINOTE_ADMIN_API_KEY", api_key)
    else:
        monkeypatch.delenv("AINOTE_ADMIN_API_KEY", raising=False)

    auth_instance = APIKeyAuth()
    test_app = FastAPI()

    @test_app.get("/protected")
    async def protected(_authenticated: bool = Depends(auth_instance.verify_api_key)):
        return {"status": "ok"}

    return TestClient(test_app)


def test_rejects_missing_header(monkeypatch):
    response = create_test_app(monkeypatch, "k").get("/protected")
    assert response.status_code == 401
    assert "Missing authorization header" in response.json()["detail"]


def test_rejects_wrong_scheme_and_key(monkeypatch):
    client = create_test_app(monkeypatch, "k")
    assert client.get("/protected", headers={"Authorization": "Basic k"}).status_code == 401
    assert client.get("/protected", headers={"Authorization": "Bearer x"}).status_code == 403


def test_accepts_correct_key_case_insensitive_scheme(monkeypatch):
    client = create_test_app(monkeypatch, "k")
    assert client.get("/protected", headers={"Authorization": "bearer k"}).status_code == 200


def test_open_without_configured_key(monkeypatch):
    assert create_test_app(monkeypatch, None).get("/protected").status_code == 200
