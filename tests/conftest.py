# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from dayplanner.client.api import ApiClient
from dayplanner.config import Settings
from dayplanner.server.app import create_app

BASE_URL = "http://testserver"


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings built explicitly (not from the environment) so tests are isolated
    and deterministic. Everything lives under tmp_path.
    """
    return Settings(
        app_name="dayplanner-test",
        log_level="DEBUG",
        environment="test",
        data_dir=tmp_path,
        db_path=tmp_path / "dayplanner.sqlite3",
        session_path=tmp_path / "session.json",
        jwt_secret_key="test-secret-key-with-enough-length-for-hs256",
        session_ttl_seconds=3600,
        cookie_name="token",
        cookie_secure=False,
        server_host="127.0.0.1",
        server_port=8000,
        api_base_url=BASE_URL,
        request_timeout_seconds=5.0,
        session_check_interval_seconds=60.0,
        reminder_interval_seconds=5.0,
    )


@pytest.fixture()
def app(settings: Settings) -> FastAPI:
    """API app with real SQLite stores in a temp file."""
    return create_app(settings)


@pytest_asyncio.fixture()
async def http(app: FastAPI):
    """Raw HTTP client talking to the in-process app (has its own cookie jar)."""
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url=BASE_URL) as client:
        yield client


@pytest.fixture()
def make_api(app: FastAPI):
    """Factory for ApiClients bound to the in-process app; each one is a separate 'browser'."""

    def factory() -> ApiClient:
        return ApiClient(BASE_URL, transport=httpx.ASGITransport(app=app))

    return factory


@pytest_asyncio.fixture()
async def api(make_api) -> ApiClient:
    client = make_api()
    yield client
    await client.aclose()


async def register(http: httpx.AsyncClient, username: str, password: str = "pw-123456") -> dict:
    resp = await http.post("/api/auth/register", json={"username": username, "password": password})
    assert resp.status_code == 201, resp.text
    return resp.json()
