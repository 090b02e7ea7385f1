# tests/test_api_auth.py

from __future__ import annotations

import httpx
import jwt
import pytest

from dayplanner.config import Settings
from dayplanner.server.app import create_app
from dayplanner.server.auth import issue_token

from .conftest import register


@pytest.mark.asyncio
async def test_register_sets_http_only_cookie(http: httpx.AsyncClient) -> None:
    resp = await http.post("/api/auth/register", json={"username": "alice", "password": "secret-1"})

    assert resp.status_code == 201
    body = resp.json()
    assert body["username"] == "alice"
    assert set(body) == {"id", "username"}

    set_cookie = resp.headers["set-cookie"].lower()
    assert "token=" in set_cookie
    assert "httponly" in set_cookie
    assert "max-age=3600" in set_cookie
    assert "secure" not in set_cookie  # not production


@pytest.mark.asyncio
async def test_duplicate_register_fails_and_original_login_still_works(app, http: httpx.AsyncClient) -> None:
    await register(http, "alice", "original-pw")

    resp = await http.post("/api/auth/register", json={"username": "alice", "password": "other-pw"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Username already exists", "code": "username_exists"}
    assert app.state.user_store.count_users() == 1

    ok = await http.post("/api/auth/login", json={"username": "alice", "password": "original-pw"})
    assert ok.status_code == 200
    assert ok.json()["username"] == "alice"

    bad = await http.post("/api/auth/login", json={"username": "alice", "password": "other-pw"})
    assert bad.status_code == 401


@pytest.mark.asyncio
async def test_login_rejects_unknown_user_like_wrong_password(http: httpx.AsyncClient) -> None:
    await register(http, "bob")
    unknown = await http.post("/api/auth/login", json={"username": "ghost", "password": "x"})
    wrong = await http.post("/api/auth/login", json={"username": "bob", "password": "x"})

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json() == {"error": "Invalid credentials", "code": "invalid_credentials"}


@pytest.mark.asyncio
async def test_legacy_login_path_is_supported(http: httpx.AsyncClient) -> None:
    await register(http, "carol", "pw-carol")
    resp = await http.post("/api/login", json={"username": "carol", "password": "pw-carol"})
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_missing_fields_are_validation_errors(http: httpx.AsyncClient) -> None:
    empty = await http.post("/api/auth/register", json={"username": "  ", "password": ""})
    assert empty.status_code == 400
    assert empty.json()["code"] == "validation"

    not_json = await http.post("/api/auth/login", content=b"nope", headers={"content-type": "application/json"})
    assert not_json.status_code == 400
    assert not_json.json()["code"] == "validation"


@pytest.mark.asyncio
async def test_current_user_from_cookie_and_logout(http: httpx.AsyncClient) -> None:
    user = await register(http, "dave")

    me = await http.get("/api/user")
    assert me.status_code == 200
    assert me.json() == user

    out = await http.post("/api/auth/logout")
    assert out.status_code == 200

    after = await http.get("/api/user")
    assert after.status_code == 401
    assert after.json()["code"] == "not_authenticated"


@pytest.mark.asyncio
async def test_invalid_and_expired_tokens_are_rejected(settings: Settings, http: httpx.AsyncClient) -> None:
    http.cookies.set("token", "garbage")
    resp = await http.get("/api/user")
    assert resp.status_code == 401
    assert resp.json()["code"] == "invalid_token"

    expired = issue_token(1, secret=str(settings.jwt_secret_key), ttl_seconds=60, now=1_000_000)
    http.cookies.set("token", expired)
    resp = await http.get("/api/tasks")
    assert resp.status_code == 401
    assert resp.json()["code"] == "invalid_token"

    forged = jwt.encode({"userId": 1, "exp": 4_000_000_000}, "some-other-secret-key-1234567890", algorithm="HS256")
    http.cookies.set("token", forged)
    assert (await http.get("/api/tasks")).status_code == 401


@pytest.mark.asyncio
async def test_valid_token_for_missing_user_is_404(settings: Settings, http: httpx.AsyncClient) -> None:
    token = issue_token(999, secret=str(settings.jwt_secret_key), ttl_seconds=60)
    http.cookies.set("token", token)
    resp = await http.get("/api/user")
    assert resp.status_code == 404
    assert resp.json()["error"] == "User not found"


def test_app_refuses_to_start_without_secret(settings: Settings) -> None:
    from dataclasses import replace

    with pytest.raises(RuntimeError):
        create_app(replace(settings, jwt_secret_key=None))


@pytest.mark.asyncio
async def test_secure_cookie_in_production(settings: Settings) -> None:
    from dataclasses import replace

    prod = create_app(replace(settings, environment="production", cookie_secure=True))
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=prod), base_url="https://testserver") as c:
        resp = await c.post("/api/auth/register", json={"username": "erin", "password": "pw"})
    assert resp.status_code == 201
    assert "secure" in resp.headers["set-cookie"].lower()


def test_production_without_secure_cookie_logs_warning(settings: Settings, caplog: pytest.LogCaptureFixture) -> None:
    from dataclasses import replace

    with caplog.at_level("WARNING", logger="dayplanner.server.app"):
        create_app(replace(settings, environment="production", cookie_secure=True))
    assert not caplog.records

    with caplog.at_level("WARNING", logger="dayplanner.server.app"):
        create_app(replace(settings, environment="production", cookie_secure=False))
    assert any("secure cookies" in r.getMessage() for r in caplog.records)
