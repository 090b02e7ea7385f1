# src/dayplanner/server/auth_routes.py

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel

from ..config import Settings
from ..core.errors import InvalidCredentialsError, NotFoundOrUnauthorized, ValidationFailure
from ..storage.user_store import UserStore
from .auth import (
    clear_session_cookie,
    current_user_id,
    hash_password,
    issue_token,
    set_session_cookie,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


class Credentials(BaseModel):
    username: str = ""
    password: str = ""


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def _clean(creds: Credentials) -> tuple[str, str]:
    username = creds.username.strip()
    if not username or not creds.password:
        raise ValidationFailure("Username and password are required")
    return username, creds.password


def _start_session(response: Response, user_id: int, settings: Settings) -> None:
    token = issue_token(
        user_id,
        secret=str(settings.jwt_secret_key),
        ttl_seconds=settings.session_ttl_seconds,
    )
    set_session_cookie(response, token, settings)


@router.post("/auth/login")
@router.post("/login", include_in_schema=False)
def login(
    creds: Credentials,
    response: Response,
    users: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings_dep),
) -> dict[str, Any]:
    username, password = _clean(creds)

    # Unknown user and wrong password answer identically.
    user = users.get_by_username(username)
    if user is None or not verify_password(user.password_hash, password):
        logger.info("Login rejected for username=%s", username)
        raise InvalidCredentialsError()

    _start_session(response, user.id, settings)
    logger.info("Login ok user_id=%s", user.id)
    return user.public().to_json()


@router.post("/auth/register", status_code=201)
@router.post("/register", status_code=201, include_in_schema=False)
def register(
    creds: Credentials,
    response: Response,
    users: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings_dep),
) -> dict[str, Any]:
    username, password = _clean(creds)

    # UserStore raises UsernameTakenError (400) without inserting anything.
    user = users.create_user(username, hash_password(password))

    _start_session(response, user.id, settings)
    logger.info("Registered user_id=%s username=%s", user.id, username)
    return user.public().to_json()


@router.post("/auth/logout")
@router.post("/logout", include_in_schema=False)
def logout(response: Response, settings: Settings = Depends(get_settings_dep)) -> dict[str, Any]:
    clear_session_cookie(response, settings)
    return {"message": "Logged out successfully"}


@router.get("/user")
def current_user(
    user_id: int = Depends(current_user_id),
    users: UserStore = Depends(get_user_store),
) -> dict[str, Any]:
    # A valid token for a deleted account is a 404, not a 401.
    user = users.get_by_id(user_id)
    if user is None:
        raise NotFoundOrUnauthorized("User not found")
    return user.public().to_json()
