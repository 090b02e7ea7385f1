# src/dayplanner/server/auth.py

"""
Session token helpers.

A session is a signed HS256 JWT `{"userId": ..., "exp": ...}` carried in an
HTTP-only cookie. Passwords are stored as werkzeug salted hashes.
"""

from __future__ import annotations

import logging
import time

import jwt
from fastapi import Request, Response
from werkzeug.security import check_password_hash, generate_password_hash

from ..config import Settings
from ..core.errors import AuthenticationError, InvalidTokenError

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


def issue_token(user_id: int, *, secret: str, ttl_seconds: int, now: float | None = None) -> str:
    issued = int(time.time() if now is None else now)
    payload = {"userId": int(user_id), "iat": issued, "exp": issued + int(ttl_seconds)}
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def decode_token(token: str, *, secret: str) -> int:
    """Return the user id inside a valid token; anything else is InvalidTokenError."""
    try:
        payload = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except jwt.PyJWTError as e:
        logger.debug("Token rejected: %s", e)
        raise InvalidTokenError() from e

    user_id = payload.get("userId")
    if not isinstance(user_id, int):
        raise InvalidTokenError()
    return user_id


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        max_age=settings.session_ttl_seconds,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.cookie_name,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


def current_user_id(request: Request) -> int:
    """FastAPI dependency: the authenticated user id, or AuthenticationError/InvalidTokenError."""
    settings: Settings = request.app.state.settings
    token = request.cookies.get(settings.cookie_name)
    if not token:
        raise AuthenticationError()
    return decode_token(token, secret=str(settings.jwt_secret_key))
