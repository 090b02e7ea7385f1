# src/dayplanner/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object shared by the server and the console client.
- No secrets required at import time (the server checks the JWT key on start).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "DAYPLANNER"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    environment: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path
    session_path: Path

    # ---- Server / auth ----
    jwt_secret_key: str | None
    session_ttl_seconds: int
    cookie_name: str
    cookie_secure: bool
    server_host: str
    server_port: int

    # ---- Client ----
    api_base_url: str
    request_timeout_seconds: float
    session_check_interval_seconds: float
    reminder_interval_seconds: float

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "dayplanner")
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        environment = _env(_k("ENV"), "development").strip().lower() or "development"

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/dayplanner"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "dayplanner.sqlite3")
        session_path = _env_path(_k("SESSION_PATH"), data_dir / "session.json")

        # Accept the plain JWT_SECRET_KEY too, so an existing .env keeps working.
        jwt_secret_key = _first_env(_k("JWT_SECRET_KEY"), "JWT_SECRET_KEY", default=None)

        # One window for both the signed cookie and the client's local session mirror.
        session_ttl_seconds = max(60, _env_int(_k("SESSION_TTL_SECONDS"), 60 * 60))
        cookie_name = _env(_k("COOKIE_NAME"), "token")
        cookie_secure = _env_bool(_k("COOKIE_SECURE"), environment == "production")

        server_host = _env(_k("HOST"), "127.0.0.1")
        server_port = _env_int(_k("PORT"), 8000)

        api_base_url = _env(_k("API_URL"), f"http://{server_host}:{server_port}").rstrip("/")
        request_timeout_seconds = _env_float(_k("REQUEST_TIMEOUT_SECONDS"), 10.0)
        session_check_interval_seconds = _env_float(_k("SESSION_CHECK_INTERVAL_SECONDS"), 60.0)
        reminder_interval_seconds = _env_float(_k("REMINDER_INTERVAL_SECONDS"), 5.0)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            environment=environment,
            data_dir=data_dir,
            db_path=db_path,
            session_path=session_path,
            jwt_secret_key=jwt_secret_key,
            session_ttl_seconds=session_ttl_seconds,
            cookie_name=cookie_name,
            cookie_secure=cookie_secure,
            server_host=server_host,
            server_port=server_port,
            api_base_url=api_base_url,
            request_timeout_seconds=request_timeout_seconds,
            session_check_interval_seconds=session_check_interval_seconds,
            reminder_interval_seconds=reminder_interval_seconds,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
