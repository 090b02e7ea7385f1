# src/dayplanner/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into ClientState (HTTP client, session file,
  managers, reminder engine) or into the API app (SQLite stores).
"""

from __future__ import annotations

import logging

import httpx
from fastapi import FastAPI

from ..client.api import ApiClient
from ..client.reminders import ReminderEngine
from ..client.session import SessionManager
from ..client.session_store import FileSessionStore
from ..client.tasks import TaskManager
from ..config import get_settings
from ..core.state import ClientState
from ..server.app import create_app

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.session_path.parent.mkdir(parents=True, exist_ok=True)


def create_client_state(
    *,
    settings=None,
    transport: httpx.AsyncBaseTransport | None = None,
    api: ApiClient | None = None,
) -> ClientState:
    """
    Create ClientState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    api = api or ApiClient.from_settings(settings, transport=transport)
    session = SessionManager(
        api,
        FileSessionStore(settings.session_path),
        session_seconds=settings.session_ttl_seconds,
    )
    tasks = TaskManager(api, session)
    reminders = ReminderEngine(lambda: tasks.tasks)

    return ClientState(
        settings=settings,
        api=api,
        session=session,
        tasks=tasks,
        reminders=reminders,
    )


def create_server_app(*, settings=None) -> FastAPI:
    if settings is None:
        settings = get_settings()
    _ensure_local_dirs(settings)
    return create_app(settings)
