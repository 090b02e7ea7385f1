# src/dayplanner/client/api.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.errors import DayplannerError, NetworkOrServerFailure, error_from_response
from ..core.models import Task, TaskDraft, User, changes_to_json

logger = logging.getLogger(__name__)


class ApiClient:
    """
    Thin async client for the REST endpoints.

    The session cookie lives in the underlying httpx cookie jar, so every call
    after login/register is scoped to that user. Non-2xx answers are raised as
    taxonomy errors (see core.errors); transport and decoding failures become
    NetworkOrServerFailure. No retries.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @classmethod
    def from_settings(cls, settings, *, transport: httpx.AsyncBaseTransport | None = None) -> ApiClient:
        return cls(
            settings.api_base_url,
            timeout_seconds=settings.request_timeout_seconds,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    # ---- low-level ----

    async def _request(self, method: str, path: str, *, json: Any = None) -> Any:
        try:
            resp = await self._http.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %r", method, path, e)
            raise NetworkOrServerFailure(f"Could not reach the server: {e.__class__.__name__}") from e

        if resp.is_success:
            try:
                return resp.json()
            except ValueError as e:
                raise NetworkOrServerFailure("Malformed response from server") from e

        try:
            payload = resp.json()
        except ValueError:
            payload = None
        err = error_from_response(resp.status_code, payload)
        logger.debug("%s %s -> %s %s", method, path, resp.status_code, err.code)
        raise err

    # ---- auth ----

    async def login(self, username: str, password: str) -> User:
        data = await self._request("POST", "/api/auth/login", json={"username": username, "password": password})
        return User.from_json(data)

    async def register(self, username: str, password: str) -> User:
        data = await self._request(
            "POST", "/api/auth/register", json={"username": username, "password": password}
        )
        return User.from_json(data)

    async def logout(self) -> None:
        try:
            await self._request("POST", "/api/auth/logout")
        finally:
            # The server clears the cookie too; drop ours even if the call failed.
            self._http.cookies.clear()

    async def current_user(self) -> User:
        return User.from_json(await self._request("GET", "/api/user"))

    # ---- tasks ----

    async def list_tasks(self) -> list[Task]:
        data = await self._request("GET", "/api/tasks")
        if not isinstance(data, list):
            raise NetworkOrServerFailure("Expected a list of tasks")
        return [_task(item) for item in data]

    async def create_task(self, draft: TaskDraft) -> Task:
        return _task(await self._request("POST", "/api/tasks", json=draft.to_json()))

    async def update_task(self, task_id: int, changes: dict[str, Any]) -> Task:
        body = changes_to_json(changes)
        return _task(await self._request("PUT", f"/api/tasks/{int(task_id)}", json=body))

    async def delete_task(self, task_id: int) -> None:
        await self._request("DELETE", f"/api/tasks/{int(task_id)}")


def _task(data: Any) -> Task:
    try:
        return Task.from_json(data)
    except (KeyError, TypeError, ValueError) as e:
        raise NetworkOrServerFailure("Malformed task in server response") from e


def describe_error(exc: BaseException, fallback: str) -> str:
    """Human-readable message for the managers' error field."""
    if isinstance(exc, DayplannerError):
        return exc.message
    return fallback
