# src/dayplanner/client/session.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ..core.errors import (
    AuthenticationError,
    DayplannerError,
    NetworkOrServerFailure,
    UsernameTakenError,
    ValidationFailure,
)
from ..core.models import User
from ..core.ports import AuthApi, SessionStorage
from .session_store import SessionRecord

logger = logging.getLogger(__name__)

DEFAULT_SESSION_SECONDS = 60 * 60

UserListener = Callable[[User | None], object]


class SessionManager:
    """
    Current identity + its validity window.

    The identity is mirrored to local storage with the time it was issued.
    After `session_seconds` the local session is treated as expired and the
    manager logs out. Failures are reported through `error`/`failure`, never
    raised to the caller.
    """

    def __init__(
        self,
        api: AuthApi,
        storage: SessionStorage,
        *,
        session_seconds: float = DEFAULT_SESSION_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._api = api
        self._storage = storage
        self._session_seconds = float(session_seconds)
        self._clock = clock
        self._listeners: list[UserListener] = []

        self.user: User | None = None
        self.is_loading = False
        self.error: str | None = None
        self.failure: DayplannerError | None = None

    # ---- observers ----

    def add_listener(self, callback: UserListener) -> None:
        """Called with the new identity (or None) whenever it changes."""
        self._listeners.append(callback)

    def _set_user(self, user: User | None) -> None:
        changed = user != self.user
        self.user = user
        if not changed:
            return
        for cb in list(self._listeners):
            try:
                cb(user)
            except Exception:
                logger.exception("Session listener failed")

    def _fail(self, err: DayplannerError) -> None:
        self.failure = err
        self.error = err.message

    def _reset_error(self) -> None:
        self.error = None
        self.failure = None

    def _remember(self, user: User) -> None:
        self._storage.save(SessionRecord(user=user, issued_at=self._clock()))
        self._set_user(user)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    # ---- operations ----

    async def login(self, username: str, password: str) -> bool:
        self.is_loading = True
        self._reset_error()
        try:
            user = await self._api.login(username, password)
        except AuthenticationError as e:
            logger.info("Login failed for %s: %s", username, e)
            self._fail(type(e)("Invalid username or password"))
            return False
        except DayplannerError as e:
            logger.warning("Login error: %s", e)
            self._fail(e)
            return False
        finally:
            self.is_loading = False

        self._remember(user)
        logger.info("Logged in as %s (id=%s)", user.username, user.id)
        return True

    async def register(self, username: str, password: str) -> bool:
        self.is_loading = True
        self._reset_error()
        try:
            user = await self._api.register(username, password)
        except UsernameTakenError as e:
            logger.info("Registration rejected: %s", e)
            self._fail(e)
            return False
        except ValidationFailure as e:
            self._fail(e)
            return False
        except DayplannerError as e:
            logger.warning("Registration error: %s", e)
            self._fail(NetworkOrServerFailure("Registration failed"))
            return False
        finally:
            self.is_loading = False

        self._remember(user)
        logger.info("Registered %s (id=%s)", user.username, user.id)
        return True

    async def logout(self) -> None:
        """Ask the server to drop the cookie; local state is cleared regardless."""
        self.is_loading = True
        try:
            await self._api.logout()
        except DayplannerError as e:
            logger.warning("Logout request failed (clearing local session anyway): %s", e)
            self._fail(NetworkOrServerFailure("An error occurred during logout"))
        finally:
            self._storage.clear()
            self._set_user(None)
            self.is_loading = False

    async def check_session_expiration(self) -> bool:
        """
        True if a stored session is still inside its window (identity restored).
        An expired session forces a logout.
        """
        record = self._storage.load()
        if record is None:
            return False

        age = self._clock() - record.issued_at
        if age > self._session_seconds:
            logger.info("Local session expired (age=%.0fs), logging out", age)
            await self.logout()
            return False

        self._set_user(record.user)
        return True

    async def start(self) -> None:
        """
        Restore the identity on startup.

        If the local session is gone or expired, ask the server: its HTTP-only
        cookie may still be valid even though the local mirror was lost.
        """
        if await self.check_session_expiration():
            return
        try:
            user = await self._api.current_user()
        except DayplannerError as e:
            logger.debug("No server session to resume: %s", e)
            return
        self._remember(user)
        logger.info("Resumed server session for %s", user.username)
