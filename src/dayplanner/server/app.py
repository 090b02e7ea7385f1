# src/dayplanner/server/app.py

"""
Server composition root.

Builds the FastAPI app, wires the SQLite stores onto `app.state`, and owns the
error boundary: taxonomy errors become `{"error", "code"}` JSON responses with
their status, request-validation errors become 400s, and anything unexpected
is logged and answered with a plain 500 (no traceback leaves the server).
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..config import Settings, get_settings
from ..core.errors import DayplannerError, ValidationFailure
from ..storage.task_store import TaskStore
from ..storage.user_store import UserStore
from . import auth_routes, task_routes

logger = logging.getLogger(__name__)


def _error_response(err: DayplannerError) -> JSONResponse:
    return JSONResponse(status_code=err.status_code, content=err.to_payload())


def create_app(
    settings: Settings | None = None,
    *,
    user_store: UserStore | None = None,
    task_store: TaskStore | None = None,
) -> FastAPI:
    """
    Create the API app from the provided settings.

    Stores are injectable for tests; by default both share `settings.db_path`.
    """
    if settings is None:
        settings = get_settings()

    if not settings.jwt_secret_key or not settings.jwt_secret_key.strip():
        raise RuntimeError("JWT secret is not set. Set DAYPLANNER_JWT_SECRET_KEY in your .env.")

    if settings.is_production and not settings.cookie_secure:
        logger.warning("Production without secure cookies: the session token will travel over plain HTTP.")

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.state.user_store = user_store or UserStore(settings.db_path)
    app.state.task_store = task_store or TaskStore(settings.db_path)

    @app.exception_handler(DayplannerError)
    async def _handle_app_error(request: Request, exc: DayplannerError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        else:
            logger.info("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.code)
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def _handle_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        detail = errors[0].get("msg") if errors else None
        logger.info("%s %s -> invalid body: %s", request.method, request.url.path, detail)
        return _error_response(ValidationFailure(f"Invalid request: {detail}" if detail else None))

    @app.middleware("http")
    async def _unexpected_errors(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=500,
                content={"error": "Internal server error", "code": "server_error"},
            )

    @app.get("/")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(auth_routes.router)
    app.include_router(task_routes.router)

    logger.info("API app ready env=%s db=%s", settings.environment, settings.db_path)
    return app
