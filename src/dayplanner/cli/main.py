# src/dayplanner/cli/main.py

"""
CLI entrypoints.

- `dayplanner`: console client. Initializes logging, builds ClientState,
  resumes the session, starts the timers and runs the REPL.
- `dayplanner-server`: serves the REST API with uvicorn.
"""

from __future__ import annotations

import asyncio
import logging

import uvicorn

from ..config import get_settings
from ..logging_setup import setup_logging
from .bootstrap import create_client_state, create_server_app
from .console import run_console_loop

logger = logging.getLogger(__name__)


def _configure_logging(settings, role: str) -> None:
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    log_file = setup_logging(role, log_dir=settings.data_dir, console_level=console_level)
    logger.debug("Logging %s to %s", role, log_file)


async def _run_client(settings) -> None:
    state = create_client_state(settings=settings)
    try:
        await state.start()
        await run_console_loop(state)
    finally:
        await state.aclose()


def main() -> None:
    settings = get_settings()
    _configure_logging(settings, "client")

    logger.info("Starting %s client against %s...", settings.app_name, settings.api_base_url)
    try:
        asyncio.run(_run_client(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    logger.info("Bye.")


def serve() -> None:
    settings = get_settings()
    _configure_logging(settings, "server")

    app = create_server_app(settings=settings)
    logger.info("Serving %s on %s:%s", settings.app_name, settings.server_host, settings.server_port)
    # log_config=None keeps uvicorn on the handlers installed by setup_logging.
    uvicorn.run(app, host=settings.server_host, port=settings.server_port, log_config=None)


if __name__ == "__main__":
    main()
