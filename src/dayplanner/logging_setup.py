# src/dayplanner/logging_setup.py

"""
Logging for the two dayplanner processes.

The console client and the API server each get their own log file under the
data directory (`client.log`, `server.log`) so their DEBUG streams never
interleave. The console handler is filtered per role: the client REPL stays
readable while reminders tick every few seconds, the server shows uvicorn's
startup and access lines.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

ROLES = ("client", "server")

# Console floor by logger-name prefix; the longest matching prefix wins and
# loggers matching nothing need ERROR.
_CONSOLE_FLOORS: dict[str, dict[str, int]] = {
    "client": {
        "dayplanner": logging.NOTSET,
        "dayplanner.core.polling": logging.WARNING,
        # The REPL prints every reminder itself.
        "dayplanner.client.reminders": logging.WARNING,
        "dayplanner.server": logging.ERROR,
    },
    "server": {
        "dayplanner": logging.NOTSET,
        "uvicorn.error": logging.INFO,
        "uvicorn.access": logging.INFO,
        "py.warnings": logging.WARNING,
    },
}

# Third-party loggers capped at the logger itself (so they skip the file too).
_QUIET: dict[str, dict[str, int]] = {
    "client": {"httpx": logging.WARNING, "httpcore": logging.WARNING},
    "server": {"httpcore": logging.WARNING, "multipart": logging.WARNING},
}


class _ConsoleFloorFilter(logging.Filter):
    def __init__(self, floors: dict[str, int]) -> None:
        super().__init__()
        # Longest prefixes first so "dayplanner.core.polling" beats "dayplanner".
        self._floors = sorted(floors.items(), key=lambda kv: len(kv[0]), reverse=True)

    def floor_for(self, name: str) -> int:
        for prefix, level in self._floors:
            if name == prefix or name.startswith(prefix + "."):
                return level
        return logging.ERROR

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= self.floor_for(record.name)


def setup_logging(
    role: str,
    *,
    log_dir: str | Path = ".local/dayplanner",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install console + file handlers on the root logger for `role`
    ("client" or "server") and return the log file path.

    Replaces any handlers already on the root logger; call once at startup.
    """
    if role not in ROLES:
        raise ValueError(f"unknown logging role: {role!r}")

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{role}.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt=f"%(asctime)s.%(msecs)03d {role} %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleFloorFilter(_CONSOLE_FLOORS[role]))
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)

    for name, level in _QUIET[role].items():
        logging.getLogger(name).setLevel(level)

    return log_file
