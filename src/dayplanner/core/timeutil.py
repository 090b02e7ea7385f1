# src/dayplanner/core/timeutil.py

from __future__ import annotations

from datetime import UTC, date, datetime, tzinfo


def parse_day(raw: str | date) -> date:
    """Accept `YYYY-MM-DD` or a full ISO timestamp; keep only the calendar day."""
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    s = str(raw).strip()
    if not s:
        raise ValueError("empty date")
    if len(s) == 10:
        return date.fromisoformat(s)
    return datetime.fromisoformat(s).date()


def parse_instant(raw: str | datetime) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    dt = raw if isinstance(raw, datetime) else datetime.fromisoformat(str(raw).strip())
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def format_instant(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat(timespec="seconds").replace("+00:00", "Z")


def to_epoch(dt: datetime) -> float:
    return parse_instant(dt).timestamp()


def from_epoch(ts: float) -> datetime:
    return datetime.fromtimestamp(float(ts), UTC)


def floating_to_local(instant: datetime, local_tz: tzinfo | None = None) -> datetime:
    """
    Read the UTC wall-clock digits of `instant` as a time in `local_tz`.

    Reminders are entered as local wall-clock times and travel as UTC strings
    without conversion, so "09:00Z" means 09:00 wherever the client runs.

    The UTC offset is the one in force on that date, not today's.
    `local_tz=None` means the system zone; an injected zone should be a
    `zoneinfo.ZoneInfo` (a fixed-offset `timezone` has no DST rules).
    """
    wall = parse_instant(instant).replace(tzinfo=None)
    if local_tz is None:
        return wall.astimezone()
    return wall.replace(tzinfo=local_tz)
