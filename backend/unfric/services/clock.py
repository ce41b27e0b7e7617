"""Clock sources; the only place the engine reads wall-clock time."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol
from zoneinfo import ZoneInfo

from unfric.core.config import settings


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall-clock time in the configured timezone."""

    def __init__(self, tz_name: str | None = None) -> None:
        self.tz_name = tz_name or settings.timezone
        self._tz = ZoneInfo(self.tz_name)

    def now(self) -> datetime:
        return datetime.now(timezone.utc).astimezone(self._tz)


class FixedClock:
    """A clock pinned to one instant, for tests and replays."""

    def __init__(self, instant: datetime) -> None:
        self.instant = instant

    def now(self) -> datetime:
        return self.instant

    def advance(self, **delta) -> None:
        self.instant = self.instant + timedelta(**delta)


def as_local(now: datetime, tz_name: str | None = None) -> datetime:
    """
    Convert `now` to naive local wall time.

    Task dates and times are local wall-clock values, so comparisons happen on
    naive datetimes. Aware inputs are converted to the configured timezone
    first; naive inputs are assumed to already be local.
    """
    if now.tzinfo is None:
        return now
    return now.astimezone(ZoneInfo(tz_name or settings.timezone)).replace(tzinfo=None)
