"""Time-of-day parsing and task window resolution shared by the engine."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING, Any, Optional, Union

from unfric.core.config import settings

if TYPE_CHECKING:
    from unfric.api.schemas.task import Task

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2}(?:\.\d+)?)?$")


@dataclass(frozen=True)
class AllDayWindow:
    """A dated task without a usable start or end time."""

    day: date

    @property
    def start_at(self) -> datetime:
        return datetime.combine(self.day, time())

    @property
    def end_at(self) -> datetime:
        return self.start_at + timedelta(days=1)


@dataclass(frozen=True)
class TimedWindow:
    day: date
    start_minute: int      # minutes after midnight of `day`
    end_minute: int        # may exceed MINUTES_PER_DAY after a midnight wrap
    duration_src: str      # "end_time" | "default" | "clamped"

    @property
    def duration_minutes(self) -> int:
        return self.end_minute - self.start_minute

    @property
    def wraps_midnight(self) -> bool:
        return self.end_minute > MINUTES_PER_DAY

    @property
    def start_at(self) -> datetime:
        return datetime.combine(self.day, time()) + timedelta(minutes=self.start_minute)

    @property
    def end_at(self) -> datetime:
        return datetime.combine(self.day, time()) + timedelta(minutes=self.end_minute)


TaskWindow = Union[AllDayWindow, TimedWindow]


def normalize_hhmm(value: Any) -> Optional[str]:
    """Return a canonical HH:MM string, or None when the value is unusable."""
    if value is None:
        return None
    if isinstance(value, time):
        return f"{value.hour:02d}:{value.minute:02d}"
    if not isinstance(value, str):
        return None
    match = _HHMM_RE.match(value.strip())
    if not match:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return f"{hour:02d}:{minute:02d}"


def parse_hhmm(value: Any) -> Optional[int]:
    """Minutes after midnight for an HH:MM value; None if absent or malformed."""
    normalized = normalize_hhmm(value)
    if normalized is None:
        if value not in (None, ""):
            logger.debug("Ignoring malformed time value %r", value)
        return None
    hours, minutes = normalized.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_hhmm(total_minutes: int) -> str:
    """Format minutes as a wall-clock label, wrapping into the 24h day."""
    wrapped = total_minutes % MINUTES_PER_DAY
    return f"{wrapped // 60:02d}:{wrapped % 60:02d}"


def format_duration(total_minutes: int | None) -> str:
    """Human label such as '1h 30m', '2h' or '45m'; empty for non-positive spans."""
    if not total_minutes or total_minutes <= 0:
        return ""
    hours, minutes = divmod(int(total_minutes), 60)
    if hours and minutes:
        return f"{hours}h {minutes}m"
    if hours:
        return f"{hours}h"
    return f"{minutes}m"


def overlaps(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Half-open interval overlap test for [start_a, end_a) and [start_b, end_b)."""
    return start_a < end_b and start_b < end_a


def resolve_span(
    start_minute: Optional[int],
    end_minute: Optional[int],
    *,
    default_duration_min: int | None = None,
    min_duration_min: int | None = None,
) -> tuple[int, int, str]:
    """Apply the default-duration, midnight-wrap and clamp rules to a minute range."""
    default_duration = int(default_duration_min or settings.default_duration_minutes)
    min_duration = int(min_duration_min or settings.min_duration_minutes)

    start = start_minute if start_minute is not None else 0
    if end_minute is None:
        return start, start + default_duration, "default"

    end = end_minute
    if end < start:
        end += MINUTES_PER_DAY
    if end - start <= 0:
        logger.debug("Non-positive span %s-%s; clamping to %s minutes", start, end, min_duration)
        return start, start + min_duration, "clamped"
    return start, end, "end_time"


def resolve_window(
    task: "Task",
    *,
    default_duration_min: int | None = None,
    min_duration_min: int | None = None,
) -> Optional[TaskWindow]:
    """
    Resolve the task's effective window on its due date.

    Returns None for tasks without a due date (their time fields are ignored),
    an AllDayWindow when neither time parses, otherwise a TimedWindow.
    """
    if task.due_date is None:
        return None

    start_minute = parse_hhmm(task.due_time)
    end_minute = parse_hhmm(task.end_time)
    if start_minute is None and end_minute is None:
        return AllDayWindow(day=task.due_date)

    start, end, source = resolve_span(
        start_minute,
        end_minute,
        default_duration_min=default_duration_min,
        min_duration_min=min_duration_min,
    )
    return TimedWindow(day=task.due_date, start_minute=start, end_minute=end, duration_src=source)


def suggest_time_of_day(due_time: Any) -> str:
    """Map a due time's hour into morning/afternoon/evening/night."""
    minutes = parse_hhmm(due_time)
    if minutes is None:
        return "morning"
    hour = minutes // 60
    if settings.morning_start_hour <= hour < settings.afternoon_start_hour:
        return "morning"
    if settings.afternoon_start_hour <= hour < settings.evening_start_hour:
        return "afternoon"
    if settings.evening_start_hour <= hour < settings.night_start_hour:
        return "evening"
    return "night"
