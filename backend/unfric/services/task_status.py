"""Temporal status classification for tasks."""
from __future__ import annotations

import math
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from unfric.services.clock import as_local
from unfric.services.time_window import AllDayWindow, resolve_window

if TYPE_CHECKING:
    from unfric.api.schemas.task import Task

OVERDUE = "overdue"
ONGOING = "ongoing"
UPCOMING = "upcoming"
COMPLETED = "completed"

STATUSES = (OVERDUE, ONGOING, UPCOMING, COMPLETED)


def classify(task: "Task", now: datetime, *, tz_name: str | None = None) -> str:
    """
    Classify a task against `now`; the first matching rule wins.

    completed flag > no due date (upcoming) > inside [start, end) (ongoing)
    > end at or before now (overdue) > upcoming. A date without times is never
    ongoing: it stays upcoming until its day is over.
    """
    if task.completed:
        return COMPLETED

    window = resolve_window(task)
    if window is None:
        return UPCOMING

    local_now = as_local(now, tz_name)
    if isinstance(window, AllDayWindow):
        return OVERDUE if window.end_at <= local_now else UPCOMING
    if window.start_at <= local_now < window.end_at:
        return ONGOING
    if window.end_at <= local_now:
        return OVERDUE
    return UPCOMING


def remaining_minutes(task: "Task", now: datetime, *, tz_name: str | None = None) -> Optional[int]:
    """Whole minutes (rounded up) left in an ongoing task's window, else None."""
    if classify(task, now, tz_name=tz_name) != ONGOING:
        return None
    window = resolve_window(task)
    seconds_left = (window.end_at - as_local(now, tz_name)).total_seconds()
    return max(0, math.ceil(seconds_left / 60))
