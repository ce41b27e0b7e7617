"""Quadrant assignment for the four board/grid classification modes."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

from unfric.core.config import DATE_BUCKET_POLICIES, settings
from unfric.services.clock import as_local
from unfric.services.task_status import classify
from unfric.services.time_window import suggest_time_of_day

if TYPE_CHECKING:
    from unfric.api.schemas.task import Task

QUADRANT_MODES: Dict[str, Dict[str, object]] = {
    "urgent-important": {
        "label": "Urgent × Important",
        "quadrants": [
            ("urgent-important", "URGENT & IMPORTANT"),
            ("urgent-not-important", "URGENT & NOT IMPORTANT"),
            ("not-urgent-important", "NOT URGENT & IMPORTANT"),
            ("not-urgent-not-important", "NOT URGENT & NOT IMPORTANT"),
        ],
    },
    "status": {
        "label": "Status",
        "quadrants": [
            ("overdue", "OVERDUE"),
            ("ongoing", "ONGOING"),
            ("upcoming", "UPCOMING"),
            ("completed", "COMPLETED"),
        ],
    },
    "date": {
        "label": "Date",
        "quadrants": [
            ("yesterday", "YESTERDAY"),
            ("today", "TODAY"),
            ("tomorrow", "TOMORROW"),
            ("week", "THIS WEEK"),
        ],
    },
    "time": {
        "label": "Time of Day",
        "quadrants": [
            ("morning", "MORNING"),
            ("afternoon", "AFTERNOON"),
            ("evening", "EVENING"),
            ("night", "NIGHT"),
        ],
    },
}


class UnknownQuadrantModeError(ValueError):
    """Raised when a caller asks for a mode the engine does not define."""


@dataclass
class BoardColumn:
    id: str
    title: str
    active: List["Task"] = field(default_factory=list)
    completed: List["Task"] = field(default_factory=list)


def quadrant_ids(mode: str) -> List[str]:
    return [quadrant_id for quadrant_id, _ in _mode_config(mode)["quadrants"]]


def urgency_quadrant(task: "Task") -> str:
    urgent = "urgent" if task.urgency == "high" else "not-urgent"
    important = "important" if task.importance == "high" else "not-important"
    return f"{urgent}-{important}"


def date_bucket(
    due_date: date | None,
    today: date,
    *,
    no_due_date_bucket: str | None = None,
) -> Optional[str]:
    if no_due_date_bucket is not None and no_due_date_bucket not in DATE_BUCKET_POLICIES:
        raise ValueError(f"Unknown no-due-date bucket: {no_due_date_bucket!r}")
    if due_date is None:
        policy = no_due_date_bucket or settings.no_due_date_bucket
        return None if policy == "exclude" else policy
    diff = (due_date - today).days
    if diff < 0:
        return "yesterday"
    if diff == 0:
        return "today"
    if diff == 1:
        return "tomorrow"
    return "week"


def time_of_day_bucket(task: "Task") -> str:
    if task.time_of_day:
        return task.time_of_day
    return suggest_time_of_day(task.due_time if task.due_date else None)


def quadrant_for(
    task: "Task",
    mode: str,
    now: datetime,
    *,
    tz_name: str | None = None,
    no_due_date_bucket: str | None = None,
) -> Optional[str]:
    """Return the single quadrant id `task` occupies under `mode`."""
    if mode == "urgent-important":
        return urgency_quadrant(task)
    if mode == "status":
        return classify(task, now, tz_name=tz_name)
    if mode == "date":
        today = as_local(now, tz_name).date()
        return date_bucket(task.due_date, today, no_due_date_bucket=no_due_date_bucket)
    if mode == "time":
        return time_of_day_bucket(task)
    raise UnknownQuadrantModeError(f"Unknown quadrant mode: {mode!r}")


def group_tasks(
    tasks: Iterable["Task"],
    mode: str,
    now: datetime,
    *,
    tz_name: str | None = None,
    no_due_date_bucket: str | None = None,
) -> tuple[List[BoardColumn], List["Task"]]:
    """
    Split tasks into ordered board columns for `mode`.

    Completed tasks go to each column's completed list. Tasks excluded by the
    no-due-date policy are returned separately as unassigned.
    """
    config = _mode_config(mode)
    columns = [BoardColumn(id=quadrant_id, title=title) for quadrant_id, title in config["quadrants"]]
    by_id = {column.id: column for column in columns}
    unassigned: List["Task"] = []

    for task in tasks:
        quadrant_id = quadrant_for(
            task,
            mode,
            now,
            tz_name=tz_name,
            no_due_date_bucket=no_due_date_bucket,
        )
        column = by_id.get(quadrant_id) if quadrant_id else None
        if column is None:
            unassigned.append(task)
            continue
        (column.completed if task.completed else column.active).append(task)

    return columns, unassigned


def _mode_config(mode: str) -> Dict[str, object]:
    config = QUADRANT_MODES.get(mode)
    if config is None:
        raise UnknownQuadrantModeError(f"Unknown quadrant mode: {mode!r}")
    return config
