"""Task list filtering and sorting for the all-tasks view."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING, List, Optional, Sequence

from unfric.services.clock import as_local
from unfric.services.task_status import OVERDUE, classify

if TYPE_CHECKING:
    from unfric.api.schemas.task import Task

PRIORITY_RANK = {"high": 0, "medium": 1, "low": 2}
SORT_OPTIONS = ("newest", "oldest", "priority", "due_date")
DATE_TAGS = ("all", "today", "week", "overdue")


def filter_tasks(
    tasks: Sequence["Task"],
    now: datetime,
    *,
    search: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    date_tag: str = "all",
    tz_name: str | None = None,
) -> List["Task"]:
    """Apply search, status, priority and date-tag filters in that order."""
    if date_tag not in DATE_TAGS:
        raise ValueError(f"Unknown date tag: {date_tag!r}")

    result = list(tasks)
    query = (search or "").strip().lower()
    if query:
        result = [task for task in result if query in task.title.lower()]

    if status:
        result = [task for task in result if classify(task, now, tz_name=tz_name) == status]

    if priority:
        result = [task for task in result if task.priority == priority]

    today = as_local(now, tz_name).date()
    if date_tag == "today":
        result = [task for task in result if task.due_date == today]
    elif date_tag == "week":
        week_end = today + timedelta(days=7)
        result = [task for task in result if task.due_date and today <= task.due_date <= week_end]
    elif date_tag == "overdue":
        result = [task for task in result if classify(task, now, tz_name=tz_name) == OVERDUE]

    return result


def sort_tasks(tasks: Sequence["Task"], sort_by: str = "newest") -> List["Task"]:
    """Stable sort; tasks missing the sort key always go last."""
    if sort_by == "priority":
        return sorted(tasks, key=lambda task: PRIORITY_RANK.get(task.priority, 1))
    if sort_by == "due_date":
        return sorted(tasks, key=lambda task: (task.due_date is None, task.due_date or datetime.min.date()))
    if sort_by == "oldest":
        return sorted(tasks, key=lambda task: (task.created_at is None, _created_key(task)))
    if sort_by == "newest":
        return sorted(tasks, key=lambda task: (task.created_at is None, -_created_key(task)))
    raise ValueError(f"Unknown sort option: {sort_by!r}")


def _created_key(task: "Task") -> float:
    return task.created_at.timestamp() if task.created_at else 0.0
