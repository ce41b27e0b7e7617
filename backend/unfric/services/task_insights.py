"""Aggregation helpers for the task summary strip and insights panel."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Dict, Sequence

from unfric.services.clock import as_local
from unfric.services.quadrants import date_bucket, quadrant_ids, time_of_day_bucket, urgency_quadrant
from unfric.services.task_status import OVERDUE, classify

if TYPE_CHECKING:
    from unfric.api.schemas.task import Task

DEFAULT_FOCUS_TIME_OF_DAY = "morning"


@dataclass
class TaskInsights:
    total: int = 0
    completed: int = 0
    completion_rate: int = 0
    overdue: int = 0
    due_today: int = 0
    completed_today: int = 0
    total_focus_minutes: int = 0
    focus_time_of_day: str = DEFAULT_FOCUS_TIME_OF_DAY
    by_quadrant: Dict[str, int] = field(default_factory=dict)
    by_time_of_day: Dict[str, int] = field(default_factory=dict)


def summarize_tasks(
    tasks: Sequence["Task"],
    now: datetime,
    *,
    tz_name: str | None = None,
    no_due_date_bucket: str | None = None,
) -> TaskInsights:
    """
    Count tasks the way the summary widgets present them.

    "Today" means the task's date bucket is today, so undated tasks count when
    the no-due-date policy files them there. due_today and overdue only count
    open tasks; completion_rate is a whole percentage of all tasks.
    focus_time_of_day is the most common time of day among today's open
    tasks, earliest-seen first on ties.
    """
    today = as_local(now, tz_name).date()
    insights = TaskInsights(
        by_quadrant={quadrant_id: 0 for quadrant_id in quadrant_ids("urgent-important")},
        by_time_of_day={bucket: 0 for bucket in quadrant_ids("time")},
    )
    focus_counts: Dict[str, int] = {}

    for task in tasks:
        insights.total += 1
        insights.total_focus_minutes += max(0, task.total_focus_minutes)
        insights.by_quadrant[urgency_quadrant(task)] += 1
        time_of_day = time_of_day_bucket(task)
        insights.by_time_of_day[time_of_day] += 1

        is_today = date_bucket(task.due_date, today, no_due_date_bucket=no_due_date_bucket) == "today"
        if task.completed:
            insights.completed += 1
            if is_today:
                insights.completed_today += 1
            continue
        if is_today:
            insights.due_today += 1
            focus_counts[time_of_day] = focus_counts.get(time_of_day, 0) + 1
        if classify(task, now, tz_name=tz_name) == OVERDUE:
            insights.overdue += 1

    if insights.total:
        insights.completion_rate = round(insights.completed / insights.total * 100)
    if focus_counts:
        insights.focus_time_of_day = max(focus_counts, key=focus_counts.get)
    return insights
