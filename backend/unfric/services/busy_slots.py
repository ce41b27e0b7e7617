"""Busy-slot lookup used to warn about conflicting schedules."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import TYPE_CHECKING, Iterable, List, Optional

from unfric.services.time_window import (
    MINUTES_PER_DAY,
    TimedWindow,
    minutes_to_hhmm,
    overlaps,
    parse_hhmm,
    resolve_span,
    resolve_window,
)

if TYPE_CHECKING:
    from unfric.api.schemas.task import Task


@dataclass(frozen=True)
class BusySlot:
    task_id: str
    title: str
    start: str
    end: str
    start_minute: int      # relative to midnight of the requested day
    end_minute: int

    def conflicts_with(self, other: "BusySlot") -> bool:
        return overlaps(self.start_minute, self.end_minute, other.start_minute, other.end_minute)


def busy_slots(
    tasks: Iterable["Task"],
    day: date,
    exclude_task_id: Optional[str] = None,
) -> List[BusySlot]:
    """
    Timed intervals occupied on `day`, excluding the task being edited.

    Windows from the previous day that wrap past midnight are included with
    negative start minutes so overlap checks stay correct across the wrap.
    """
    previous_day = day - timedelta(days=1)
    slots: List[BusySlot] = []
    for task in tasks:
        if exclude_task_id is not None and task.id == exclude_task_id:
            continue
        window = resolve_window(task)
        if not isinstance(window, TimedWindow):
            continue
        if window.day == day:
            shift = 0
        elif window.day == previous_day and window.wraps_midnight:
            shift = -MINUTES_PER_DAY
        else:
            continue
        slots.append(
            BusySlot(
                task_id=task.id,
                title=task.title,
                start=minutes_to_hhmm(window.start_minute),
                end=minutes_to_hhmm(window.end_minute),
                start_minute=window.start_minute + shift,
                end_minute=window.end_minute + shift,
            )
        )
    slots.sort(key=lambda slot: slot.start_minute)
    return slots


def find_conflicts(slots: Iterable[BusySlot], start: str, end: str | None = None) -> List[BusySlot]:
    """
    Slots overlapping a candidate HH:MM range on the same day.

    The candidate follows the task window rules: a missing end uses the default
    duration and an end before the start wraps past midnight. An unparseable
    start yields no conflicts.
    """
    start_minute = parse_hhmm(start)
    if start_minute is None:
        return []
    candidate_start, candidate_end, _ = resolve_span(start_minute, parse_hhmm(end))
    return [
        slot
        for slot in slots
        if overlaps(candidate_start, candidate_end, slot.start_minute, slot.end_minute)
    ]
