"""24-hour timeline layout with variable-height hour rows."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from unfric.core.config import settings
from unfric.services.clock import as_local
from unfric.services.task_status import ONGOING, classify, remaining_minutes
from unfric.services.time_window import (
    MINUTES_PER_DAY,
    AllDayWindow,
    TimedWindow,
    format_duration,
    overlaps,
    resolve_window,
)

if TYPE_CHECKING:
    from unfric.api.schemas.task import Task

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24


@dataclass(frozen=True)
class HourRow:
    hour: int
    top: float
    height: float
    active: bool


@dataclass(frozen=True)
class TimelineEntry:
    task_id: str
    title: str
    start_minute: int
    end_minute: int                 # clipped to the end of the day
    top_offset: float
    height: float
    status: str
    remaining_minutes: Optional[int]
    overlaps_with: Tuple[str, ...]
    continues_next_day: bool
    duration_label: str


@dataclass(frozen=True)
class TimelineLayout:
    day: date
    compact: bool
    total_height: float
    hour_rows: Tuple[HourRow, ...]
    entries: Tuple[TimelineEntry, ...]
    all_day_task_ids: Tuple[str, ...]
    now_offset: Optional[float]

    def offset_for_minute(self, minute: float) -> float:
        heights = [row.height for row in self.hour_rows]
        tops = [row.top for row in self.hour_rows] + [self.total_height]
        return offset_for_minute(minute, heights, tops)


def active_hours(spans: Sequence[Tuple[int, int]]) -> List[bool]:
    """Flag every hour row overlapped by at least one [start, end) span."""
    active = [False] * HOURS_PER_DAY
    for start, end in spans:
        start = max(0, start)
        end = min(MINUTES_PER_DAY, end)
        if end <= start:
            continue
        for hour in range(start // 60, (end - 1) // 60 + 1):
            active[hour] = True
    return active


def row_heights(
    active: Sequence[bool],
    compact: bool,
    *,
    hour_height: float | None = None,
    compact_hour_height: float | None = None,
) -> List[float]:
    full = float(hour_height if hour_height is not None else settings.hour_height)
    small = float(compact_hour_height if compact_hour_height is not None else settings.compact_hour_height)
    if not compact:
        return [full] * HOURS_PER_DAY
    return [full if is_active else small for is_active in active]


def row_tops(heights: Sequence[float]) -> List[float]:
    """Prefix sums of row heights; the final element is the total day height."""
    tops = [0.0]
    for height in heights:
        tops.append(tops[-1] + height)
    return tops


def offset_for_minute(minute: float, heights: Sequence[float], tops: Sequence[float]) -> float:
    """Vertical offset of a minute-of-day, proportional within its hour row."""
    minute = max(0.0, min(float(MINUTES_PER_DAY), float(minute)))
    if minute >= MINUTES_PER_DAY:
        return tops[HOURS_PER_DAY]
    hour = int(minute // 60)
    fraction = (minute - hour * 60) / 60
    return tops[hour] + heights[hour] * fraction


def layout_day(
    tasks: Sequence["Task"],
    day: date,
    now: datetime,
    compact: bool = False,
    *,
    hour_height: float | None = None,
    compact_hour_height: float | None = None,
    tz_name: str | None = None,
) -> TimelineLayout:
    """
    Lay out the day's timed tasks on a 24-row timeline.

    Tasks whose due date is not `day` are ignored; dated tasks without a usable
    time are reported in `all_day_task_ids`. Concurrent tasks are not
    reflowed, each entry lists the ids it overlaps instead.
    """
    placed: List[Tuple["Task", TimedWindow]] = []
    all_day: List[str] = []
    for task in tasks:
        if task.due_date != day:
            continue
        window = resolve_window(task)
        if isinstance(window, AllDayWindow):
            all_day.append(task.id)
        elif isinstance(window, TimedWindow):
            placed.append((task, window))

    # stable: ties keep input order
    placed.sort(key=lambda item: item[1].start_minute)

    spans = [(window.start_minute, window.end_minute) for _, window in placed]
    active = active_hours(spans)
    heights = row_heights(
        active,
        compact,
        hour_height=hour_height,
        compact_hour_height=compact_hour_height,
    )
    tops = row_tops(heights)

    entries: List[TimelineEntry] = []
    for index, (task, window) in enumerate(placed):
        end_clipped = min(window.end_minute, MINUTES_PER_DAY)
        top = offset_for_minute(window.start_minute, heights, tops)
        bottom = offset_for_minute(end_clipped, heights, tops)
        overlapping = tuple(
            other.id
            for other_index, (other, other_window) in enumerate(placed)
            if other_index != index
            and overlaps(
                window.start_minute,
                window.end_minute,
                other_window.start_minute,
                other_window.end_minute,
            )
        )
        status = classify(task, now, tz_name=tz_name)
        entries.append(
            TimelineEntry(
                task_id=task.id,
                title=task.title,
                start_minute=window.start_minute,
                end_minute=end_clipped,
                top_offset=top,
                height=bottom - top,
                status=status,
                remaining_minutes=remaining_minutes(task, now, tz_name=tz_name) if status == ONGOING else None,
                overlaps_with=overlapping,
                continues_next_day=window.wraps_midnight,
                duration_label=format_duration(window.duration_minutes),
            )
        )

    local_now = as_local(now, tz_name)
    now_offset = None
    if local_now.date() == day:
        now_minute = local_now.hour * 60 + local_now.minute + local_now.second / 60
        now_offset = offset_for_minute(now_minute, heights, tops)

    hour_rows = tuple(
        HourRow(hour=hour, top=tops[hour], height=heights[hour], active=active[hour])
        for hour in range(HOURS_PER_DAY)
    )
    logger.debug(
        "Timeline layout day=%s compact=%s placed=%s all_day=%s total_height=%.1f",
        day.isoformat(),
        compact,
        len(entries),
        len(all_day),
        tops[HOURS_PER_DAY],
    )
    return TimelineLayout(
        day=day,
        compact=compact,
        total_height=tops[HOURS_PER_DAY],
        hour_rows=hour_rows,
        entries=tuple(entries),
        all_day_task_ids=tuple(all_day),
        now_offset=now_offset,
    )
