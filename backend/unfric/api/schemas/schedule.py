"""Schemas for timeline layout and busy-slot endpoints."""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel

from unfric.api.schemas.task import Status, TaskBatchRequest


class TimelineRequest(TaskBatchRequest):
    day: date
    compact: bool = False


class HourRowPayload(BaseModel):
    hour: int
    top: float
    height: float
    active: bool


class TimelineEntryPayload(BaseModel):
    task_id: str
    title: str
    start_minute: int
    end_minute: int
    top_offset: float
    height: float
    status: Status
    remaining_minutes: Optional[int] = None
    overlaps_with: List[str]
    continues_next_day: bool
    duration_label: str


class TimelineResponse(BaseModel):
    day: date
    compact: bool
    now: datetime
    now_offset: Optional[float] = None
    total_height: float
    hour_rows: List[HourRowPayload]
    entries: List[TimelineEntryPayload]
    all_day_task_ids: List[str]
    request_id: str


class BusySlotsRequest(TaskBatchRequest):
    day: date
    exclude_task_id: Optional[str] = None
    start: Optional[str] = None
    end: Optional[str] = None


class BusySlotPayload(BaseModel):
    task_id: str
    title: str
    start: str
    end: str
    start_minute: int
    end_minute: int


class BusySlotsResponse(BaseModel):
    day: date
    slots: List[BusySlotPayload]
    conflicts: List[BusySlotPayload]
    request_id: str


class ClockResponse(BaseModel):
    now: datetime
    timezone: str
    tick_seconds: int
