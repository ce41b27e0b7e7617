"""Timeline layout, busy-slot and clock API routes."""
from __future__ import annotations

from time import perf_counter

from fastapi import APIRouter, Depends, Request

from unfric.api.deps import get_clock, resolve_now
from unfric.api.schemas.schedule import (
    BusySlotPayload,
    BusySlotsRequest,
    BusySlotsResponse,
    ClockResponse,
    HourRowPayload,
    TimelineEntryPayload,
    TimelineRequest,
    TimelineResponse,
)
from unfric.core.config import settings
from unfric.observability.metrics import log_metric
from unfric.observability.tracing import trace
from unfric.services.busy_slots import BusySlot, busy_slots, find_conflicts
from unfric.services.clock import Clock
from unfric.services.timeline_layout import layout_day

router = APIRouter()


@router.get("/clock", response_model=ClockResponse, tags=["schedule"])
def get_clock_state(clock: Clock = Depends(get_clock)) -> ClockResponse:
    """Current time plus the refresh cadence clients should tick at."""
    return ClockResponse(
        now=clock.now(),
        timezone=settings.timezone,
        tick_seconds=settings.clock_tick_seconds,
    )


@router.post("/tasks/timeline", response_model=TimelineResponse, tags=["schedule"])
def build_timeline(
    payload: TimelineRequest,
    http_request: Request,
    clock: Clock = Depends(get_clock),
) -> TimelineResponse:
    """Lay out one day's timed tasks on the 24-hour timeline."""
    request_id = getattr(http_request.state, "request_id", None)
    now = resolve_now(payload.now, clock)
    start = perf_counter()
    metadata = {
        "route": "/tasks/timeline",
        "day": payload.day.isoformat(),
        "compact": payload.compact,
        "request_id": request_id,
    }
    with trace("schedule.timeline", metadata=metadata, request_id=request_id):
        layout = layout_day(payload.tasks, payload.day, now, compact=payload.compact)

    latency_ms = (perf_counter() - start) * 1000
    log_metric("schedule.timeline.entries", len(layout.entries), metadata={"day": payload.day.isoformat()})
    log_metric("schedule.timeline.latency_ms", latency_ms, metadata={"day": payload.day.isoformat()})
    return TimelineResponse(
        day=layout.day,
        compact=layout.compact,
        now=now,
        now_offset=layout.now_offset,
        total_height=layout.total_height,
        hour_rows=[
            HourRowPayload(hour=row.hour, top=row.top, height=row.height, active=row.active)
            for row in layout.hour_rows
        ],
        entries=[
            TimelineEntryPayload(
                task_id=entry.task_id,
                title=entry.title,
                start_minute=entry.start_minute,
                end_minute=entry.end_minute,
                top_offset=entry.top_offset,
                height=entry.height,
                status=entry.status,
                remaining_minutes=entry.remaining_minutes,
                overlaps_with=list(entry.overlaps_with),
                continues_next_day=entry.continues_next_day,
                duration_label=entry.duration_label,
            )
            for entry in layout.entries
        ],
        all_day_task_ids=list(layout.all_day_task_ids),
        request_id=request_id or "",
    )


@router.post("/tasks/busy-slots", response_model=BusySlotsResponse, tags=["schedule"])
def list_busy_slots(payload: BusySlotsRequest, http_request: Request) -> BusySlotsResponse:
    """Existing commitments on a day, and which of them clash with a candidate range."""
    request_id = getattr(http_request.state, "request_id", None)
    metadata = {
        "route": "/tasks/busy-slots",
        "day": payload.day.isoformat(),
        "exclude_task_id": payload.exclude_task_id,
        "request_id": request_id,
    }
    with trace("schedule.busy_slots", metadata=metadata, request_id=request_id):
        slots = busy_slots(payload.tasks, payload.day, payload.exclude_task_id)
        conflicts = find_conflicts(slots, payload.start, payload.end) if payload.start else []

    log_metric("schedule.busy_slots.count", len(slots), metadata={"day": payload.day.isoformat()})
    log_metric("schedule.busy_slots.conflicts", len(conflicts), metadata={"day": payload.day.isoformat()})
    return BusySlotsResponse(
        day=payload.day,
        slots=[_serialize_slot(slot) for slot in slots],
        conflicts=[_serialize_slot(slot) for slot in conflicts],
        request_id=request_id or "",
    )


def _serialize_slot(slot: BusySlot) -> BusySlotPayload:
    return BusySlotPayload(
        task_id=slot.task_id,
        title=slot.title,
        start=slot.start,
        end=slot.end,
        start_minute=slot.start_minute,
        end_minute=slot.end_minute,
    )
