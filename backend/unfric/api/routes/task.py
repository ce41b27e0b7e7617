"""Task classification, board and listing API routes."""
from __future__ import annotations

from time import perf_counter
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status

from unfric.api.deps import get_clock, resolve_now
from unfric.api.schemas.task import (
    BoardColumnPayload,
    BoardRequest,
    BoardResponse,
    ClassifyRequest,
    ClassifyResponse,
    TaskBatchRequest,
    TaskClassification,
    TaskInsightsResponse,
    TaskQueryRequest,
    TaskQueryResponse,
)
from unfric.observability.metrics import log_metric
from unfric.observability.tracing import trace
from unfric.services.clock import Clock
from unfric.services.quadrants import QUADRANT_MODES, group_tasks, quadrant_for
from unfric.services.task_filters import filter_tasks, sort_tasks
from unfric.services.task_insights import summarize_tasks
from unfric.services.task_status import ONGOING, classify, remaining_minutes

router = APIRouter()


@router.post("/tasks/classify", response_model=ClassifyResponse, tags=["tasks"])
def classify_tasks(
    payload: ClassifyRequest,
    http_request: Request,
    clock: Clock = Depends(get_clock),
) -> ClassifyResponse:
    """Return status, remaining time and quadrant ids for every task."""
    request_id = getattr(http_request.state, "request_id", None)
    now = resolve_now(payload.now, clock)
    start = perf_counter()
    metadata: Dict[str, Any] = {
        "route": "/tasks/classify",
        "task_count": len(payload.tasks),
        "modes": list(payload.modes),
        "request_id": request_id,
    }

    items = []
    with trace("task.classify", metadata=metadata, request_id=request_id):
        try:
            for task in payload.tasks:
                task_status = classify(task, now)
                items.append(
                    TaskClassification(
                        task_id=task.id,
                        status=task_status,
                        remaining_minutes=remaining_minutes(task, now) if task_status == ONGOING else None,
                        quadrants={mode: quadrant_for(task, mode, now) for mode in payload.modes},
                    )
                )
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    latency_ms = (perf_counter() - start) * 1000
    log_metric("task.classify.count", len(items), metadata={"route": "/tasks/classify"})
    log_metric("task.classify.latency_ms", latency_ms, metadata={"route": "/tasks/classify"})
    return ClassifyResponse(now=now, items=items, request_id=request_id or "")


@router.post("/tasks/board", response_model=BoardResponse, tags=["tasks"])
def build_board(
    payload: BoardRequest,
    http_request: Request,
    clock: Clock = Depends(get_clock),
) -> BoardResponse:
    """Group tasks into the four ordered columns of the selected mode."""
    request_id = getattr(http_request.state, "request_id", None)
    now = resolve_now(payload.now, clock)
    with trace(
        "task.board",
        metadata={"route": "/tasks/board", "mode": payload.mode, "task_count": len(payload.tasks)},
        request_id=request_id,
    ):
        try:
            columns, unassigned = group_tasks(payload.tasks, payload.mode, now)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    log_metric("task.board.columns", len(columns), metadata={"mode": payload.mode})
    return BoardResponse(
        mode=payload.mode,
        label=str(QUADRANT_MODES[payload.mode]["label"]),
        columns=[
            BoardColumnPayload(
                id=column.id,
                title=column.title,
                active_task_ids=[task.id for task in column.active],
                completed_task_ids=[task.id for task in column.completed],
            )
            for column in columns
        ],
        unassigned_task_ids=[task.id for task in unassigned],
        request_id=request_id or "",
    )


@router.post("/tasks/query", response_model=TaskQueryResponse, tags=["tasks"])
def query_tasks(
    payload: TaskQueryRequest,
    http_request: Request,
    clock: Clock = Depends(get_clock),
) -> TaskQueryResponse:
    """Filter and sort a task list the way the all-tasks view does."""
    request_id = getattr(http_request.state, "request_id", None)
    now = resolve_now(payload.now, clock)
    metadata: Dict[str, Any] = {
        "route": "/tasks/query",
        "status": payload.status,
        "priority": payload.priority,
        "date_tag": payload.date_tag,
        "sort_by": payload.sort_by,
        "request_id": request_id,
    }
    with trace("task.query", metadata=metadata, request_id=request_id):
        try:
            matched = filter_tasks(
                payload.tasks,
                now,
                search=payload.search,
                status=payload.status,
                priority=payload.priority,
                date_tag=payload.date_tag,
            )
            ordered = sort_tasks(matched, payload.sort_by)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    log_metric("task.query.count", len(ordered), metadata={"sort_by": payload.sort_by})
    return TaskQueryResponse(
        task_ids=[task.id for task in ordered],
        count=len(ordered),
        request_id=request_id or "",
    )


@router.post("/tasks/insights", response_model=TaskInsightsResponse, tags=["tasks"])
def task_insights(
    payload: TaskBatchRequest,
    http_request: Request,
    clock: Clock = Depends(get_clock),
) -> TaskInsightsResponse:
    request_id = getattr(http_request.state, "request_id", None)
    now = resolve_now(payload.now, clock)
    with trace("task.insights", metadata={"task_count": len(payload.tasks)}, request_id=request_id):
        insights = summarize_tasks(payload.tasks, now)

    log_metric("task.insights.total", insights.total, metadata={})
    return TaskInsightsResponse(
        total=insights.total,
        completed=insights.completed,
        completion_rate=insights.completion_rate,
        overdue=insights.overdue,
        due_today=insights.due_today,
        completed_today=insights.completed_today,
        total_focus_minutes=insights.total_focus_minutes,
        focus_time_of_day=insights.focus_time_of_day,
        by_quadrant=insights.by_quadrant,
        by_time_of_day=insights.by_time_of_day,
        request_id=request_id or "",
    )
