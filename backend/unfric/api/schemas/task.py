"""Task record and task-listing schemas."""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from unfric.services.time_window import normalize_hhmm, suggest_time_of_day

logger = logging.getLogger(__name__)

Urgency = Literal["low", "high"]
Importance = Literal["low", "high"]
Priority = Literal["low", "medium", "high"]
Status = Literal["overdue", "ongoing", "upcoming", "completed"]
TimeOfDay = Literal["morning", "afternoon", "evening", "night"]
DateBucket = Literal["yesterday", "today", "tomorrow", "week"]
QuadrantMode = Literal["urgent-important", "status", "date", "time"]
SortBy = Literal["newest", "oldest", "priority", "due_date"]
DateTag = Literal["all", "today", "week", "overdue"]

_LEVELS = {"low", "high"}
_PRIORITIES = {"low", "medium", "high"}
_TIMES_OF_DAY = {"morning", "afternoon", "evening", "night"}


class Subtask(BaseModel):
    id: str
    title: str = ""
    completed: bool = False


class Task(BaseModel):
    """
    A task as handed over by the sync layer.

    Loose input is normalized on load: malformed times become None, unknown
    levels fall back to defaults, and a missing time_of_day is derived once
    from the due time.
    """

    id: str
    title: str = ""
    description: Optional[str] = None
    due_date: Optional[date] = None
    due_time: Optional[str] = None
    end_time: Optional[str] = None
    priority: Priority = "medium"
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    urgency: Urgency = "low"
    importance: Importance = "low"
    time_of_day: Optional[TimeOfDay] = None
    tags: List[str] = Field(default_factory=list)
    subtasks: List[Subtask] = Field(default_factory=list)
    total_focus_minutes: int = 0

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> Any:
        if value is None:
            return value
        return str(value)

    @field_validator("due_date", mode="before")
    @classmethod
    def _date_part(cls, value: Any) -> Any:
        if value in (None, ""):
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str):
            candidate = value.strip()[:10]
            try:
                return date.fromisoformat(candidate)
            except ValueError:
                logger.debug("Ignoring malformed due_date %r", value)
                return None
        return value

    @field_validator("due_time", "end_time", mode="before")
    @classmethod
    def _hhmm(cls, value: Any) -> Optional[str]:
        normalized = normalize_hhmm(value)
        if normalized is None and value not in (None, ""):
            logger.debug("Ignoring malformed time %r", value)
        return normalized

    @field_validator("urgency", "importance", mode="before")
    @classmethod
    def _level(cls, value: Any) -> str:
        normalized = str(value or "").strip().lower()
        return normalized if normalized in _LEVELS else "low"

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, value: Any) -> str:
        normalized = str(value or "").strip().lower()
        return normalized if normalized in _PRIORITIES else "medium"

    @field_validator("time_of_day", mode="before")
    @classmethod
    def _time_of_day(cls, value: Any) -> Optional[str]:
        normalized = str(value or "").strip().lower()
        return normalized if normalized in _TIMES_OF_DAY else None

    @field_validator("is_completed", mode="before")
    @classmethod
    def _completed_flag(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("tags", "subtasks", mode="before")
    @classmethod
    def _list_or_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("total_focus_minutes", mode="before")
    @classmethod
    def _focus_minutes(cls, value: Any) -> Any:
        return 0 if value is None else value

    @model_validator(mode="after")
    def _default_time_of_day(self) -> "Task":
        if self.time_of_day is None:
            usable_time = self.due_time if self.due_date else None
            self.time_of_day = suggest_time_of_day(usable_time)
        return self

    @property
    def completed(self) -> bool:
        return bool(self.is_completed or self.completed_at)


class TaskBatchRequest(BaseModel):
    tasks: List[Task]
    now: Optional[datetime] = None


class ClassifyRequest(TaskBatchRequest):
    modes: List[QuadrantMode] = Field(
        default_factory=lambda: ["urgent-important", "status", "date", "time"]
    )


class TaskClassification(BaseModel):
    task_id: str
    status: Status
    remaining_minutes: Optional[int] = None
    quadrants: Dict[str, Optional[str]]


class ClassifyResponse(BaseModel):
    now: datetime
    items: List[TaskClassification]
    request_id: str


class BoardRequest(TaskBatchRequest):
    mode: QuadrantMode = "urgent-important"


class BoardColumnPayload(BaseModel):
    id: str
    title: str
    active_task_ids: List[str]
    completed_task_ids: List[str]


class BoardResponse(BaseModel):
    mode: QuadrantMode
    label: str
    columns: List[BoardColumnPayload]
    unassigned_task_ids: List[str]
    request_id: str


class TaskQueryRequest(TaskBatchRequest):
    search: Optional[str] = None
    status: Optional[Status] = None
    priority: Optional[Priority] = None
    date_tag: DateTag = "all"
    sort_by: SortBy = "newest"


class TaskQueryResponse(BaseModel):
    task_ids: List[str]
    count: int
    request_id: str


class TaskInsightsResponse(BaseModel):
    total: int
    completed: int
    completion_rate: int
    overdue: int
    due_today: int
    completed_today: int
    total_focus_minutes: int
    focus_time_of_day: TimeOfDay
    by_quadrant: Dict[str, int]
    by_time_of_day: Dict[str, int]
    request_id: str
