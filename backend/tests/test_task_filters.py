from datetime import date, datetime

import pytest

from unfric.api.schemas.task import Task
from unfric.services.task_filters import filter_tasks, sort_tasks

NOW = datetime(2024, 3, 1, 12, 0)


def _build_task(task_id, **overrides):
    fields = {"id": task_id, "title": f"Task {task_id}"}
    fields.update(overrides)
    return Task(**fields)


def _sample_tasks():
    return [
        _build_task("report", title="Write report", priority="high", due_date=date(2024, 3, 1),
                    due_time="09:00", end_time="10:00", created_at=datetime(2024, 2, 1)),
        _build_task("call", title="Call plumber", priority="low", due_date=date(2024, 3, 4),
                    created_at=datetime(2024, 2, 3)),
        _build_task("taxes", title="File taxes", due_date=date(2024, 4, 15),
                    created_at=datetime(2024, 2, 2)),
        _build_task("idea", title="Report ideas", created_at=None),
    ]


def test_search_is_case_insensitive_on_title():
    ids = [task.id for task in filter_tasks(_sample_tasks(), NOW, search="  REPORT ")]
    assert ids == ["report", "idea"]


def test_status_and_priority_filters():
    assert [t.id for t in filter_tasks(_sample_tasks(), NOW, status="overdue")] == ["report"]
    assert [t.id for t in filter_tasks(_sample_tasks(), NOW, priority="low")] == ["call"]


def test_date_tags():
    tasks = _sample_tasks()
    assert [t.id for t in filter_tasks(tasks, NOW, date_tag="today")] == ["report"]
    assert [t.id for t in filter_tasks(tasks, NOW, date_tag="week")] == ["report", "call"]
    assert [t.id for t in filter_tasks(tasks, NOW, date_tag="overdue")] == ["report"]
    with pytest.raises(ValueError):
        filter_tasks(tasks, NOW, date_tag="month")


def test_sort_options():
    tasks = _sample_tasks()
    assert [t.id for t in sort_tasks(tasks, "newest")] == ["call", "taxes", "report", "idea"]
    assert [t.id for t in sort_tasks(tasks, "oldest")] == ["report", "taxes", "call", "idea"]
    assert [t.id for t in sort_tasks(tasks, "priority")] == ["report", "taxes", "idea", "call"]
    assert [t.id for t in sort_tasks(tasks, "due_date")] == ["report", "call", "taxes", "idea"]
    with pytest.raises(ValueError):
        sort_tasks(tasks, "alphabetical")
