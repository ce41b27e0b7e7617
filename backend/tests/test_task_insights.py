from datetime import date, datetime

from unfric.api.schemas.task import Task
from unfric.services import quadrants
from unfric.services.task_insights import summarize_tasks

NOW = datetime(2024, 3, 1, 12, 0)


def test_summary_counts_open_and_completed_tasks():
    tasks = [
        Task(id="a", due_date=date(2024, 3, 1), due_time="09:00", end_time="10:00",
             urgency="high", importance="high", total_focus_minutes=25),
        Task(id="b", due_date=date(2024, 3, 1), due_time="18:00", is_completed=True,
             total_focus_minutes=50),
        Task(id="c", due_date=date(2024, 2, 20), importance="high"),
        Task(id="d", due_time="22:00"),
    ]
    insights = summarize_tasks(tasks, NOW)

    assert insights.total == 4
    assert insights.completed == 1
    assert insights.completion_rate == 25
    assert insights.overdue == 2
    assert insights.due_today == 2
    assert insights.completed_today == 1
    assert insights.total_focus_minutes == 75
    assert insights.focus_time_of_day == "morning"
    assert insights.by_quadrant == {
        "urgent-important": 1,
        "urgent-not-important": 0,
        "not-urgent-important": 1,
        "not-urgent-not-important": 2,
    }
    assert insights.by_time_of_day == {"morning": 3, "afternoon": 0, "evening": 1, "night": 0}


def test_undated_tasks_count_as_today_under_default_policy():
    tasks = [
        Task(id="a"),
        Task(id="b", is_completed=True),
        Task(id="c", due_date=date(2024, 3, 2)),
    ]
    insights = summarize_tasks(tasks, NOW)
    assert insights.due_today == 1
    assert insights.completed_today == 1


def test_excluded_undated_tasks_are_not_today(monkeypatch):
    tasks = [Task(id="a"), Task(id="b", is_completed=True)]
    monkeypatch.setattr(quadrants.settings, "no_due_date_bucket", "exclude")
    insights = summarize_tasks(tasks, NOW)
    assert insights.due_today == 0
    assert insights.completed_today == 0

    moved = summarize_tasks(tasks, NOW, no_due_date_bucket="today")
    assert moved.due_today == 1


def test_focus_time_is_most_common_among_open_tasks_today():
    tasks = [
        Task(id="a", due_date=date(2024, 3, 1), due_time="08:00"),
        Task(id="b", due_date=date(2024, 3, 1), due_time="18:00"),
        Task(id="c", due_date=date(2024, 3, 1), due_time="19:30"),
        Task(id="d", due_date=date(2024, 3, 1), due_time="08:30", is_completed=True),
        Task(id="e", due_date=date(2024, 3, 1), due_time="09:00", is_completed=True),
        Task(id="f", due_date=date(2024, 3, 4), due_time="07:00"),
    ]
    assert summarize_tasks(tasks, NOW).focus_time_of_day == "evening"


def test_focus_time_tie_keeps_first_seen_bucket():
    tasks = [
        Task(id="a", due_date=date(2024, 3, 1), due_time="22:00"),
        Task(id="b", due_date=date(2024, 3, 1), due_time="13:00"),
    ]
    assert summarize_tasks(tasks, NOW).focus_time_of_day == "night"


def test_empty_list_has_zero_rate():
    insights = summarize_tasks([], NOW)
    assert insights.total == 0
    assert insights.completion_rate == 0
    assert insights.focus_time_of_day == "morning"
