from datetime import date

from unfric.api.schemas.task import Task
from unfric.services.busy_slots import busy_slots, find_conflicts

DAY = date(2024, 3, 1)


def _build_task(task_id, due_time, end_time=None, due_date=DAY, **overrides):
    return Task(
        id=task_id,
        title=f"Task {task_id}",
        due_date=due_date,
        due_time=due_time,
        end_time=end_time,
        **overrides,
    )


def test_overlapping_tasks_conflict_both_ways():
    first = _build_task("a", "09:00", "10:00")
    second = _build_task("b", "09:30", "10:30")
    tasks = [first, second]

    slots_for_a = busy_slots(tasks, DAY, exclude_task_id="a")
    assert [slot.task_id for slot in slots_for_a] == ["b"]
    assert [slot.task_id for slot in find_conflicts(slots_for_a, "09:00", "10:00")] == ["b"]

    slots_for_b = busy_slots(tasks, DAY, exclude_task_id="b")
    assert [slot.task_id for slot in find_conflicts(slots_for_b, "09:30", "10:30")] == ["a"]

    slot_a, slot_b = busy_slots(tasks, DAY)
    assert slot_a.conflicts_with(slot_b)
    assert slot_b.conflicts_with(slot_a)


def test_adjacent_ranges_do_not_conflict():
    slots = busy_slots([_build_task("a", "09:00", "10:00")], DAY)
    assert find_conflicts(slots, "10:00", "11:00") == []
    assert find_conflicts(slots, "08:00", "09:00") == []


def test_slot_shape_and_ordering():
    tasks = [
        _build_task("late", "15:00", "16:00"),
        _build_task("early", "08:00"),
        _build_task("undated", "08:00", due_date=None),
        _build_task("all-day", None),
        _build_task("other-day", "08:00", due_date=date(2024, 3, 5)),
    ]
    slots = busy_slots(tasks, DAY)
    assert [(slot.task_id, slot.start, slot.end) for slot in slots] == [
        ("early", "08:00", "10:00"),
        ("late", "15:00", "16:00"),
    ]
    assert slots[0].title == "Task early"


def test_previous_day_window_wrapping_past_midnight_is_busy():
    tasks = [_build_task("night", "23:00", "01:00", due_date=date(2024, 2, 29))]
    slots = busy_slots(tasks, DAY)
    assert len(slots) == 1
    slot = slots[0]
    assert (slot.start_minute, slot.end_minute) == (-60, 60)
    assert (slot.start, slot.end) == ("23:00", "01:00")
    assert [s.task_id for s in find_conflicts(slots, "00:30", "01:30")] == ["night"]
    assert find_conflicts(slots, "01:00", "02:00") == []


def test_candidate_crossing_midnight_uses_wrapped_end():
    slots = busy_slots([_build_task("late", "23:45", "23:55")], DAY)
    assert [slot.task_id for slot in find_conflicts(slots, "23:30", "00:30")] == ["late"]


def test_candidate_with_equal_endpoints_is_clamped_not_wrapped():
    slots = busy_slots([_build_task("a", "09:20", "09:40"), _build_task("b", "15:00", "16:00")], DAY)
    assert [slot.task_id for slot in find_conflicts(slots, "09:00", "09:00")] == ["a"]
    assert find_conflicts(slots, "10:00", "10:00") == []


def test_candidate_without_end_uses_default_duration():
    slots = busy_slots([_build_task("a", "10:30", "11:00")], DAY)
    assert [slot.task_id for slot in find_conflicts(slots, "09:00")] == ["a"]


def test_unparseable_candidate_has_no_conflicts():
    slots = busy_slots([_build_task("a", "09:00", "10:00")], DAY)
    assert find_conflicts(slots, "soon", "later") == []
