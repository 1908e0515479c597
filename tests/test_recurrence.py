# tests/test_recurrence.py

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from recurring_tasks.config import RecurrenceConfig
from recurring_tasks.core.errors import MissingCompletionTime
from recurring_tasks.tasks.recurrence import is_eligible, plan_next
from recurring_tasks.tasks.task_models import TaskRecord, TaskStatus

from .conftest import completed_task


@pytest.mark.parametrize("notes", ['{"interval": 7}', "plain", None, '{"interval": 7, "lastRecurred": "x"}'])
def test_open_tasks_are_never_eligible(notes) -> None:
    task = TaskRecord(id="t1", title="x", status=TaskStatus.NEEDS_ACTION, notes=notes)
    assert not is_eligible(task)


def test_completed_interval_task_is_eligible() -> None:
    assert is_eligible(completed_task("t1"))


@pytest.mark.parametrize(
    "notes",
    [
        None,
        "",
        "just a reminder",
        '{"interval": 0}',
        '{"interval": -3}',
        '{"interval": "7"}',
        '{"note": "no interval"}',
        "[7]",
    ],
)
def test_not_eligible_without_positive_interval(notes) -> None:
    assert not is_eligible(completed_task("t1", notes=notes))


def test_processed_marker_disqualifies() -> None:
    task = completed_task("t1", notes='{"interval": 7, "lastRecurred": "2024-01-01T00:00:00.000Z"}')
    assert not is_eligible(task)


def test_eligibility_uses_configured_keys() -> None:
    cfg = RecurrenceConfig(interval_key="every", processed_key="done")
    assert is_eligible(completed_task("t1", notes='{"every": 2}'), cfg)
    assert not is_eligible(completed_task("t2", notes='{"interval": 2}'), cfg)
    assert not is_eligible(completed_task("t3", notes='{"every": 2, "done": 1}'), cfg)


def test_plan_next_adds_interval_days() -> None:
    notes = '{"interval": 7, "color": "red"}'
    task = completed_task("t1", title="Water plants", notes=notes, completed=datetime(2024, 1, 1, tzinfo=UTC))

    spec = plan_next(task, 7)

    assert spec.due == datetime(2024, 1, 8, tzinfo=UTC)
    assert spec.title == "Water plants"
    assert spec.notes == notes


def test_plan_next_keeps_time_of_day_and_crosses_month() -> None:
    task = completed_task("t1", completed=datetime(2024, 1, 30, 17, 45, tzinfo=UTC))
    assert plan_next(task, 3).due == datetime(2024, 2, 2, 17, 45, tzinfo=UTC)


def test_plan_next_requires_completion_time() -> None:
    task = completed_task("t1", completed=None)
    with pytest.raises(MissingCompletionTime) as exc_info:
        plan_next(task, 7)
    assert exc_info.value.task_id == "t1"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("completed", True), ("needsAction", False), (None, False), ("deleted", False)],
)
def test_is_completed_follows_api_status(raw, expected) -> None:
    task = TaskRecord(id="t1", title="x", status=TaskStatus.from_api(raw), notes='{"interval": 7}')
    assert task.is_completed is expected
