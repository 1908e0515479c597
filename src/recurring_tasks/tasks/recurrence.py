# src/recurring_tasks/tasks/recurrence.py

from __future__ import annotations

from datetime import timedelta

from ..config import RecurrenceConfig
from ..core.errors import MissingCompletionTime
from .notes_codec import RecurrenceMetadata, decode
from .task_models import NewTaskSpec, TaskRecord

DEFAULT_CONFIG = RecurrenceConfig()


def read_metadata(task: TaskRecord, config: RecurrenceConfig = DEFAULT_CONFIG) -> RecurrenceMetadata | None:
    return decode(task.notes, interval_key=config.interval_key, processed_key=config.processed_key)


def is_eligible(task: TaskRecord, config: RecurrenceConfig = DEFAULT_CONFIG) -> bool:
    """
    True for a completed task whose notes declare a positive interval and carry no
    processed marker yet.

    Prose notes, broken JSON and a missing/zero/negative interval all just mean
    "not recurring".
    """
    if not task.is_completed:
        return False

    meta = read_metadata(task, config)
    if meta is None or not meta.is_recurring:
        return False

    # One-shot per task instance: any marker at all disqualifies.
    return not meta.is_processed


def plan_next(task: TaskRecord, interval: float) -> NewTaskSpec:
    """
    Successor of a completed task: same title, same notes, due `interval` days
    after completion (plain UTC day arithmetic).

    The notes are copied as they are on `task`, so the caller must plan before it
    writes the processed marker onto the original. Successors therefore start
    unprocessed and keep the interval.
    """
    if task.completed is None:
        raise MissingCompletionTime(task.id)

    next_due = task.completed + timedelta(days=interval)
    return NewTaskSpec(title=task.title, notes=task.notes, due=next_due)
