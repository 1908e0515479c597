# src/recurring_tasks/tasks/task_api.py

from __future__ import annotations

import logging
import math
from dataclasses import replace
from datetime import datetime
from typing import Any

from ..config import RecurrenceConfig
from ..core.ports import TaskStoreClient
from .notes_codec import decode, encode
from .recurrence import DEFAULT_CONFIG
from .task_models import NewTaskSpec, TaskList, TaskRecord

logger = logging.getLogger(__name__)

# Plain-text notes that get an interval attached are kept under this key.
ORIGINAL_NOTES_KEY = "originalNotes"


def with_interval(task: TaskRecord, config: RecurrenceConfig = DEFAULT_CONFIG) -> TaskRecord:
    """Copy of `task` with `interval` read from its notes (None if not recurring metadata)."""
    meta = decode(task.notes, interval_key=config.interval_key, processed_key=config.processed_key)
    return replace(task, interval=meta.interval if meta is not None else None)


def fold_interval(
        notes: str | None,
        interval: float,
        config: RecurrenceConfig = DEFAULT_CONFIG,
) -> str:
    """
    Notes carrying `interval`.

    - JSON-object notes: the interval is merged in, other keys kept.
    - Plain-text notes: the text moves under "originalNotes".
    - Empty notes: just {"interval": N}.
    """
    if isinstance(interval, bool) or not isinstance(interval, (int, float)):
        raise ValueError(f"interval must be a number of days, got {interval!r}")
    if not math.isfinite(interval):
        # json.dumps would write bare NaN/Infinity tokens, which are not JSON.
        raise ValueError(f"interval must be finite, got {interval!r}")

    patch: dict[str, Any] = {config.interval_key: interval}

    meta = decode(notes, interval_key=config.interval_key, processed_key=config.processed_key)
    if meta is not None:
        return encode(meta, patch)

    if notes and notes.strip():
        patch[ORIGINAL_NOTES_KEY] = notes
    return encode(None, patch)


def fetch_task_lists(store: TaskStoreClient) -> list[TaskList]:
    return [tl for tl in store.list_task_lists() if tl.id]


def fetch_tasks(
        store: TaskStoreClient,
        list_id: str,
        *,
        config: RecurrenceConfig = DEFAULT_CONFIG,
) -> list[TaskRecord]:
    """Open (not completed, not hidden) tasks of one list, each with its interval decoded."""
    tasks = store.list_tasks(list_id, show_completed=False, show_hidden=False)
    return [with_interval(t, config) for t in tasks]


def create_task(
        store: TaskStoreClient,
        list_id: str,
        *,
        title: str,
        notes: str | None = None,
        due: datetime | None = None,
        interval: float | None = None,
        config: RecurrenceConfig = DEFAULT_CONFIG,
) -> TaskRecord:
    """
    Create a task, optionally recurring.

    Store and authentication failures propagate to the caller.
    """
    if not title or not title.strip():
        raise ValueError("title is required")

    if interval is not None:
        notes = fold_interval(notes, interval, config)

    created = store.insert_task(list_id, NewTaskSpec(title=title.strip(), notes=notes, due=due))
    logger.info("Created task id=%s list=%s interval=%s", created.id, list_id, interval)
    return with_interval(created, config)


def update_task(
        store: TaskStoreClient,
        list_id: str,
        task: TaskRecord,
        *,
        title: str | None = None,
        notes: str | None = None,
        due: datetime | None = None,
        interval: float | None = None,
        config: RecurrenceConfig = DEFAULT_CONFIG,
) -> TaskRecord:
    """
    Patch only the given fields of `task` (the record as last fetched).

    With `interval`, the new notes (or the task's current notes when `notes` is not
    given) are folded through fold_interval, so earlier note content survives.
    Store and authentication failures propagate to the caller.
    """
    fields: dict[str, Any] = {}
    if title is not None:
        fields["title"] = title
    if due is not None:
        fields["due"] = due

    if interval is not None:
        base_notes = notes if notes is not None else task.notes
        fields["notes"] = fold_interval(base_notes, interval, config)
    elif notes is not None:
        fields["notes"] = notes

    if not fields:
        return with_interval(task, config)

    updated = store.patch_task(list_id, task.id, fields)
    logger.info("Updated task id=%s list=%s fields=%s", task.id, list_id, sorted(fields))
    return with_interval(updated, config)
