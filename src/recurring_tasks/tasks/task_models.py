# src/recurring_tasks/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """
    Task status as reported by the task-list service.

    Unknown or missing values are read as NEEDS_ACTION so they are never mistaken
    for completed tasks.
    """

    NEEDS_ACTION = "needsAction"
    COMPLETED = "completed"

    @classmethod
    def from_api(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.NEEDS_ACTION
        try:
            return cls(raw)
        except ValueError:
            return cls.NEEDS_ACTION


@dataclass(slots=True, frozen=True)
class TaskList:
    id: str | None
    title: str = ""


@dataclass(slots=True)
class TaskRecord:
    """
    One task as the service returns it (only the fields we read or write).

    `completed` is present iff status is COMPLETED, but the service does not
    guarantee it, so None is a valid state here.
    `interval` is filled in by the interactive helpers from the notes metadata;
    the batch path never relies on it.
    """

    id: str
    title: str = ""
    status: TaskStatus = TaskStatus.NEEDS_ACTION
    completed: datetime | None = None
    due: datetime | None = None
    notes: str | None = None
    updated: datetime | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    interval: float | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED


@dataclass(slots=True, frozen=True)
class NewTaskSpec:
    """Fields for a task that does not exist yet (the successor of a completed task)."""

    title: str
    notes: str | None
    due: datetime | None
