# src/recurring_tasks/core/errors.py

from __future__ import annotations


class RecurrenceError(Exception):
    """Base class for errors raised by this package."""


class MissingCompletionTime(RecurrenceError):
    """A completed task has no usable completion timestamp, so no due date can be planned."""

    def __init__(self, task_id: str | None) -> None:
        super().__init__(f"Task {task_id} has no completion timestamp")
        self.task_id = task_id


class StoreOperationFailure(RecurrenceError):
    """A list/fetch/insert/patch call against the task-list service failed."""

    def __init__(
            self,
            operation: str,
            message: str = "",
            *,
            list_id: str | None = None,
            task_id: str | None = None,
            status_code: int | None = None,
    ) -> None:
        detail = f"{operation} failed"
        if list_id:
            detail += f" list={list_id}"
        if task_id:
            detail += f" task={task_id}"
        if status_code is not None:
            detail += f" status={status_code}"
        if message:
            detail += f": {message}"
        super().__init__(detail)
        self.operation = operation
        self.list_id = list_id
        self.task_id = task_id
        self.status_code = status_code


class AuthenticationFailure(StoreOperationFailure):
    """
    No valid credential for the task-list service.

    Subclasses StoreOperationFailure so the batch scanner isolates it like any other
    store failure, while interactive callers can catch it on its own.
    """
