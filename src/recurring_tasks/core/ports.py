# src/recurring_tasks/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The scanner and the interactive helpers depend on these Protocols, not on the
HTTP client, so the store stays swappable and tests can run against an
in-memory fake.
"""

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any, Protocol

from ..tasks.task_models import NewTaskSpec, TaskList, TaskRecord


class TokenProvider(Protocol):
    """Supplies the bearer token attached to every store call (None if not signed in)."""
    def access_token(self) -> str | None: ...


class TaskStoreClient(Protocol):
    """
    The task-list service, reduced to the four operations the core needs.

    Any call may raise StoreOperationFailure (or AuthenticationFailure).
    list_tasks is filtered server-side by completion time; callers trust it.
    """

    def list_task_lists(self) -> Sequence[TaskList]: ...

    def list_tasks(
            self,
            list_id: str,
            *,
            completed_after: datetime | None = None,
            show_completed: bool = True,
            show_hidden: bool = True,
    ) -> Sequence[TaskRecord]: ...

    def insert_task(self, list_id: str, spec: NewTaskSpec) -> TaskRecord: ...

    def patch_task(self, list_id: str, task_id: str, fields: Mapping[str, Any]) -> TaskRecord: ...
