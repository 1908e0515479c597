# tests/fakes.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from recurring_tasks.core.errors import StoreOperationFailure
from recurring_tasks.tasks.task_models import NewTaskSpec, TaskList, TaskRecord, TaskStatus


@dataclass(slots=True)
class PatchCall:
    list_id: str
    task_id: str
    fields: dict[str, Any]


class FakeTaskStore:
    """
    In-memory TaskStoreClient used for scanner / task_api tests.

    Behaves like the service where the core cares:
    - list_tasks drops tasks completed before `completed_after`
    - insert assigns a new id, successors start as needsAction
    - patch only touches the given fields

    Failure injection:
    - fail_task_lists: list_task_lists raises
    - fail_list_ids: list_tasks raises for these lists
    - fail_insert_titles: insert_task raises for specs with these titles
    - fail_patch_ids: patch_task raises for these task ids
    """

    def __init__(self) -> None:
        self.lists: list[TaskList] = []
        self.tasks: dict[str, dict[str, TaskRecord]] = {}
        self.inserted: list[tuple[str, NewTaskSpec]] = []
        self.patches: list[PatchCall] = []
        self.list_tasks_calls: list[dict[str, Any]] = []

        self.fail_task_lists = False
        self.fail_list_ids: set[str] = set()
        self.fail_insert_titles: set[str] = set()
        self.fail_patch_ids: set[str] = set()

        self._next_id = 1

    # ---- setup helpers ----

    def add_list(self, list_id: str | None, title: str = "") -> None:
        self.lists.append(TaskList(id=list_id, title=title or f"list {list_id}"))
        if list_id:
            self.tasks.setdefault(list_id, {})

    def add_task(self, list_id: str, task: TaskRecord) -> TaskRecord:
        self.tasks.setdefault(list_id, {})[task.id] = task
        return task

    def get(self, list_id: str, task_id: str) -> TaskRecord:
        return self.tasks[list_id][task_id]

    # ---- TaskStoreClient ----

    def list_task_lists(self) -> list[TaskList]:
        if self.fail_task_lists:
            raise StoreOperationFailure("list_task_lists", "boom")
        return list(self.lists)

    def list_tasks(
        self,
        list_id: str,
        *,
        completed_after: datetime | None = None,
        show_completed: bool = True,
        show_hidden: bool = True,
    ) -> list[TaskRecord]:
        self.list_tasks_calls.append(
            {
                "list_id": list_id,
                "completed_after": completed_after,
                "show_completed": show_completed,
                "show_hidden": show_hidden,
            }
        )
        if list_id in self.fail_list_ids:
            raise StoreOperationFailure("list_tasks", "boom", list_id=list_id)

        out: list[TaskRecord] = []
        for t in self.tasks.get(list_id, {}).values():
            if not show_completed and t.status == TaskStatus.COMPLETED:
                continue
            if completed_after is not None and t.completed is not None and t.completed < completed_after:
                continue
            out.append(replace(t))
        return out

    def insert_task(self, list_id: str, spec: NewTaskSpec) -> TaskRecord:
        if spec.title in self.fail_insert_titles:
            raise StoreOperationFailure("insert_task", "boom", list_id=list_id)

        task_id = f"new-{self._next_id}"
        self._next_id += 1
        task = TaskRecord(id=task_id, title=spec.title, notes=spec.notes, due=spec.due)
        self.tasks.setdefault(list_id, {})[task_id] = task
        self.inserted.append((list_id, spec))
        return replace(task)

    def patch_task(self, list_id: str, task_id: str, fields: Mapping[str, Any]) -> TaskRecord:
        if task_id in self.fail_patch_ids:
            raise StoreOperationFailure("patch_task", "boom", list_id=list_id, task_id=task_id)

        current = self.tasks[list_id][task_id]
        updated = replace(current, **dict(fields))
        self.tasks[list_id][task_id] = updated
        self.patches.append(PatchCall(list_id=list_id, task_id=task_id, fields=dict(fields)))
        return replace(updated)
