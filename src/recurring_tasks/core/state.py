# src/recurring_tasks/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..config import RecurrenceConfig
from ..tasks.task_scheduler import RecurrenceScanner
from .ports import TaskStoreClient


@dataclass
class AppState:
    # Settings kept on the state for easy access from the CLI.
    settings: object

    task_store: TaskStoreClient
    recurrence: RecurrenceConfig
    scanner: RecurrenceScanner

    def close(self) -> None:
        close = getattr(self.task_store, "close", None)
        if callable(close):
            close()
