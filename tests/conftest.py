# tests/conftest.py

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path
from types import SimpleNamespace

import pytest

from recurring_tasks.tasks.task_models import TaskRecord, TaskStatus

from .fakes import FakeTaskStore

NOW = datetime(2024, 1, 2, 12, 0, tzinfo=UTC)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and RecurrenceConfig.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="recurring-tasks-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        tasks_api_base_url="https://tasks.example.test/tasks/v1",
        access_token="test-token",
        http_timeout_seconds=5.0,
        lookback_hours=24.0,
        scan_interval_seconds=3600.0,
        interval_key="interval",
        processed_key="lastRecurred",
    )


@pytest.fixture()
def store() -> FakeTaskStore:
    return FakeTaskStore()


def completed_task(
    task_id: str,
    *,
    title: str | None = None,
    notes: str | None = '{"interval": 7}',
    completed: datetime | None = NOW - timedelta(hours=1),
) -> TaskRecord:
    return TaskRecord(
        id=task_id,
        title=title or f"task {task_id}",
        status=TaskStatus.COMPLETED,
        completed=completed,
        notes=notes,
    )
