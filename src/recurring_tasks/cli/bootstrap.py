# src/recurring_tasks/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the token provider, the HTTP store client and the scanner into AppState.
"""

from __future__ import annotations

import logging

from ..config import RecurrenceConfig, get_settings
from ..core.ports import TaskStoreClient
from ..core.state import AppState
from ..tasks.google_tasks import GoogleTasksClient, StaticTokenProvider
from ..tasks.task_scheduler import RecurrenceScanner

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, task_store: TaskStoreClient | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Settings and the store are injectable for tests; if settings is None, falls
    back to get_settings(). A missing access token is not an error here: store
    calls fail with AuthenticationFailure when they are made.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if task_store is None:
        if not getattr(settings, "access_token", None):
            logger.warning("No access token configured (RECUR_ACCESS_TOKEN); store calls will fail.")
        task_store = GoogleTasksClient(
            StaticTokenProvider(getattr(settings, "access_token", None)),
            base_url=settings.tasks_api_base_url,
            timeout_seconds=float(settings.http_timeout_seconds),
        )

    recurrence = RecurrenceConfig.from_settings(settings)
    return AppState(
        settings=settings,
        task_store=task_store,
        recurrence=recurrence,
        scanner=RecurrenceScanner(task_store, recurrence),
    )
