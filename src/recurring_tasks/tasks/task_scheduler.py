# src/recurring_tasks/tasks/task_scheduler.py

from __future__ import annotations

"""
Recurrence scanner.

One run:
- lists all task lists,
- fetches tasks completed inside the lookback window,
- for each eligible task: creates the successor, then marks the original processed.

Every list and every task is isolated: a failure is logged and the run moves on.
The scanner keeps no state between runs; the processed marker in the notes is
what makes a second run a no-op.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from ..config import RecurrenceConfig
from ..core.errors import MissingCompletionTime, StoreOperationFailure
from ..core.ports import TaskStoreClient
from .notes_codec import encode, format_timestamp
from .recurrence import is_eligible, plan_next, read_metadata
from .task_models import TaskRecord

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class ScanReport:
    lists_scanned: int = 0
    lists_skipped: int = 0
    lists_failed: int = 0
    tasks_seen: int = 0
    successors_created: int = 0
    originals_marked: int = 0
    tasks_skipped: int = 0
    task_failures: int = 0
    # True when the task lists themselves could not be fetched (bad token, outage).
    listing_failed: bool = False


class RecurrenceScanner:
    """
    Batch scanner over every task list in the store.

    Ordering per eligible task matters:
    1. plan the successor from the original notes (no marker yet),
    2. insert the successor,
    3. only then patch the original with the processed marker.
    If step 3 fails the next run will create a second successor; there is no
    cross-run locking, two overlapping runs can do the same.
    """

    def __init__(
            self,
            store: TaskStoreClient,
            config: RecurrenceConfig | None = None,
            *,
            clock: Clock | None = None,
    ) -> None:
        self._store = store
        self._config = config or RecurrenceConfig()
        self._clock = clock or _utc_now

    @property
    def config(self) -> RecurrenceConfig:
        return self._config

    def run_once(self, now: datetime | None = None) -> ScanReport:
        now = now or self._clock()
        report = ScanReport()
        completed_after = now - self._config.lookback

        try:
            task_lists = list(self._store.list_task_lists())
        except Exception:
            logger.exception("list_task_lists failed; nothing to scan")
            report.listing_failed = True
            return report

        if not task_lists:
            logger.info("No task lists found.")
            return report

        for task_list in task_lists:
            list_id = task_list.id
            if not list_id:
                report.lists_skipped += 1
                logger.debug("Skipping task list without id title=%r", task_list.title)
                continue

            try:
                tasks = list(self._store.list_tasks(list_id, completed_after=completed_after))
            except Exception:
                report.lists_failed += 1
                logger.exception("list_tasks failed list=%s title=%r", list_id, task_list.title)
                continue

            report.lists_scanned += 1

            for task in tasks:
                report.tasks_seen += 1
                if not task.is_completed or not task.notes:
                    continue

                try:
                    if not self._recur_task(list_id, task, now, report):
                        report.tasks_skipped += 1
                except MissingCompletionTime:
                    report.task_failures += 1
                    logger.warning(
                        "Skipping recurring task without completion time list=%s task=%s title=%r",
                        list_id,
                        task.id,
                        task.title,
                    )
                except Exception:
                    report.task_failures += 1
                    logger.exception("Recurrence failed list=%s task=%s", list_id, task.id)

        logger.info(
            "Recurrence scan done: lists=%d skipped=%d failed=%d tasks=%d created=%d marked=%d errors=%d",
            report.lists_scanned,
            report.lists_skipped,
            report.lists_failed,
            report.tasks_seen,
            report.successors_created,
            report.originals_marked,
            report.task_failures,
        )
        return report

    def _recur_task(self, list_id: str, task: TaskRecord, now: datetime, report: ScanReport) -> bool:
        """Returns False when the task is not eligible (nothing written)."""
        if not is_eligible(task, self._config):
            return False

        meta = read_metadata(task, self._config)
        if meta is None or meta.interval is None:
            return False

        logger.info(
            "Found recurring task %r (list=%s task=%s) interval=%s days",
            task.title,
            list_id,
            task.id,
            meta.interval,
        )

        spec = plan_next(task, meta.interval)
        created = self._store.insert_task(list_id, spec)
        report.successors_created += 1
        logger.info("Created next task %r due=%s id=%s", created.title, spec.due, created.id)

        notes = encode(meta, {self._config.processed_key: format_timestamp(now)})
        try:
            self._store.patch_task(list_id, task.id, {"notes": notes})
        except StoreOperationFailure:
            logger.error(
                "Successor %s created but original task=%s list=%s was not marked; "
                "the next run may create a duplicate",
                created.id,
                task.id,
                list_id,
            )
            raise

        report.originals_marked += 1
        logger.info("Marked task %r (task=%s) as processed", task.title, task.id)
        return True


async def run_recurrence_scheduler(
        scanner: RecurrenceScanner,
        *,
        interval_seconds: float = 24 * 3600.0,
) -> None:
    """
    Simple polling loop around RecurrenceScanner.run_once.

    Each run happens in a worker thread (the store client is blocking). A failed
    run is logged and the loop keeps going. To stop, cancel the coroutine/task.
    """
    sleep_s = max(0.5, float(interval_seconds))

    while True:
        try:
            await asyncio.to_thread(scanner.run_once)
        except Exception:
            logger.exception("Recurrence scan failed")

        await asyncio.sleep(sleep_s)
