# src/recurring_tasks/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs one of:
- scan: a single batch run (meant for cron / an external scheduler),
- run: the polling loop until SIGINT/SIGTERM,
- set-interval: make one task recurring (interactive path, errors are not swallowed).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from collections.abc import Sequence

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..core.errors import AuthenticationFailure, StoreOperationFailure
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..tasks.task_api import update_task
from ..tasks.task_models import TaskRecord
from ..tasks.task_scheduler import run_recurrence_scheduler

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="recurring-tasks", description="Recurring tasks for Google Tasks.")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("scan", help="Run one recurrence scan and exit (default).")
    sub.add_parser("run", help="Scan periodically until interrupted.")

    p_set = sub.add_parser("set-interval", help="Set the recurrence interval (days) of one task.")
    p_set.add_argument("list_id")
    p_set.add_argument("task_id")
    p_set.add_argument("days", type=int)
    return parser


async def _run_forever(state: AppState) -> None:
    interval_s = float(getattr(state.settings, "scan_interval_seconds", 24 * 3600.0))
    runner = asyncio.create_task(run_recurrence_scheduler(state.scanner, interval_seconds=interval_s))

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, runner.cancel)
        except (NotImplementedError, RuntimeError):
            # Some platforms (Windows) do not support loop signal handlers.
            pass

    logger.info("Polling every %.0fs, lookback=%s. Press Ctrl+C to stop.", interval_s, state.recurrence.lookback)
    try:
        await runner
    except asyncio.CancelledError:
        logger.info("Scheduler stopped.")


def _set_interval(state: AppState, list_id: str, task_id: str, days: int) -> int:
    current = next(
        (t for t in state.task_store.list_tasks(list_id, show_completed=True, show_hidden=True) if t.id == task_id),
        None,
    )
    if current is None:
        logger.error("Task %s not found in list %s", task_id, list_id)
        return 1

    updated: TaskRecord = update_task(state.task_store, list_id, current, interval=days, config=state.recurrence)
    print(f"{updated.title}: every {updated.interval} days")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s (%s)...", settings.app_name, args.command or "scan")

    state = create_initial_state(settings=settings)
    try:
        if args.command == "run":
            asyncio.run(_run_forever(state))
            return 0

        if args.command == "set-interval":
            try:
                return _set_interval(state, args.list_id, args.task_id, args.days)
            except AuthenticationFailure as e:
                logger.error("Not authenticated: %s", e)
                return 2
            except StoreOperationFailure as e:
                logger.error("%s", e)
                return 1

        report = state.scanner.run_once()
        return 1 if report.listing_failed else 0
    finally:
        state.close()
        logger.info("Bye.")


if __name__ == "__main__":
    sys.exit(main())
