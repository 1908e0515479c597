# src/recurring_tasks/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "recurring_tasks.log"

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers that report every HTTP exchange at INFO.
_TRANSPORT_LOGGERS = ("httpx", "httpcore")


class _ConsoleNoiseFilter(logging.Filter):
    """
    What reaches stderr when a scan runs from cron or a service unit.

    recurring_tasks records always pass. The HTTP transport is let through from
    WARNING, everything else (captured warnings included) only from ERROR.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name == "recurring_tasks" or name.startswith("recurring_tasks."):
            return True

        if name.startswith(_TRANSPORT_LOGGERS):
            return record.levelno >= logging.WARNING

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/recurring_tasks",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Attach a filtered stderr handler and a full-detail file handler to the root
    logger, and return the log file path.

    Handlers installed earlier on the root logger are dropped first, so running
    this twice in one process does not double every line.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.addFilter(_ConsoleNoiseFilter())

    to_file = logging.FileHandler(str(log_file), encoding="utf-8")
    to_file.setLevel(file_level)

    for handler in (console, to_file):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    # warnings.warn(...) shows up as 'py.warnings'.
    logging.captureWarnings(True)

    for name in _TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file
