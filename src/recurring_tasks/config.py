# src/recurring_tasks/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (the access token is only needed for store calls).
- Recurrence knobs are handed to the scanner as an explicit RecurrenceConfig,
  not read from module globals.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

from .tasks.notes_codec import DEFAULT_INTERVAL_KEY, DEFAULT_PROCESSED_KEY

logger = logging.getLogger(__name__)

ENV_PREFIX = "RECUR"

DEFAULT_API_BASE_URL = "https://tasks.googleapis.com/tasks/v1"

# Extra lookback on top of the polling period, so a slow run never leaves a gap.
LOOKBACK_SAFETY_MARGIN = timedelta(hours=1)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Task-list service ----
    tasks_api_base_url: str
    access_token: str | None
    http_timeout_seconds: float

    # ---- Recurrence ----
    lookback_hours: float
    scan_interval_seconds: float
    interval_key: str
    processed_key: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "recurring-tasks").strip() or "recurring-tasks"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/recurring_tasks"))

        base_url = _env(_k("TASKS_API_BASE_URL"), DEFAULT_API_BASE_URL).strip() or DEFAULT_API_BASE_URL
        access_token = _first_env(_k("ACCESS_TOKEN"), "GOOGLE_TASKS_ACCESS_TOKEN", default=None)
        http_timeout_seconds = _env_float(_k("HTTP_TIMEOUT_SECONDS"), 20.0)

        lookback_hours = _env_float(_k("LOOKBACK_HOURS"), 24.0)
        scan_interval_seconds = _env_float(_k("SCAN_INTERVAL_SECONDS"), 24 * 3600.0)
        interval_key = _env(_k("INTERVAL_KEY"), DEFAULT_INTERVAL_KEY).strip() or DEFAULT_INTERVAL_KEY
        processed_key = _env(_k("PROCESSED_KEY"), DEFAULT_PROCESSED_KEY).strip() or DEFAULT_PROCESSED_KEY

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_api_base_url=base_url.rstrip("/"),
            access_token=access_token.strip() if access_token else None,
            http_timeout_seconds=http_timeout_seconds,
            lookback_hours=lookback_hours,
            scan_interval_seconds=scan_interval_seconds,
            interval_key=interval_key,
            processed_key=processed_key,
        )


@dataclass(frozen=True, slots=True)
class RecurrenceConfig:
    """
    What the scanner needs to know, passed in at construction.

    lookback: how far back to ask for completed tasks. It only has to exceed the
    time between runs; the processed marker is what prevents double processing.
    """

    interval_key: str = DEFAULT_INTERVAL_KEY
    processed_key: str = DEFAULT_PROCESSED_KEY
    lookback: timedelta = timedelta(hours=24)

    @classmethod
    def from_settings(cls, settings) -> "RecurrenceConfig":
        lookback = timedelta(hours=max(0.0, float(getattr(settings, "lookback_hours", 24.0))))
        period = timedelta(seconds=max(0.0, float(getattr(settings, "scan_interval_seconds", 0.0))))

        min_lookback = period + LOOKBACK_SAFETY_MARGIN
        if lookback < min_lookback:
            logger.info(
                "Lookback %s is shorter than scan interval + margin; using %s",
                lookback,
                min_lookback,
            )
            lookback = min_lookback

        return cls(
            interval_key=str(getattr(settings, "interval_key", DEFAULT_INTERVAL_KEY)),
            processed_key=str(getattr(settings, "processed_key", DEFAULT_PROCESSED_KEY)),
            lookback=lookback,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
