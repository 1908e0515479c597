# src/recurring_tasks/tasks/notes_codec.py

from __future__ import annotations

"""
Recurrence metadata stored inside a task's free-text notes.

The task-list service has no field for recurrence, so a recurring task carries a
JSON object as its whole notes string, e.g.:

    {"interval": 7}
    {"interval": 7, "lastRecurred": "2024-01-08T09:00:00.000Z"}

Anything else (prose, broken JSON, a JSON list) simply means "no metadata".
Notes are written by humans too, so that case is common and never an error.
Unknown keys are kept on every read/write.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

DEFAULT_INTERVAL_KEY = "interval"
DEFAULT_PROCESSED_KEY = "lastRecurred"


class NotesDecodeStatus(str, Enum):
    EMPTY = "empty"
    NOT_JSON = "not_json"
    NOT_OBJECT = "not_object"
    OK = "ok"


@dataclass(slots=True, frozen=True)
class RecurrenceMetadata:
    """
    Decoded notes object.

    fields: the whole JSON object, unknown keys included
    interval: days between occurrences, only when the stored value is a number
    last_recurred: processed marker value, if the task already spawned a successor
    """

    fields: dict[str, Any] = field(default_factory=dict)
    interval: float | None = None
    last_recurred: Any = None

    @property
    def is_recurring(self) -> bool:
        return self.interval is not None and self.interval > 0

    @property
    def is_processed(self) -> bool:
        return self.last_recurred is not None


@dataclass(slots=True, frozen=True)
class NotesDecoding:
    status: NotesDecodeStatus
    metadata: RecurrenceMetadata | None = None


def _is_number(value: Any) -> bool:
    # bool is an int subclass; {"interval": true} is not a day count.
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def decode_notes(
        notes: str | None,
        *,
        interval_key: str = DEFAULT_INTERVAL_KEY,
        processed_key: str = DEFAULT_PROCESSED_KEY,
) -> NotesDecoding:
    """Decode notes into an explicit result. Never raises."""
    if notes is None or not notes.strip():
        return NotesDecoding(NotesDecodeStatus.EMPTY)

    try:
        data = json.loads(notes)
    except (ValueError, RecursionError):
        return NotesDecoding(NotesDecodeStatus.NOT_JSON)

    if not isinstance(data, dict):
        return NotesDecoding(NotesDecodeStatus.NOT_OBJECT)

    raw_interval = data.get(interval_key)
    meta = RecurrenceMetadata(
        fields=data,
        interval=raw_interval if _is_number(raw_interval) else None,
        last_recurred=data.get(processed_key),
    )
    return NotesDecoding(NotesDecodeStatus.OK, meta)


def decode(
        notes: str | None,
        *,
        interval_key: str = DEFAULT_INTERVAL_KEY,
        processed_key: str = DEFAULT_PROCESSED_KEY,
) -> RecurrenceMetadata | None:
    """Metadata embedded in notes, or None when the notes are not a JSON object."""
    return decode_notes(notes, interval_key=interval_key, processed_key=processed_key).metadata


def encode(
        existing: RecurrenceMetadata | Mapping[str, Any] | None,
        patch: Mapping[str, Any] | None = None,
) -> str:
    """
    Merge `patch` into the existing metadata object and serialize it back to notes.

    existing may be decoded metadata, a plain mapping, or None (start from {}).
    decode(encode(meta, {})) == meta for metadata produced by decode().
    """
    if existing is None:
        merged: dict[str, Any] = {}
    elif isinstance(existing, RecurrenceMetadata):
        merged = dict(existing.fields)
    else:
        merged = dict(existing)

    if patch:
        merged.update(patch)

    return json.dumps(merged, ensure_ascii=False, separators=(",", ":"))


# ---- timestamps (RFC 3339, UTC) ----

def format_timestamp(dt: datetime) -> str:
    """Format as the service does: 2024-01-08T00:00:00.000Z. Naive datetimes are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(raw: Any) -> datetime | None:
    """Parse an RFC 3339 timestamp into an aware UTC datetime; None if absent or unparseable."""
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        dt = datetime.fromisoformat(raw.strip())
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
