"""Normalization of log calls into LogEntry objects."""

import json
from datetime import datetime, timezone
from typing import Any, Optional

from runtime.models.log_models import LogEntry, LogLevel


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T12:00:00.000Z"""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_text(message: Any) -> str:
    """Convert any message value to text.

    Strings pass through unchanged; everything else is serialized to JSON,
    falling back to ``repr`` for values JSON cannot represent (e.g.
    circular structures, or objects whose ``__str__`` raises), and to
    ``object.__repr__`` when ``repr`` raises too. Never raises.
    """
    if isinstance(message, str):
        return message
    try:
        return json.dumps(message, default=str, ensure_ascii=False)
    except Exception:
        pass
    try:
        return repr(message)
    except Exception:
        return object.__repr__(message)


def build_entry(level: LogLevel, message: Any, now: Optional[datetime] = None) -> LogEntry:
    return LogEntry(timestamp=utc_timestamp(now), level=level, message=to_text(message))
