from datetime import datetime, timezone
from typing import Any, Dict

from .store import TimerStore


def format_instant(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a trailing ``Z``."""
    return value.astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S.') + f"{value.microsecond // 1000:03d}Z"


def read_snapshot(store: TimerStore, now: datetime) -> Dict[str, Any]:
    """Authoritative timer state as served to viewers.

    Expired records are reported as not running; nothing is written back.
    """
    record = store.get_current()
    if record is None or not record.is_live(now):
        return {'running': False}
    return {
        'running': True,
        'startTime': format_instant(record.start_time),
        'duration': record.duration_ms,
    }
