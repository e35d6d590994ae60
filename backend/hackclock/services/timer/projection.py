"""What a viewer shows between syncs.

Viewers keep the last sync snapshot and recompute from it once a second;
nothing here is ever fed back to the server. On any signal or reconnect the
snapshot is re-pulled and the projection starts over from it.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

FINAL_COUNTDOWN_MS = 30 * 1000


@dataclass(frozen=True)
class Projection:
    running: bool
    remaining_ms: int = 0
    time_up: bool = False
    final_countdown: bool = False
    hours: str = '00'
    minutes: str = '00'
    seconds: str = '00'

    def display(self) -> str:
        return f"{self.hours}:{self.minutes}:{self.seconds}"


def parse_instant(value: str) -> datetime:
    """Parse the ``startTime`` of a snapshot (``...Z`` or explicit offset)."""
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def project(snapshot: Dict[str, Any], now: datetime) -> Projection:
    if not snapshot.get('running'):
        return Projection(running=False)

    start = parse_instant(snapshot['startTime'])
    elapsed_ms = (now - start) // timedelta(milliseconds=1)
    remaining = int(snapshot['duration']) - elapsed_ms
    if remaining <= 0:
        return Projection(running=True, time_up=True)

    hours = remaining // 3600000
    minutes = (remaining % 3600000) // 60000
    seconds = (remaining % 60000) // 1000
    return Projection(
        running=True,
        remaining_ms=remaining,
        final_countdown=remaining // 1000 <= FINAL_COUNTDOWN_MS // 1000,
        hours=f"{hours:02d}",
        minutes=f"{minutes:02d}",
        seconds=f"{seconds:02d}",
    )
