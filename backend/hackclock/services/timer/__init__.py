"""Countdown timer services: storage, state machine, broadcast and sync.

The state machine is the only writer. Socket signals tell viewers *when* to
resync; the sync snapshot tells them *what* the timer is. HTTP routes and
socket handlers import from here and stay free of timer logic.
"""

from .store import StorageUnavailable, TimerRecord, TimerStore
from .broadcast import BroadcastHub
from .machine import StartResult, TimerPhase, TimerStateMachine
from .sync import format_instant, read_snapshot

__all__ = [
    'BroadcastHub',
    'StartResult',
    'StorageUnavailable',
    'TimerPhase',
    'TimerRecord',
    'TimerStateMachine',
    'TimerStore',
    'format_instant',
    'read_snapshot',
]
