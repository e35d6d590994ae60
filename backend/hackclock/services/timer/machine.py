import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from hackclock.models import utcnow
from .broadcast import BroadcastHub
from .store import StorageUnavailable, TimerRecord, TimerStore
from .sync import read_snapshot


class TimerPhase(str, Enum):
    IDLE = 'idle'
    PRE_COUNTDOWN = 'pre_countdown'
    RUNNING = 'running'


class StartResult(str, Enum):
    STARTED = 'Countdown Started'
    ALREADY_RUNNING = 'Already Running'


@dataclass
class PreCountdownSession:
    remaining: int
    active: bool = True
    cancelled: threading.Event = field(default_factory=threading.Event)

    def cancel(self) -> None:
        self.active = False
        self.cancelled.set()


def _run_inline(fn, *args):
    fn(*args)


class TimerStateMachine:
    """Owns the lifecycle of the single shared countdown.

    Idle -> PreCountdown -> Running, and back to Idle through reset(). All
    transitions happen under one lock, which is what makes start() single
    flight: while a pre-countdown is in progress or a live timer exists,
    further starts are no-ops.

    The pre-countdown runs as a background task handed to ``spawn``. It
    re-checks under the lock that its session is still the current one before
    every emission and before committing the timer, so once reset() returns
    the cancelled sequence can neither tick nor start the timer.
    """

    def __init__(
        self,
        store: TimerStore,
        hub: BroadcastHub,
        duration_ms: int,
        count_from: int = 5,
        interval_sec: float = 1.0,
        clock=utcnow,
        spawn=None,
        logger=None,
    ):
        self._store = store
        self._hub = hub
        self._duration_ms = int(duration_ms)
        self._count_from = int(count_from)
        self._interval_sec = float(interval_sec)
        self._clock = clock
        self._spawn = spawn or _run_inline
        self._logger = logger
        self._lock = threading.Lock()
        self._phase = TimerPhase.IDLE
        self._session: Optional[PreCountdownSession] = None

    @property
    def phase(self) -> TimerPhase:
        return self._phase

    @property
    def session(self) -> Optional[PreCountdownSession]:
        return self._session

    @property
    def duration_ms(self) -> int:
        return self._duration_ms

    def _log(self, msg: str) -> None:
        if self._logger is not None:
            self._logger.info(msg)

    def start(self) -> StartResult:
        with self._lock:
            if self._phase is TimerPhase.PRE_COUNTDOWN:
                self._log("[countdown-skip] pre-countdown already in progress")
                return StartResult.ALREADY_RUNNING
            current = self._store.get_current()
            if current is not None and current.is_live(self._clock()):
                self._phase = TimerPhase.RUNNING
                self._log(f"[countdown-skip] timer running since {current.start_time.isoformat()}")
                return StartResult.ALREADY_RUNNING
            if current is not None:
                # Expired leftovers go before the pre-countdown begins
                self._store.clear()
            session = PreCountdownSession(remaining=self._count_from)
            self._session = session
            self._phase = TimerPhase.PRE_COUNTDOWN
        self._log(f"[countdown-start] from={self._count_from} interval={self._interval_sec}s")
        try:
            self._spawn(self._run_pre_countdown, session)
        except Exception:
            self._abandon(session)
            raise
        return StartResult.STARTED

    def _abandon(self, session: PreCountdownSession) -> None:
        with self._lock:
            session.active = False
            if self._session is session:
                self._session = None
                self._phase = TimerPhase.IDLE

    def _is_current(self, session: PreCountdownSession) -> bool:
        return self._session is session and session.active

    def _run_pre_countdown(self, session: PreCountdownSession) -> None:
        remaining = session.remaining
        while remaining > 0:
            with self._lock:
                if not self._is_current(session):
                    self._log(f"[countdown-abort] cancelled at {remaining}")
                    return
                session.remaining = remaining
                self._hub.pre_countdown(remaining)
            self._log(f"[countdown-tick] remaining={remaining}")
            if session.cancelled.wait(self._interval_sec):
                self._log(f"[countdown-abort] cancelled after {remaining}")
                return
            remaining -= 1

        with self._lock:
            if not self._is_current(session):
                self._log("[countdown-abort] cancelled before start")
                return
            session.remaining = 0
            self._hub.pre_countdown_end()
            record = TimerRecord(start_time=self._clock(), duration_ms=self._duration_ms)
            try:
                self._store.replace(record)
            except StorageUnavailable:
                session.active = False
                self._session = None
                self._phase = TimerPhase.IDLE
                if self._logger is not None:
                    self._logger.exception("[timer-start-failed] could not persist timer, back to idle")
                raise
            session.active = False
            self._session = None
            self._phase = TimerPhase.RUNNING
            self._hub.timer_started()
        self._log(
            f"[timer-started] start={record.start_time.isoformat()} duration={record.duration_ms}ms "
            f"deadline={record.deadline.isoformat()}"
        )

    def reset(self) -> None:
        with self._lock:
            session = self._session
            if session is not None:
                session.cancel()
            self._session = None
            self._phase = TimerPhase.IDLE
            self._store.clear()
            self._hub.timer_reset()
        self._log(f"[timer-reset] cancelled_pre_countdown={session is not None}")

    def snapshot(self):
        return read_snapshot(self._store, self._clock())
