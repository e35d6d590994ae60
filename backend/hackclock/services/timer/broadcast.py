PRE_COUNTDOWN = 'preCountdown'
PRE_COUNTDOWN_END = 'preCountdownEnd'
TIMER_STARTED = 'timerStarted'
TIMER_RESET = 'timerReset'


class BroadcastHub:
    """Fan-out of timer signals to every connected viewer.

    Delivery is best effort and at most once. Apart from the pre-countdown
    digit, a signal carries no data: viewers answer it by pulling the sync
    snapshot, so a lost or late signal costs nothing but latency.
    """

    def __init__(self, socketio, namespace='/', logger=None):
        self._socketio = socketio
        self._namespace = namespace
        self._logger = logger

    def _emit(self, event, *args):
        try:
            self._socketio.emit(event, *args, namespace=self._namespace)
        except Exception as exc:
            # A broken transport must never stall start/reset
            if self._logger is not None:
                self._logger.warning(f"[broadcast-error] event={event} error={exc}")

    def pre_countdown(self, remaining: int) -> None:
        self._emit(PRE_COUNTDOWN, remaining)

    def pre_countdown_end(self) -> None:
        self._emit(PRE_COUNTDOWN_END)

    def timer_started(self) -> None:
        self._emit(TIMER_STARTED)

    def timer_reset(self) -> None:
        self._emit(TIMER_RESET)
