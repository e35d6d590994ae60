from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from hackclock import db
from hackclock.models import Timer


class StorageUnavailable(Exception):
    """The durable timer store could not be read or written."""


@dataclass(frozen=True)
class TimerRecord:
    start_time: datetime
    duration_ms: int
    is_running: bool = True

    @property
    def deadline(self) -> datetime:
        return self.start_time + timedelta(milliseconds=self.duration_ms)

    def is_expired(self, now: datetime) -> bool:
        return now - self.start_time >= timedelta(milliseconds=self.duration_ms)

    def is_live(self, now: datetime) -> bool:
        """Running and not yet past its deadline."""
        return self.is_running and not self.is_expired(now)


class TimerStore:
    """Single-row store for the countdown. No policy lives here.

    Each call runs in its own application context so the store can be used
    from request handlers and from background tasks alike.
    """

    def __init__(self, app):
        self._app = app

    def get_current(self) -> Optional[TimerRecord]:
        with self._app.app_context():
            try:
                row = Timer.query.order_by(Timer.id.desc()).first()
            except SQLAlchemyError as exc:
                db.session.rollback()
                self._app.logger.error(f"[store-error] read failed: {exc}")
                raise StorageUnavailable('timer store read failed') from exc
            if row is None:
                return None
            if row.start_time is None or not row.duration or row.duration <= 0:
                self._app.logger.warning(
                    f"[store-malformed] timer id={row.id} start_time={row.start_time} duration={row.duration}"
                )
                return None
            return TimerRecord(
                start_time=row.start_time_utc,
                duration_ms=int(row.duration),
                is_running=bool(row.is_running),
            )

    def replace(self, record: TimerRecord) -> None:
        """Retire any existing row and insert ``record`` in one transaction."""
        with self._app.app_context():
            try:
                Timer.query.delete()
                db.session.add(Timer(
                    start_time=record.start_time,
                    duration=record.duration_ms,
                    is_running=record.is_running,
                ))
                db.session.commit()
            except SQLAlchemyError as exc:
                db.session.rollback()
                self._app.logger.error(f"[store-error] replace failed: {exc}")
                raise StorageUnavailable('timer store write failed') from exc

    def clear(self) -> None:
        with self._app.app_context():
            try:
                Timer.query.delete()
                db.session.commit()
            except SQLAlchemyError as exc:
                db.session.rollback()
                self._app.logger.error(f"[store-error] clear failed: {exc}")
                raise StorageUnavailable('timer store clear failed') from exc
