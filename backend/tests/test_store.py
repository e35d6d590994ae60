from datetime import timedelta

import pytest

from hackclock import db
from hackclock.models import Timer
from hackclock.services.timer import StorageUnavailable, TimerRecord, TimerStore
from conftest import DAY_MS


def test_empty_store_has_no_current(flask_app):
    assert TimerStore(flask_app).get_current() is None


def test_replace_keeps_exactly_one_row(flask_app, clock):
    store = TimerStore(flask_app)
    store.replace(TimerRecord(start_time=clock(), duration_ms=DAY_MS))
    clock.advance(minutes=5)
    store.replace(TimerRecord(start_time=clock(), duration_ms=1000))

    assert Timer.query.count() == 1
    current = store.get_current()
    assert current.start_time == clock()
    assert current.duration_ms == 1000
    assert current.is_running is True


def test_clear_is_idempotent(flask_app, clock):
    store = TimerStore(flask_app)
    store.replace(TimerRecord(start_time=clock(), duration_ms=DAY_MS))
    store.clear()
    store.clear()
    assert store.get_current() is None
    assert Timer.query.count() == 0


def test_malformed_rows_read_as_missing(flask_app, clock):
    db.session.add(Timer(start_time=clock(), duration=0, is_running=True))
    db.session.commit()
    assert TimerStore(flask_app).get_current() is None


def test_record_expiry(clock):
    record = TimerRecord(start_time=clock(), duration_ms=DAY_MS)
    assert record.deadline == clock() + timedelta(days=1)
    assert record.is_live(clock() + timedelta(hours=23, minutes=59, seconds=59))
    assert record.is_expired(clock() + timedelta(days=1))
    assert not TimerRecord(start_time=clock(), duration_ms=DAY_MS, is_running=False).is_live(clock())


def test_unreachable_database_raises(flask_app, clock):
    store = TimerStore(flask_app)
    db.drop_all()
    with pytest.raises(StorageUnavailable):
        store.get_current()
    with pytest.raises(StorageUnavailable):
        store.replace(TimerRecord(start_time=clock(), duration_ms=DAY_MS))
    with pytest.raises(StorageUnavailable):
        store.clear()
