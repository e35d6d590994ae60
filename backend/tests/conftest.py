import os
import sys
from datetime import datetime, timedelta, timezone
import pytest

# Ensure the backend root (containing the `hackclock` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from hackclock import create_app, db, socketio


DAY_MS = 24 * 60 * 60 * 1000


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    TIMER_DURATION_MS = DAY_MS
    PRE_COUNTDOWN_FROM = 5
    PRE_COUNTDOWN_INTERVAL_SEC = 0
    CORS_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'


class FakeClock:
    def __init__(self, now=None):
        self.now = now or datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class RecordingHub:
    """Stands in for BroadcastHub and keeps every signal in emission order."""

    def __init__(self):
        self.events = []

    def pre_countdown(self, remaining):
        self.events.append(('preCountdown', remaining))

    def pre_countdown_end(self):
        self.events.append(('preCountdownEnd',))

    def timer_started(self):
        self.events.append(('timerStarted',))

    def timer_reset(self):
        self.events.append(('timerReset',))

    def names(self):
        return [e[0] for e in self.events]


class DeferredSpawn:
    """Collects pre-countdown tasks so a test decides when they run."""

    def __init__(self):
        self.pending = []

    def __call__(self, fn, *args):
        self.pending.append((fn, args))

    def run_all(self):
        while self.pending:
            fn, args = self.pending.pop(0)
            fn(*args)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import hackclock.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(flask_app, namespace='/')
    yield test_client
    try:
        test_client.disconnect(namespace='/')
    except Exception:
        pass


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def hub():
    return RecordingHub()


@pytest.fixture()
def deferred():
    return DeferredSpawn()
