from flask import Flask, current_app
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def _allowed_origins(value):
    if not value or value.strip() == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def get_timer():
    """The timer state machine bound to the current app."""
    return current_app.extensions['hackclock']


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ORIGINS', '*'))

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Import models so metadata and migrations see the timer table
    from hackclock import models  # noqa: F401
    from hackclock.services.timer import BroadcastHub, TimerStateMachine, TimerStore

    # In TESTING the pre-countdown runs inline unless explicitly enabled
    if flask_app.config.get('TESTING') and not flask_app.config.get('ENABLE_TICKER_IN_TESTS'):
        spawn = None
    else:
        spawn = socketio.start_background_task

    hub = BroadcastHub(
        socketio,
        namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'),
        logger=flask_app.logger,
    )
    flask_app.extensions['hackclock'] = TimerStateMachine(
        TimerStore(flask_app),
        hub,
        duration_ms=flask_app.config['TIMER_DURATION_MS'],
        count_from=flask_app.config.get('PRE_COUNTDOWN_FROM', 5),
        interval_sec=flask_app.config.get('PRE_COUNTDOWN_INTERVAL_SEC', 1.0),
        spawn=spawn,
        logger=flask_app.logger,
    )

    from hackclock.api.timer import timer
    flask_app.register_blueprint(timer)

    from hackclock.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the timer table."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    @click.command('timer-status')
    def timer_status_command():
        """Prints the authoritative timer state and what viewers display."""
        from hackclock.services.timer.projection import project
        from hackclock.models import utcnow
        with flask_app.app_context():
            snapshot = get_timer().snapshot()
        view = project(snapshot, utcnow())
        if not view.running:
            click.echo('not running')
        elif view.time_up:
            click.echo('TIME UP')
        else:
            click.echo(f"{view.display()} remaining (started {snapshot['startTime']})")

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(timer_status_command)

    return flask_app
