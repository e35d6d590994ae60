from flask import current_app, request
from flask_socketio import emit
from hackclock import socketio, get_timer
from hackclock.services.timer import StorageUnavailable


def handle_connect():
    current_app.logger.info(f"[viewer-connect] sid={_get_sid()}")
    emit('connected', {'message': 'Connected'})


def handle_disconnect(*args):
    # Viewers leaving never affects the countdown; they resync on reconnect
    current_app.logger.info(f"[viewer-disconnect] sid={_get_sid()}")


def handle_sync(data=None):
    """Socket equivalent of GET /timer for viewers that prefer not to poll."""
    try:
        snapshot = get_timer().snapshot()
    except StorageUnavailable as exc:
        current_app.logger.error(f"[storage-unavailable] sync sid={_get_sid()}: {exc}")
        emit('syncError', {'message': 'Storage unavailable'})
        return
    emit('timerState', snapshot)


def handle_ping(data=None):
    emit('pong', data or {})


def _get_sid() -> str:
    return request.sid  # type: ignore


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the viewer namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('sync', handle_sync, namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)
