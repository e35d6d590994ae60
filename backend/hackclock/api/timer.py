from flask import Blueprint, jsonify, current_app
from hackclock import get_timer
from hackclock.services.timer import StorageUnavailable

timer = Blueprint('timer', __name__)


@timer.errorhandler(StorageUnavailable)
def storage_unavailable(exc):
    current_app.logger.error(f"[storage-unavailable] {exc}")
    return jsonify({'error': 'Storage unavailable'}), 500


@timer.route('/start', methods=['POST'])
def start_timer():
    """
    Starts the 5-4-3-2-1 pre-countdown, after which the timer runs.
    Repeated or concurrent calls while a countdown is underway are no-ops.
    """
    result = get_timer().start()
    return jsonify({'message': result.value})


@timer.route('/timer', methods=['GET'])
def get_timer_state():
    """
    Returns the authoritative timer state viewers compute remaining time from.
    """
    return jsonify(get_timer().snapshot())


@timer.route('/reset', methods=['POST'])
def reset_timer():
    """
    Cancels any pre-countdown and removes the running timer.
    """
    get_timer().reset()
    return jsonify({'message': 'Timer Reset'})
