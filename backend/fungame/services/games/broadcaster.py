import threading

from flask import current_app

from fungame import socketio
from .leaderboard import get_leaderboard

WS_NAMESPACE = '/ws'

_broadcaster_lock = threading.Lock()
_broadcaster_started = False


def broadcast_leaderboard_update(leaderboard_type: str = 'all_time') -> bool:
    """Push the current leaderboard to every connection on /ws.

    Must run inside an app context. Failures are logged and reported as
    False; a broadcast never breaks the caller.
    """
    try:
        limit = int(current_app.config.get('LEADERBOARD_LIMIT', 100))
        data = get_leaderboard(leaderboard_type, limit)
        socketio.emit('leaderboard_update', data, namespace=WS_NAMESPACE)
    except Exception as exc:
        current_app.logger.error(f"[broadcast] leaderboard update failed: {exc}")
        return False
    current_app.logger.debug(f"[broadcast] leaderboard entries={len(data)}")
    return True


def start_leaderboard_broadcaster(app) -> bool:
    """Start the periodic leaderboard push once per process.

    - No-ops in TESTING mode unless ENABLE_BROADCASTER_IN_TESTS is set
    - No-ops when LEADERBOARD_BROADCAST_SEC is 0
    Returns True only for the call that started the task.
    """
    global _broadcaster_started
    if app.config.get('TESTING') and not app.config.get('ENABLE_BROADCASTER_IN_TESTS'):
        return False
    interval = int(app.config.get('LEADERBOARD_BROADCAST_SEC', 5))
    if interval <= 0:
        return False
    with _broadcaster_lock:
        if _broadcaster_started:
            return False
        _broadcaster_started = True

    def _worker(period: int):
        app.logger.info(f"[broadcast-start] interval={period}s")
        while True:
            socketio.sleep(period)
            with app.app_context():
                broadcast_leaderboard_update()

    socketio.start_background_task(_worker, interval)
    return True
