from flask_socketio import ConnectionRefusedError, emit
from flask import current_app, request
from fungame import socketio
from fungame.auth import user_from_token
from fungame.services.games.broadcaster import WS_NAMESPACE, start_leaderboard_broadcaster
from fungame.services.games.leaderboard import LEADERBOARD_TYPES, get_leaderboard
from typing import Dict, Any

# Authenticated sockets: sid -> user info
_sid_to_user: Dict[str, Dict[str, Any]] = {}


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _handshake_token(auth) -> str:
    token = (auth or {}).get('token') if isinstance(auth, dict) else None
    return token or request.args.get('token')


def handle_connect(auth=None):
    token = _handshake_token(auth)
    if not token:
        current_app.logger.info("[ws-reject] missing token")
        raise ConnectionRefusedError('Authentication token required')
    user = user_from_token(token)
    if user is None:
        current_app.logger.info("[ws-reject] invalid token")
        raise ConnectionRefusedError('Authentication failed')

    _sid_to_user[_get_sid()] = {'id': user.id, 'username': user.username}
    current_app.logger.info(f"[ws-connect] user={user.username} connected")
    emit('connected', {'message': 'Connected to /ws', 'user': user.to_dict()})
    start_leaderboard_broadcaster(current_app._get_current_object())


def handle_disconnect(reason=None):
    info = _sid_to_user.pop(_get_sid(), None)
    if info:
        current_app.logger.info(f"[ws-disconnect] user={info['username']} disconnected")


def handle_request_leaderboard(data=None):
    leaderboard_type = (data or {}).get('leaderboard_type') or 'all_time'
    if leaderboard_type not in LEADERBOARD_TYPES:
        emit('error', {'message': 'Invalid leaderboard type', 'error_code': 'INVALID_LEADERBOARD_TYPE'})
        return
    limit = int(current_app.config.get('LEADERBOARD_LIMIT', 100))
    emit('leaderboard_update', get_leaderboard(leaderboard_type, limit))


def handle_ping(data=None):
    emit('pong', data or {})


def connected_users():
    return list(_sid_to_user.values())


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the '/ws' namespace."""
    socketio.on_event('connect', handle_connect, namespace=WS_NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=WS_NAMESPACE)
    socketio.on_event('request_leaderboard', handle_request_leaderboard, namespace=WS_NAMESPACE)
    socketio.on_event('ping', handle_ping, namespace=WS_NAMESPACE)
