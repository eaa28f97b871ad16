import time
from datetime import datetime, timezone

from flask import Blueprint, jsonify

from fungame.socketio_events import connected_users

main = Blueprint('main', __name__)

_started_at = time.monotonic()


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Fun-Game server!'})


@main.route('/api/health')
def health():
    return jsonify({
        'status': 'ok',
        'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        'uptime': round(time.monotonic() - _started_at, 3),
    })


@main.route('/api/websocket')
def websocket_info():
    return jsonify({
        'message': 'WebSocket endpoint available via Socket.IO',
        'endpoint': '/socket.io/',
        'namespace': '/ws',
        'connections': len(connected_users()),
        'authentication': 'Pass JWT token in handshake auth.token',
        'events': {
            'leaderboard_update': 'Receives real-time leaderboard data',
            'request_leaderboard': 'Ask for a leaderboard snapshot (optional leaderboard_type)',
            'ping': 'Replies with pong',
        },
    })
