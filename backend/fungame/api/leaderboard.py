from flask import Blueprint, current_app, jsonify, request

from fungame.errors import APIError
from fungame.services.games.leaderboard import LEADERBOARD_TYPES, get_leaderboard

leaderboard = Blueprint('leaderboard', __name__)


@leaderboard.route('', methods=['GET'])
def get_leaderboard_view():
    leaderboard_type = request.args.get('leaderboard_type') or 'all_time'
    if leaderboard_type not in LEADERBOARD_TYPES:
        raise APIError('Invalid leaderboard type', 400, 'INVALID_LEADERBOARD_TYPE')

    cap = int(current_app.config.get('LEADERBOARD_LIMIT', 100))
    raw_limit = request.args.get('limit')
    try:
        limit = cap if raw_limit is None else int(raw_limit)
    except ValueError:
        limit = 0
    if limit <= 0:
        raise APIError('limit must be a positive integer', 400, 'INVALID_LIMIT')
    return jsonify(get_leaderboard(leaderboard_type, min(limit, cap)))
