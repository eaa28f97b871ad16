from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from fungame import db
from fungame.errors import APIError, json_body
from fungame.models import Post
from fungame.schemas import GameUpdate
from fungame.services.games.broadcaster import broadcast_leaderboard_update
from fungame.services.games.leaderboard import record_score
from fungame.services.games.state import (
    DIFFICULTIES,
    POWER_UPS,
    apply_move,
    apply_tick,
    finish_if_expired,
    is_completed,
    new_game_state,
    use_power_up,
)

games = Blueprint('games', __name__)


def _get_game_or_404(game_id: int) -> Post:
    game = db.session.get(Post, game_id)
    if not game:
        raise APIError('Game session not found', 404, 'GAME_NOT_FOUND')
    return game


def _get_owned_active_game(game_id: int) -> Post:
    game = _get_game_or_404(game_id)
    if game.user_id != current_user.id:
        raise APIError('You can only update your own games', 403, 'FORBIDDEN')
    if is_completed(game.game_state):
        raise APIError('Game session already completed', 400, 'GAME_COMPLETED')
    return game


def _save_game(game: Post, state: dict) -> dict:
    """Persist state; on the transition to completed record the score and push the board."""
    completed = finish_if_expired(state)
    game.game_state = state
    db.session.add(game)
    if completed:
        record_score(game.user_id, game.id, state['score'])
    db.session.commit()
    if completed:
        current_app.logger.info(f"[game-complete] game={game.id} user={game.user_id} score={state['score']}")
        broadcast_leaderboard_update()
    return game.to_game_dict()


@games.route('', methods=['POST'])
@login_required
def create_game():
    data = json_body(request)
    difficulty = data.get('difficulty')
    if difficulty not in DIFFICULTIES:
        raise APIError('Valid difficulty required (easy, normal, hard)', 400, 'INVALID_DIFFICULTY')

    cfg = current_app.config
    state = new_game_state(
        difficulty,
        duration=int(cfg.get('GAME_DURATION_SEC', 60)),
        board_size=int(cfg.get('GAME_BOARD_SIZE', 8)),
    )
    game = Post(user_id=current_user.id, title=difficulty)
    game.game_state = state
    db.session.add(game)
    db.session.commit()
    current_app.logger.info(f"[game-create] game={game.id} user={current_user.id} difficulty={difficulty}")
    return jsonify(game.to_game_dict()), 201


@games.route('/<int:game_id>', methods=['GET'])
def get_game(game_id):
    return jsonify(_get_game_or_404(game_id).to_game_dict())


@games.route('/<int:game_id>', methods=['PUT'])
@login_required
def update_game(game_id):
    data = GameUpdate.model_validate(json_body(request))
    game = _get_owned_active_game(game_id)
    state = game.game_state
    board_size = int(current_app.config.get('GAME_BOARD_SIZE', 8))

    if data.move:
        apply_move(state)
    if data.power_up:
        # Unknown or already used power-ups are ignored here
        use_power_up(state, data.power_up, board_size)
    if data.tick:
        apply_tick(state, data.tick)

    return jsonify(_save_game(game, state))


@games.route('/<int:game_id>/powerups', methods=['PUT'])
@login_required
def activate_power_up(game_id):
    data = json_body(request)
    power_up = data.get('power_up')
    if power_up not in POWER_UPS:
        raise APIError('Valid power-up required (shuffle, freeze)', 400, 'INVALID_POWER_UP')

    game = _get_owned_active_game(game_id)
    state = game.game_state
    if not use_power_up(state, power_up, int(current_app.config.get('GAME_BOARD_SIZE', 8))):
        raise APIError(f'Power-up {power_up} is no longer available', 400, 'POWER_UP_UNAVAILABLE')
    current_app.logger.info(f"[power-up] game={game.id} power_up={power_up}")
    return jsonify(_save_game(game, state))
