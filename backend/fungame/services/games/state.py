"""Mutations of the JSON game-state blob stored on a game post.

Functions take and mutate a plain dict so they can be used on
`Post.game_state` without touching the session.
"""

from typing import Any, Dict

from .board import generate_board

DIFFICULTIES = ('easy', 'normal', 'hard')
POWER_UPS = ('shuffle', 'freeze')

STATUS_ACTIVE = 'active'
STATUS_COMPLETED = 'completed'

MOVE_SCORE = 10
MOVE_TIME_COST_SEC = 1
FREEZE_BONUS_SEC = 5


def new_game_state(difficulty: str, duration: int = 60, board_size: int = 8, rng=None) -> Dict[str, Any]:
    return {
        'difficulty': difficulty,
        'score': 0,
        'time_remaining': duration,
        'power_ups': list(POWER_UPS),
        'board': generate_board(board_size, rng),
        'status': STATUS_ACTIVE,
    }


def is_completed(state: Dict[str, Any]) -> bool:
    return state.get('status') == STATUS_COMPLETED


def apply_move(state: Dict[str, Any]) -> None:
    """Flat score increment; the move itself is not validated."""
    state['score'] = int(state.get('score', 0)) + MOVE_SCORE
    state['time_remaining'] = max(0, int(state.get('time_remaining', 0)) - MOVE_TIME_COST_SEC)


def apply_tick(state: Dict[str, Any], seconds: int) -> None:
    state['time_remaining'] = max(0, int(state.get('time_remaining', 0)) - int(seconds))


def use_power_up(state: Dict[str, Any], power_up: str, board_size: int = 8, rng=None) -> bool:
    """Consume `power_up` if still available. Returns False when it is not."""
    available = list(state.get('power_ups') or [])
    if power_up not in available:
        return False
    state['power_ups'] = [p for p in available if p != power_up]
    if power_up == 'freeze':
        state['time_remaining'] = int(state.get('time_remaining', 0)) + FREEZE_BONUS_SEC
    elif power_up == 'shuffle':
        state['board'] = generate_board(board_size, rng)
    return True


def finish_if_expired(state: Dict[str, Any]) -> bool:
    """Flip an active game to completed once its clock hits zero.

    Returns True only on the transition, so the caller records the score once.
    """
    if is_completed(state) or int(state.get('time_remaining', 0)) > 0:
        return False
    state['time_remaining'] = 0
    state['status'] = STATUS_COMPLETED
    return True
