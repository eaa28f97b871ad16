from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from fungame.errors import APIError, json_body
from fungame.services.sharing import SHARE_PLATFORMS, share_to_social_media

shares = Blueprint('shares', __name__)


@shares.route('', methods=['POST'])
@login_required
def share_result():
    data = json_body(request)
    score = data.get('score')
    platform = data.get('platform')

    if isinstance(score, bool) or not isinstance(score, int) or score <= 0:
        raise APIError('Valid score required', 400, 'INVALID_SCORE')
    if platform not in SHARE_PLATFORMS:
        raise APIError('Valid platform required (twitter, facebook)', 400, 'INVALID_PLATFORM')

    result = share_to_social_media(
        platform, score,
        delay_ms=int(current_app.config.get('SHARE_DELAY_MS', 100)),
    )
    current_app.logger.info(f"[share] user={current_user.id} platform={platform} score={score}")
    return jsonify({'message': 'Share request accepted', 'share_result': result}), 202
