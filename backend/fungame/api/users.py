from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required
from sqlalchemy import or_

from fungame import db
from fungame.errors import APIError, json_body
from fungame.models import Comment, Post, User
from fungame.schemas import UserSearch, UserUpdate

users = Blueprint('users', __name__)


def _require_owner(user_id, action):
    if current_user.id != user_id:
        raise APIError(f'You can only {action}', 403, 'FORBIDDEN')


@users.route('', methods=['GET'])
def search_users():
    params = UserSearch.model_validate(request.args.to_dict())
    query = User.query
    if params.query:
        pattern = f"%{params.query}%"
        query = query.filter(User.username.ilike(pattern) | User.email.ilike(pattern))
    column = getattr(User, params.sort_by)
    query = query.order_by(column.asc() if params.sort_order == 'asc' else column.desc())
    found = query.offset(params.offset).limit(params.limit).all()
    return jsonify([u.to_dict() for u in found])


@users.route('/<int:user_id>', methods=['GET'])
def get_user(user_id):
    user = db.session.get(User, user_id)
    if not user:
        raise APIError('User not found', 404, 'USER_NOT_FOUND')
    return jsonify(user.to_dict())


@users.route('/<int:user_id>', methods=['PUT'])
@login_required
def update_user(user_id):
    data = UserUpdate.model_validate(json_body(request))
    _require_owner(user_id, 'update your own profile')

    changes = data.model_dump(exclude_none=True)
    if not changes:
        raise APIError('No fields to update', 400, 'NO_FIELDS_TO_UPDATE')
    if 'username' in changes:
        changes['username'] = changes['username'].strip()
    if 'email' in changes:
        changes['email'] = changes['email'].lower().strip()

    clashes = []
    if 'username' in changes:
        clashes.append(User.username == changes['username'])
    if 'email' in changes:
        clashes.append(User.email == changes['email'])
    if clashes:
        taken = User.query.filter(User.id != user_id).filter(or_(*clashes)).first()
        if taken:
            raise APIError('User with this email or username already exists', 400, 'USER_ALREADY_EXISTS')

    user = current_user._get_current_object()
    for field, value in changes.items():
        setattr(user, field, value)
    db.session.add(user)
    db.session.commit()
    current_app.logger.info(f"[profile-update] user={user.id} fields={sorted(changes)}")
    return jsonify(user.to_dict())


@users.route('/<int:user_id>', methods=['DELETE'])
@login_required
def delete_user(user_id):
    _require_owner(user_id, 'delete your own account')

    # Remove dependent rows by hand: leaderboard entries, then game sessions
    post_ids = db.select(Post.id).where(Post.user_id == user_id)
    Comment.query.filter(Comment.post_id.in_(post_ids)).delete(synchronize_session=False)
    Comment.query.filter_by(user_id=user_id).delete(synchronize_session=False)
    Post.query.filter_by(user_id=user_id).delete(synchronize_session=False)
    deleted = User.query.filter_by(id=user_id).delete()
    if not deleted:
        db.session.rollback()
        raise APIError('User not found', 404, 'USER_NOT_FOUND')
    db.session.commit()
    current_app.logger.info(f"[account-delete] user={user_id}")
    return '', 204
