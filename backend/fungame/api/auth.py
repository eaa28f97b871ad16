from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from fungame import db
from fungame.auth import issue_token
from fungame.errors import APIError, json_body
from fungame.models import User
from fungame.schemas import UserRegister

auth = Blueprint('auth', __name__)


@auth.route('/register', methods=['POST'])
def register():
    data = UserRegister.model_validate(json_body(request))
    username = data.username.strip()
    email = data.email.lower().strip()

    existing = User.query.filter((User.email == email) | (User.username == username)).first()
    if existing:
        raise APIError('User with this email or username already exists', 400, 'USER_ALREADY_EXISTS')

    user = User(username=username, email=email, password_hash=data.password_hash)
    db.session.add(user)
    db.session.commit()
    current_app.logger.info(f"[register] user={user.id} username={user.username}")

    return jsonify({'auth_token': issue_token(user), 'user': user.to_dict()}), 201


@auth.route('/login', methods=['POST'])
def login():
    data = json_body(request)
    email = data.get('email')
    password = data.get('password_hash')
    if not email or not password or not isinstance(email, str):
        raise APIError('Email and password are required', 400, 'MISSING_REQUIRED_FIELDS')

    user = User.query.filter_by(email=email.lower().strip()).first()
    if not user or not user.check_password(password):
        raise APIError('Invalid email or password', 401, 'INVALID_CREDENTIALS')

    current_app.logger.info(f"[login] user={user.id}")
    return jsonify({'auth_token': issue_token(user), 'user': user.to_dict()})


@auth.route('/verify', methods=['GET'])
@login_required
def verify():
    return jsonify({'user': current_user.to_dict()})
