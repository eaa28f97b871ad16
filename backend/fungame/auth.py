"""Bearer token issue/verification and the Flask-Login request loader."""

from datetime import datetime, timedelta, timezone

from flask import current_app, g
from jose import JWTError, jwt

from fungame.errors import APIError


def issue_token(user):
    cfg = current_app.config
    expires = datetime.now(timezone.utc) + timedelta(days=int(cfg.get('JWT_EXPIRES_DAYS', 7)))
    claims = {'user_id': user.id, 'email': user.email, 'exp': expires}
    return jwt.encode(claims, cfg['JWT_SECRET'], algorithm=cfg.get('JWT_ALGORITHM', 'HS256'))


def decode_token(token):
    """Return the token claims. Raises JWTError for bad or expired tokens."""
    cfg = current_app.config
    return jwt.decode(token, cfg['JWT_SECRET'], algorithms=[cfg.get('JWT_ALGORITHM', 'HS256')])


def user_from_token(token):
    """Resolve a token to a User, or None if it is invalid or the user is gone."""
    try:
        claims = decode_token(token)
    except JWTError:
        return None
    user_id = claims.get('user_id')
    if user_id is None:
        return None
    return db_get_user(user_id)


def db_get_user(user_id):
    from fungame import db
    from fungame.models import User
    return db.session.get(User, int(user_id))


def bearer_token(req):
    header = req.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


# Status code and message per failure reason
_AUTH_FAILURES = {
    'AUTH_TOKEN_MISSING': (401, 'Access token required'),
    'AUTH_TOKEN_INVALID': (403, 'Invalid or expired token'),
    'AUTH_USER_NOT_FOUND': (401, 'Invalid token - user not found'),
}


def init_login_manager(login_manager):
    @login_manager.request_loader
    def load_user_from_request(req):
        token = bearer_token(req)
        if not token:
            g.auth_error = 'AUTH_TOKEN_MISSING'
            return None
        try:
            claims = decode_token(token)
        except JWTError:
            g.auth_error = 'AUTH_TOKEN_INVALID'
            return None
        user = db_get_user(claims['user_id']) if claims.get('user_id') is not None else None
        if user is None:
            g.auth_error = 'AUTH_USER_NOT_FOUND'
        return user

    @login_manager.unauthorized_handler
    def unauthorized():
        code = g.get('auth_error', 'AUTH_TOKEN_MISSING')
        status, message = _AUTH_FAILURES[code]
        raise APIError(message, status, code)
