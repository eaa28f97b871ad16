import os
import sys
import pytest

# Ensure the backend root (containing the `fungame` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from fungame import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    JWT_SECRET = 'test-jwt-secret'
    JWT_ALGORITHM = 'HS256'
    JWT_EXPIRES_DAYS = 7
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = 'WARNING'
    GAME_DURATION_SEC = 60
    GAME_BOARD_SIZE = 8
    LEADERBOARD_LIMIT = 100
    LEADERBOARD_BROADCAST_SEC = 5
    SHARE_DELAY_MS = 0


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import fungame.models  # noqa: F401
        db.create_all()
    # No context stays pushed: each request gets its own `g` and session
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def app_ctx(flask_app):
    """App context for tests that query the database directly."""
    with flask_app.app_context():
        yield flask_app


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


def register(client, username='player', email=None, password='password123'):
    res = client.post('/api/auth/register', json={
        'username': username,
        'email': email or f'{username}@example.com',
        'password_hash': password,
    })
    assert res.status_code == 201, res.get_json()
    return res.get_json()


def auth_headers(token):
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture()
def player(client):
    """A registered user: {'auth_token': ..., 'user': {...}}."""
    return register(client, 'player')


@pytest.fixture()
def headers(player):
    return auth_headers(player['auth_token'])


@pytest.fixture()
def sio_client(flask_app, player):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws',
        auth={'token': player['auth_token']},
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass
