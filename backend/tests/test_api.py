from datetime import datetime, timedelta, timezone

from jose import jwt

from conftest import auth_headers, register


def test_health(client):
    res = client.get('/api/health')
    assert res.status_code == 200
    assert res.get_json()['status'] == 'ok'


def test_unknown_route_uses_error_envelope(client):
    res = client.get('/api/nope')
    assert res.status_code == 404
    body = res.get_json()
    assert body['success'] is False
    assert body['error_code'] == 'NOT_FOUND'


# ---- auth ----

def test_register_returns_token_and_user(client):
    res = client.post('/api/auth/register', json={
        'username': '  testuser ',
        'email': 'Test@Example.com',
        'password_hash': 'password123',
    })
    assert res.status_code == 201
    body = res.get_json()
    assert body['auth_token']
    assert body['user']['username'] == 'testuser'
    assert body['user']['email'] == 'test@example.com'
    assert 'password_hash' not in body['user']


def test_register_rejects_duplicates(client):
    register(client, 'dupe')
    res = client.post('/api/auth/register', json={
        'username': 'dupe', 'email': 'other@example.com', 'password_hash': 'x',
    })
    assert res.status_code == 400
    assert res.get_json()['error_code'] == 'USER_ALREADY_EXISTS'


def test_register_validates_shape(client):
    res = client.post('/api/auth/register', json={'username': '', 'email': 'not-an-email'})
    assert res.status_code == 400
    body = res.get_json()
    assert body['error_code'] == 'VALIDATION_ERROR'
    assert body['details']


def test_login(client):
    register(client, 'loginuser', 'login@example.com')
    res = client.post('/api/auth/login', json={'email': 'LOGIN@example.com', 'password_hash': 'password123'})
    assert res.status_code == 200
    assert res.get_json()['auth_token']


def test_login_rejects_invalid_credentials(client):
    register(client, 'invaliduser', 'invalid@example.com')
    res = client.post('/api/auth/login', json={'email': 'invalid@example.com', 'password_hash': 'wrong'})
    assert res.status_code == 401
    assert res.get_json()['error_code'] == 'INVALID_CREDENTIALS'

    res = client.post('/api/auth/login', json={'email': 'invalid@example.com'})
    assert res.status_code == 400
    assert res.get_json()['error_code'] == 'MISSING_REQUIRED_FIELDS'


def test_verify_token(client, player, headers):
    res = client.get('/api/auth/verify', headers=headers)
    assert res.status_code == 200
    assert res.get_json()['user']['id'] == player['user']['id']


def test_protected_route_token_errors(client, flask_app, player):
    res = client.get('/api/auth/verify')
    assert res.status_code == 401
    assert res.get_json()['error_code'] == 'AUTH_TOKEN_MISSING'

    res = client.get('/api/auth/verify', headers=auth_headers('garbage'))
    assert res.status_code == 403
    assert res.get_json()['error_code'] == 'AUTH_TOKEN_INVALID'

    expired = jwt.encode(
        {'user_id': int(player['user']['id']), 'exp': datetime.now(timezone.utc) - timedelta(seconds=5)},
        flask_app.config['JWT_SECRET'], algorithm='HS256',
    )
    res = client.get('/api/auth/verify', headers=auth_headers(expired))
    assert res.status_code == 403

    ghost = jwt.encode(
        {'user_id': 9999, 'exp': datetime.now(timezone.utc) + timedelta(days=1)},
        flask_app.config['JWT_SECRET'], algorithm='HS256',
    )
    res = client.get('/api/auth/verify', headers=auth_headers(ghost))
    assert res.status_code == 401
    assert res.get_json()['error_code'] == 'AUTH_USER_NOT_FOUND'


# ---- users ----

def test_get_user_profile(client, player):
    res = client.get(f"/api/users/{player['user']['id']}")
    assert res.status_code == 200
    assert res.get_json()['username'] == 'player'

    assert client.get('/api/users/424242').status_code == 404


def test_search_users(client):
    register(client, 'alice')
    register(client, 'bob')
    register(client, 'alina')
    res = client.get('/api/users?query=ali&sort_by=username&sort_order=asc')
    assert res.status_code == 200
    assert [u['username'] for u in res.get_json()] == ['alice', 'alina']

    res = client.get('/api/users?limit=1&offset=1&sort_by=username&sort_order=asc')
    assert [u['username'] for u in res.get_json()] == ['alina']

    res = client.get('/api/users?sort_by=password_hash')
    assert res.status_code == 400


def test_update_user_profile(client, player, headers):
    user_id = player['user']['id']
    res = client.put(f'/api/users/{user_id}', headers=headers,
                     json={'username': 'newusername', 'email': 'updated@example.com'})
    assert res.status_code == 200
    assert res.get_json()['username'] == 'newusername'
    assert res.get_json()['email'] == 'updated@example.com'

    res = client.put(f'/api/users/{user_id}', headers=headers, json={})
    assert res.status_code == 400
    assert res.get_json()['error_code'] == 'NO_FIELDS_TO_UPDATE'

    # password change takes effect at next login
    client.put(f'/api/users/{user_id}', headers=headers, json={'password_hash': 'changed'})
    res = client.post('/api/auth/login', json={'email': 'updated@example.com', 'password_hash': 'changed'})
    assert res.status_code == 200


def test_update_rejects_taken_username(client, player, headers):
    register(client, 'taken')
    res = client.put(f"/api/users/{player['user']['id']}", headers=headers, json={'username': 'taken'})
    assert res.status_code == 400
    assert res.get_json()['error_code'] == 'USER_ALREADY_EXISTS'


def test_cannot_modify_other_users(client, headers):
    other = register(client, 'other')
    res = client.put(f"/api/users/{other['user']['id']}", headers=headers, json={'username': 'hijack'})
    assert res.status_code == 403
    assert res.get_json()['error_code'] == 'FORBIDDEN'

    res = client.delete(f"/api/users/{other['user']['id']}", headers=headers)
    assert res.status_code == 403


def test_delete_user_removes_games_and_scores(client, flask_app, player, headers):
    from fungame.models import Comment, Post, User

    game = client.post('/api/games', headers=headers, json={'difficulty': 'easy'}).get_json()
    client.put(f"/api/games/{game['id']}", headers=headers, json={'move': True, 'tick': 60})

    res = client.delete(f"/api/users/{player['user']['id']}", headers=headers)
    assert res.status_code == 204
    with flask_app.app_context():
        assert User.query.count() == 0
        assert Post.query.count() == 0
        assert Comment.query.count() == 0

    # The token no longer resolves to a user
    res = client.get('/api/auth/verify', headers=headers)
    assert res.status_code == 401


# ---- shares ----

def test_share_result(client, headers):
    res = client.post('/api/shares', headers=headers, json={'score': 420, 'platform': 'twitter'})
    assert res.status_code == 202
    body = res.get_json()
    assert body['message'] == 'Share request accepted'
    assert body['share_result']['success'] is True
    assert body['share_result']['platform'] == 'twitter'
    assert '420' in body['share_result']['message']
    assert set(body['share_result']) == {'success', 'platform', 'message', 'share_url', 'timestamp'}


def test_share_validation(client, headers):
    res = client.post('/api/shares', headers=headers, json={'score': 'lots', 'platform': 'twitter'})
    assert res.get_json()['error_code'] == 'INVALID_SCORE'
    res = client.post('/api/shares', headers=headers, json={'score': 10, 'platform': 'myspace'})
    assert res.status_code == 400
    assert res.get_json()['error_code'] == 'INVALID_PLATFORM'
    assert client.post('/api/shares', json={'score': 10, 'platform': 'twitter'}).status_code == 401


def test_non_object_bodies_are_rejected(client, headers):
    for url, kwargs in (
        ('/api/auth/login', {}),
        ('/api/auth/register', {}),
        ('/api/shares', {'headers': headers}),
    ):
        for body in ([1, 2], 'text', 7):
            res = client.post(url, json=body, **kwargs)
            assert res.status_code == 400, url
            assert res.get_json()['error_code'] == 'VALIDATION_ERROR'


def test_whitespace_username_is_rejected(client, player, headers):
    res = client.post('/api/auth/register', json={
        'username': '   ', 'email': 'blank@example.com', 'password_hash': 'pw',
    })
    assert res.status_code == 400
    assert res.get_json()['error_code'] == 'VALIDATION_ERROR'

    res = client.put(f"/api/users/{player['user']['id']}", headers=headers, json={'username': '  '})
    assert res.status_code == 400
    assert res.get_json()['error_code'] == 'VALIDATION_ERROR'
