"""Tests for the authentication endpoints."""
from datetime import timedelta
from backend.models import db, AuthSession


def test_sign_up_starts_session(client):
    """Test that sign-up creates the user and returns a bearer token."""
    response = client.post('/api/auth/signup', json={
        'email': 'Alice@Example.com', 'username': 'alice', 'password': 'secret1',
    })
    assert response.status_code == 201
    data = response.get_json()
    assert data['access_token']
    assert data['token_type'] == 'bearer'
    assert data['user']['email'] == 'alice@example.com'
    assert data['user']['username'] == 'alice'
    assert data['user']['role'] == 'user'


def test_sign_up_rejects_duplicates(client, sign_up):
    """Test that duplicate emails and usernames are refused."""
    sign_up()

    response = client.post('/api/auth/signup', json={
        'email': 'alice@example.com', 'username': 'other', 'password': 'secret1',
    })
    assert response.status_code == 400
    assert response.get_json()['error'] == 'User already registered'

    response = client.post('/api/auth/signup', json={
        'email': 'other@example.com', 'username': 'alice', 'password': 'secret1',
    })
    assert response.status_code == 400
    assert 'Username' in response.get_json()['error']


def test_sign_up_validation(client):
    """Test that short passwords and bad emails are refused."""
    response = client.post('/api/auth/signup', json={
        'email': 'bob@example.com', 'username': 'bob', 'password': '123',
    })
    assert response.status_code == 400
    assert 'Password should be at least 6' in response.get_json()['error']

    response = client.post('/api/auth/signup', json={
        'email': 'not-an-email', 'username': 'bob', 'password': 'secret1',
    })
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Invalid email'


def test_sign_in(client, sign_up):
    """Test password sign-in and the wrong-password case."""
    sign_up()

    response = client.post('/api/auth/token', json={'email': 'alice@example.com', 'password': 'secret1'})
    assert response.status_code == 200
    assert response.get_json()['access_token']

    response = client.post('/api/auth/token', json={'email': 'alice@example.com', 'password': 'wrong!!'})
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Invalid login credentials'


def test_current_user_profile(client, sign_up, restroom_payload):
    """Test that the profile carries contribution counts."""
    headers, user = sign_up()
    client.post('/api/restrooms', json=restroom_payload, headers=headers)

    response = client.get('/api/auth/user', headers=headers)
    assert response.status_code == 200
    data = response.get_json()
    assert data['id'] == user['id']
    assert data['restrooms_added'] == 1
    assert data['reviews_written'] == 0


def test_current_user_requires_token(client):
    """Test that the profile endpoint needs a valid token."""
    assert client.get('/api/auth/user').status_code == 401
    response = client.get('/api/auth/user', headers={'Authorization': 'Bearer nope'})
    assert response.status_code == 401


def test_sign_out_invalidates_token(client, sign_up):
    """Test that a token stops working after sign-out."""
    headers, _ = sign_up()

    assert client.post('/api/auth/logout', headers=headers).status_code == 200
    assert client.get('/api/auth/user', headers=headers).status_code == 401


def test_expired_session_rejected(client, app, sign_up):
    """Test that expired tokens are treated as anonymous and removed."""
    headers, _ = sign_up()
    token = headers['Authorization'].split(' ', 1)[1]

    with app.app_context():
        session = db.session.get(AuthSession, token)
        session.expires_at = session.created_at - timedelta(hours=1)
        db.session.commit()

    assert client.get('/api/auth/user', headers=headers).status_code == 401
    with app.app_context():
        assert db.session.get(AuthSession, token) is None
