"""Tests for the client authentication service."""
import json
import pytest
import requests
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock, patch
from src.restroom_app.services.auth_service import AuthService, SIGNED_IN, SIGNED_OUT, INITIAL_SESSION

USER = {'id': 'u1', 'email': 'jane@example.com', 'username': 'jane'}


def _session(hours=24):
    return {
        'access_token': 'token-123',
        'token_type': 'bearer',
        'expires_at': (datetime.now(timezone.utc) + timedelta(hours=hours)).isoformat(),
        'user': USER,
    }


def _response(status_code, body=None):
    resp = Mock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.json.return_value = body or {}
    return resp


@pytest.fixture
def auth(tmp_path):
    return AuthService('http://localhost:5000/', timeout=3, data_dir=tmp_path)


@patch('src.restroom_app.services.auth_service.requests')
def test_sign_in_persists_session(mock_requests, auth, tmp_path):
    """Test that a successful sign-in stores the session and notifies listeners."""
    mock_requests.post.return_value = _response(200, _session())
    events = []
    auth.on_auth_state_change(lambda event, session: events.append(event))

    ok, error = auth.sign_in('jane@example.com', 'secret1')

    assert (ok, error) == (True, None)
    mock_requests.post.assert_called_once_with('http://localhost:5000/api/auth/token', json={
        'email': 'jane@example.com', 'password': 'secret1',
    }, timeout=3)
    assert events == [INITIAL_SESSION, SIGNED_IN]
    assert auth.get_headers() == {'Authorization': 'Bearer token-123'}
    stored = json.loads((tmp_path / 'auth_session.json').read_text())
    assert stored['user'] == USER

    # A new instance starts signed in
    assert AuthService('http://localhost:5000', data_dir=tmp_path).is_authenticated()


@patch('src.restroom_app.services.auth_service.requests')
def test_sign_in_failure(mock_requests, auth):
    mock_requests.post.return_value = _response(400, {'error': 'Invalid login credentials'})

    assert auth.sign_in('jane@example.com', 'wrong') == (False, 'Invalid login credentials')
    assert not auth.is_authenticated()


@patch('src.restroom_app.services.auth_service.requests.post')
def test_sign_in_connection_error(mock_post, auth):
    mock_post.side_effect = requests.exceptions.ConnectionError('refused')

    ok, error = auth.sign_in('jane@example.com', 'secret1')
    assert ok is False
    assert error.startswith('Connection error:')


@patch('src.restroom_app.services.auth_service.requests')
def test_sign_up_starts_session(mock_requests, auth):
    mock_requests.post.return_value = _response(201, _session())

    assert auth.sign_up('jane@example.com', 'secret1', 'jane') == (True, None)
    assert auth.user == USER


@patch('src.restroom_app.services.auth_service.requests')
def test_sign_out_always_clears(mock_requests, auth, tmp_path):
    """Test that the local session is dropped even when the remote call fails."""
    mock_requests.post.return_value = _response(200, _session())
    mock_requests.exceptions = requests.exceptions
    auth.sign_in('jane@example.com', 'secret1')
    events = []
    auth.on_auth_state_change(lambda event, session: events.append((event, session)))

    mock_requests.post.side_effect = requests.exceptions.ConnectionError('offline')
    ok, error = auth.sign_out()

    assert ok is False
    assert 'offline' in error
    assert not auth.is_authenticated()
    assert not (tmp_path / 'auth_session.json').exists()
    assert events[-1] == (SIGNED_OUT, None)


def test_expired_session_is_dropped(tmp_path):
    (tmp_path / 'auth_session.json').write_text(json.dumps(_session(hours=-1)))

    auth = AuthService('http://localhost:5000', data_dir=tmp_path)

    assert auth.get_session() is None
    assert not (tmp_path / 'auth_session.json').exists()


def test_corrupt_session_file_ignored(tmp_path):
    (tmp_path / 'auth_session.json').write_text('{not json')
    assert AuthService('http://localhost:5000', data_dir=tmp_path).session is None


@patch('src.restroom_app.services.auth_service.requests')
def test_get_current_user(mock_requests, auth):
    mock_requests.post.return_value = _response(200, _session())
    auth.sign_in('jane@example.com', 'secret1')
    mock_requests.get.return_value = _response(200, dict(USER, restrooms_added=2, reviews_written=1))

    user = auth.get_current_user()

    assert user == dict(USER, restrooms_added=2, reviews_written=1)
    assert mock_requests.get.call_args.kwargs['headers'] == {'Authorization': 'Bearer token-123'}


@patch('src.restroom_app.services.auth_service.requests')
def test_get_current_user_rejected_token(mock_requests, auth):
    """Test that a 401 signs the user out."""
    mock_requests.post.return_value = _response(200, _session())
    auth.sign_in('jane@example.com', 'secret1')
    mock_requests.get.return_value = _response(401, {'error': 'Authentication required'})

    assert auth.get_current_user() is None
    assert not auth.is_authenticated()


@patch('src.restroom_app.services.auth_service.requests')
def test_get_current_user_server_error_uses_cached_identity(mock_requests, auth):
    mock_requests.post.return_value = _response(200, _session())
    auth.sign_in('jane@example.com', 'secret1')
    mock_requests.get.return_value = _response(500)

    assert auth.get_current_user() == {'id': 'u1', 'email': 'jane@example.com', 'username': None}


def test_get_current_user_signed_out(auth):
    assert auth.get_current_user() is None


def test_unsubscribe(auth):
    listener = Mock()
    unsubscribe = auth.on_auth_state_change(listener)
    listener.assert_called_once_with(INITIAL_SESSION, None)

    unsubscribe()
    auth._notify(SIGNED_OUT)
    assert listener.call_count == 1
