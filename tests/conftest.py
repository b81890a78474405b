"""Pytest configuration and fixtures for Restroom Finder tests."""
import pytest
import tempfile
import os
from backend.app import create_app
from backend.models import db, User
from shared.enums import UserRole


@pytest.fixture
def app():
    """Create and configure a test app instance."""
    # Create temporary database for testing
    db_fd, db_path = tempfile.mkstemp()

    test_config = {
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f'sqlite:///{db_path}',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    }

    app = create_app(test_config)

    with app.app_context():
        db.create_all()

    yield app

    # Cleanup
    with app.app_context():
        db.session.remove()
        db.engine.dispose()
    os.close(db_fd)
    os.unlink(db_path)


@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """A test runner for the app's Click commands."""
    return app.test_cli_runner()


@pytest.fixture
def sign_up(client, app):
    """Register a user through the API; returns (auth headers, user dict)."""
    def _sign_up(email='alice@example.com', username='alice', password='secret1', moderator=False):
        response = client.post('/api/auth/signup', json={
            'email': email, 'username': username, 'password': password,
        })
        assert response.status_code == 201, response.get_json()
        session = response.get_json()

        if moderator:
            with app.app_context():
                user = db.session.get(User, session['user']['id'])
                user.role = UserRole.MODERATOR
                db.session.commit()

        return {'Authorization': f"Bearer {session['access_token']}"}, session['user']
    return _sign_up


@pytest.fixture
def restroom_payload():
    return {
        'name': 'Ferry Building Restroom',
        'address': '1 Ferry Building, San Francisco, CA',
        'latitude': 37.7955,
        'longitude': -122.3937,
        'description': 'Ground floor near the north entrance',
        'accessibility_features': ['Wheelchair Accessible', 'Baby Changing Station'],
        'operating_hours': '7:00 AM - 10:00 PM',
        'access_requirements': None,
    }
