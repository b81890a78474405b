"""Tests for backend utility functions."""
from datetime import date
from backend.models import db, User, Restroom, Review
from backend.utils import rating_summaries, validate_foreign_key, enum_value, isoformat, api_error
from shared.enums import OperationalStatus, RestroomStatus


def test_rating_summaries(app):
    """Test average rating and count per restroom."""
    with app.app_context():
        user = User(username='tester', email='tester@example.com', password_hash='hash')
        rated = Restroom(name='Rated', address='1 Main St', latitude=37.0, longitude=-122.0)
        unrated = Restroom(name='Unrated', address='2 Main St', latitude=37.0, longitude=-122.0)
        db.session.add_all([user, rated, unrated])
        db.session.commit()

        for rating in (5, 4, 4):
            db.session.add(Review(restroom_id=rated.id, user_id=user.id, cleanliness_rating=rating,
                                  operational_status=OperationalStatus.WORKING, visit_date=date(2024, 2, 1)))
        db.session.commit()

        summaries = rating_summaries([rated.id, unrated.id])
        assert summaries[rated.id] == (4.33, 3)
        assert unrated.id not in summaries
        assert rating_summaries([]) == {}


def test_validate_foreign_key(app):
    with app.app_context():
        restroom = Restroom(name='Rated', address='1 Main St', latitude=37.0, longitude=-122.0)
        db.session.add(restroom)
        db.session.commit()

        assert validate_foreign_key('restrooms', restroom.id) is True
        assert validate_foreign_key('restrooms', 'missing') is False
        assert validate_foreign_key('restrooms', None) is True
        assert validate_foreign_key('unknown_table', restroom.id) is False


def test_api_error(app):
    with app.test_request_context():
        response, status = api_error('Nope', 418)
        assert status == 418
        assert response.get_json() == {'error': 'Nope'}


def test_serialization_helpers():
    assert enum_value(RestroomStatus.ACTIVE) == 'active'
    assert enum_value('plain') == 'plain'
    assert isoformat(date(2024, 1, 2)) == '2024-01-02'
    assert isoformat(None) is None
