"""Tests for the nearby-restrooms remote procedure."""
from datetime import datetime
import pytest
from backend.models import db, Restroom
from shared.enums import RestroomStatus
from src.restroom_app.services.api_service import APIError
from src.restroom_app.services.restroom_service import RestroomService

# Union Square, San Francisco
ORIGIN = {'lat': 37.7880, 'lng': -122.4075}


@pytest.fixture
def restrooms(app):
    """Restrooms at increasing distances from the origin."""
    rows = [
        ('Union Square', 37.7879, -122.4074, RestroomStatus.ACTIVE),             # ~15 m
        ('Westfield Centre', 37.7841, -122.4065, RestroomStatus.PENDING_REVIEW),  # ~440 m
        ('Golden Gate Park', 37.7694, -122.4862, RestroomStatus.ACTIVE),          # ~7 km
        ('Closed Kiosk', 37.7881, -122.4076, RestroomStatus.INACTIVE),
        ('Oakland Airport', 37.7126, -122.2197, RestroomStatus.ACTIVE),           # ~18 km
    ]
    with app.app_context():
        for name, lat, lng, status in rows:
            db.session.add(Restroom(name=name, address=f'{name}, CA', latitude=lat, longitude=lng, status=status))
        db.session.commit()


def test_nearby_sorted_by_distance(client, restrooms):
    """Test that results are visible restrooms within the radius, nearest first."""
    response = client.post('/api/rpc/get_nearby_restrooms', json={**ORIGIN, 'radius_meters': 10000})
    assert response.status_code == 200
    data = response.get_json()

    assert [r['name'] for r in data] == ['Union Square', 'Westfield Centre', 'Golden Gate Park']
    distances = [r['distance'] for r in data]
    assert distances == sorted(distances)
    assert distances[0] < 0.05
    assert all(d <= 10 for d in distances)


def test_nearby_default_radius(client, restrooms):
    """Test that the radius defaults to 5 km."""
    data = client.post('/api/rpc/get_nearby_restrooms', json=ORIGIN).get_json()
    assert [r['name'] for r in data] == ['Union Square', 'Westfield Centre']


def test_nearby_excludes_inactive(client, restrooms):
    data = client.post('/api/rpc/get_nearby_restrooms', json={**ORIGIN, 'radius_meters': 100}).get_json()
    assert [r['name'] for r in data] == ['Union Square']


def test_nearby_radius_capped(client, app, restrooms):
    """Test that oversized radii are clamped to the configured maximum."""
    app.config['MAX_NEARBY_RADIUS_METERS'] = 10000
    data = client.post('/api/rpc/get_nearby_restrooms', json={**ORIGIN, 'radius_meters': 10 ** 7}).get_json()
    assert 'Oakland Airport' not in [r['name'] for r in data]


def test_nearby_validation(client):
    """Test that missing or out-of-range parameters are refused."""
    assert client.post('/api/rpc/get_nearby_restrooms', json={'lat': 37.0}).status_code == 400
    assert client.post('/api/rpc/get_nearby_restrooms', json={'lat': 95, 'lng': 0}).status_code == 400
    assert client.post('/api/rpc/get_nearby_restrooms',
                       json={'lat': 0, 'lng': 0, 'radius_meters': 0}).status_code == 400
    assert client.post('/api/rpc/get_nearby_restrooms', json=[1, 2]).status_code == 400


def test_nearby_disabled(client, app):
    """Test that a disabled procedure answers like an unknown function."""
    app.config['NEARBY_RPC_ENABLED'] = False
    response = client.post('/api/rpc/get_nearby_restrooms', json=ORIGIN)
    assert response.status_code == 404
    assert response.get_json()['error'] == 'Function not found'


def test_nearby_across_antimeridian(client, app):
    """Test that a search box crossing 180 degrees still finds both sides."""
    with app.app_context():
        db.session.add(Restroom(name='Taveuni East', address='Fiji', latitude=-16.8, longitude=179.99,
                                status=RestroomStatus.ACTIVE))
        db.session.add(Restroom(name='Taveuni West', address='Fiji', latitude=-16.8, longitude=-179.99,
                                status=RestroomStatus.ACTIVE))
        db.session.commit()

    data = client.post('/api/rpc/get_nearby_restrooms',
                       json={'lat': -16.8, 'lng': 179.999, 'radius_meters': 5000}).get_json()
    assert {r['name'] for r in data} == {'Taveuni East', 'Taveuni West'}


class FlaskClientAPI:
    """Routes RestroomService calls through the Flask test client."""

    def __init__(self, client):
        self.client = client

    def request_json(self, method, endpoint, json=None, params=None):
        response = self.client.open(endpoint, method=method, json=json, query_string=params)
        if response.status_code >= 400:
            raise APIError(response.get_json()['error'], response.status_code)
        return response.get_json()


def test_fallback_reads_every_page(client, app):
    """Test that the client-side fallback finds an old restroom behind a full page of newer ones."""
    app.config['RESTROOM_LIST_LIMIT'] = 500
    with app.app_context():
        db.session.add(Restroom(name='Near old', address='Union Square, CA', latitude=37.7879, longitude=-122.4074,
                                status=RestroomStatus.ACTIVE, created_at=datetime(2020, 1, 1)))
        for i in range(500):
            db.session.add(Restroom(name=f'Far {i}', address='Nome, AK', latitude=64.5, longitude=-165.4,
                                    status=RestroomStatus.ACTIVE))
        db.session.commit()

    service = RestroomService(FlaskClientAPI(client))
    via_rpc = service.get_nearby_restrooms(ORIGIN['lat'], ORIGIN['lng'], 5000)

    app.config['NEARBY_RPC_ENABLED'] = False
    via_fallback = service.get_nearby_restrooms(ORIGIN['lat'], ORIGIN['lng'], 5000)

    assert [r['name'] for r in via_rpc] == ['Near old']
    assert [r['name'] for r in via_fallback] == ['Near old']


def test_list_offset_pages(client, restrooms):
    """Test that offset pages cover the list without overlap."""
    first = client.get('/api/restrooms?limit=2').get_json()
    second = client.get('/api/restrooms?limit=2&offset=2').get_json()
    rest = client.get('/api/restrooms?limit=2&offset=4').get_json()

    ids = [r['id'] for r in first + second + rest]
    assert len(ids) == 5
    assert len(set(ids)) == 5
    assert client.get('/api/restrooms?offset=5').get_json() == []
