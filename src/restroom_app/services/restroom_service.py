"""Restroom data access over the data service's table and RPC endpoints."""
import logging
import requests
from .api_service import APIError
from shared.enums import VISIBLE_RESTROOM_STATUSES, AccessibilityFeature
from shared.utils import haversine_km, filter_by_radius
from shared.validation import Validator

VISIBLE_STATUS_PARAM = ','.join(s.value for s in VISIBLE_RESTROOM_STATUSES)


class RestroomServiceError(Exception):
    """A restroom operation failed; carries the service message and HTTP status."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def matches_query(restroom, query):
    """Case-insensitive substring match on name or address."""
    needle = query.strip().lower()
    return (needle in (restroom.get('name') or '').lower() or
            needle in (restroom.get('address') or '').lower())


def apply_filters(restrooms, filters):
    """Narrow search results by the search screen's filters.

    Args:
        restrooms: List of restroom dicts
        filters: dict with optional ``accessible`` (bool), ``free_access``
            (bool) and ``min_rating`` (int, 0 for any)
    """
    if not filters:
        return list(restrooms)

    results = []
    for restroom in restrooms:
        if filters.get('accessible'):
            features = restroom.get('accessibility_features') or []
            if AccessibilityFeature.WHEELCHAIR_ACCESSIBLE.value not in features:
                continue
        if filters.get('free_access') and (restroom.get('access_requirements') or '').strip():
            continue
        min_rating = filters.get('min_rating') or 0
        if min_rating and (restroom.get('average_rating') or 0) < min_rating:
            continue
        results.append(restroom)
    return results


class RestroomService:
    """Restroom, review and report operations.

    Every method blocks on the network; call from a worker thread.
    """

    def __init__(self, api_service, fallback_limit=50, page_size=500):
        self.api = api_service
        self.fallback_limit = fallback_limit
        self.page_size = page_size
        self.logger = logging.getLogger(self.__class__.__name__)

    def _call(self, method, endpoint, operation, **kwargs):
        try:
            return self.api.request_json(method, endpoint, **kwargs)
        except APIError as e:
            self.logger.error(f"Failed to {operation}: {e} ({e.status_code})")
            raise RestroomServiceError(str(e), e.status_code)
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Failed to {operation}: {e}")
            raise RestroomServiceError(f"Network error: {e}")

    def get_nearby_restrooms(self, latitude, longitude, radius=5000):
        """Restrooms within ``radius`` metres, nearest first, with ``distance`` in km.

        Tries the server procedure first; if it fails, computes distances
        locally over all visible restrooms; if that query fails too, returns
        an unfiltered page of visible restrooms.
        """
        self.logger.info(f"Getting nearby restrooms: ({latitude}, {longitude}) r={radius}m")
        try:
            try:
                results = self.api.request_json('POST', '/api/rpc/get_nearby_restrooms', json={
                    'lat': latitude,
                    'lng': longitude,
                    'radius_meters': radius,
                })
                self.logger.info(f"Found {len(results)} restrooms via RPC")
                return results
            except (APIError, requests.exceptions.RequestException) as e:
                self.logger.warning(f"Nearby search RPC failed, falling back to client-side filter: {e}")

            candidates = self._all_visible_restrooms()
            nearby = filter_by_radius(candidates, latitude, longitude, radius)
            self.logger.info(f"Fallback query kept {len(nearby)} of {len(candidates)} restrooms")
            return nearby
        except (APIError, requests.exceptions.RequestException) as e:
            self.logger.error(f"Error in nearby search fallback: {e}")

        self.logger.info("Using final fallback: unfiltered visible restrooms")
        return self._call('GET', '/api/restrooms', 'load restrooms', params={
            'status': VISIBLE_STATUS_PARAM,
            'limit': self.fallback_limit,
        }) or []

    def _all_visible_restrooms(self):
        """Every active or pending restroom, read page by page until an empty page."""
        restrooms = []
        while True:
            page = self.api.request_json('GET', '/api/restrooms', params={
                'status': VISIBLE_STATUS_PARAM,
                'limit': self.page_size,
                'offset': len(restrooms),
            })
            if not page:
                return restrooms
            restrooms.extend(page)

    def calculate_distance(self, lat1, lon1, lat2, lon2):
        """Haversine distance in kilometres."""
        return haversine_km(lat1, lon1, lat2, lon2)

    def search_restrooms(self, query, latitude, longitude, radius=50000, filters=None):
        """Nearby restrooms whose name or address contains ``query``, then filtered."""
        results = self.get_nearby_restrooms(latitude, longitude, radius)
        matched = [r for r in results if matches_query(r, query)]
        filtered = apply_filters(matched, filters)
        self.logger.info(f"Search '{query}' matched {len(matched)}, {len(filtered)} after filters")
        return filtered

    def get_restroom(self, restroom_id):
        """One restroom with its reviews (each with ``users.username``)."""
        return self._call('GET', f'/api/restrooms/{restroom_id}', 'get restroom')

    def create_restroom(self, restroom):
        """Create a restroom listing.

        Raises:
            ValidationError: If name, address, location or creator is missing
            RestroomServiceError: If the data service rejects the row
        """
        Validator.check_restroom_presence(restroom)
        created = self._call('POST', '/api/restrooms', 'create restroom', json=restroom)
        self.logger.info(f"Restroom created: {created.get('id')}")
        return created

    def update_restroom(self, restroom_id, updates):
        return self._call('PUT', f'/api/restrooms/{restroom_id}', 'update restroom', json=updates)

    def create_review(self, review):
        created = self._call('POST', '/api/reviews', 'create review', json=review)
        self.logger.info(f"Review created: {created.get('id')}")
        return created

    def get_reviews(self, restroom_id):
        """Reviews for a restroom, newest first."""
        return self._call('GET', f'/api/restrooms/{restroom_id}/reviews', 'get reviews') or []

    def report_restroom(self, restroom_id, user_id, report_type, description):
        return self._call('POST', '/api/reports', 'create report', json={
            'restroom_id': restroom_id,
            'user_id': user_id,
            'report_type': report_type,
            'description': description,
        })
