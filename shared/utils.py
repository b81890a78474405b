"""Shared geo utilities for Restroom Finder.

The haversine helpers back both the data service's nearby-search procedure and
the client-side fallback used when that procedure is unavailable.
"""
import math
import logging

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
# Kilometres per degree of latitude (and of longitude at the equator)
KM_PER_DEGREE = 111.32


def haversine_km(lat1, lon1, lat2, lon2):
    """Great-circle distance between two coordinates in kilometres.

    Args:
        lat1, lon1: First coordinate in decimal degrees
        lat2, lon2: Second coordinate in decimal degrees

    Returns:
        float: Distance in kilometres
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (math.sin(d_lat / 2) ** 2 +
         math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) *
         math.sin(d_lon / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def with_distance(records, latitude, longitude):
    """Return shallow copies of ``records`` carrying a ``distance`` key (km).

    Records without usable coordinates are skipped and logged.
    """
    results = []
    for record in records:
        try:
            distance = haversine_km(latitude, longitude, float(record['latitude']), float(record['longitude']))
        except (KeyError, TypeError, ValueError):
            logger.warning(f"Skipping record without coordinates: {record.get('id')}")
            continue
        results.append({**record, 'distance': distance})
    return results


def filter_by_radius(records, latitude, longitude, radius_meters):
    """Keep records within ``radius_meters`` of a point, nearest first.

    Args:
        records: Iterable of dicts with ``latitude`` and ``longitude`` keys
        latitude: Centre latitude
        longitude: Centre longitude
        radius_meters: Search radius in metres

    Returns:
        list: Copies of the matching records with ``distance`` in kilometres,
        sorted ascending by distance
    """
    radius_km = radius_meters / 1000.0
    nearby = [r for r in with_distance(records, latitude, longitude) if r['distance'] <= radius_km]
    nearby.sort(key=lambda r: r['distance'])
    return nearby


def bounding_box(latitude, longitude, radius_meters):
    """Approximate lat/lng box enclosing a circle, used as a query prefilter.

    Returns:
        tuple: (min_lat, max_lat, min_lng, max_lng)
    """
    radius_km = radius_meters / 1000.0
    lat_delta = radius_km / KM_PER_DEGREE
    cos_lat = math.cos(math.radians(latitude))
    if cos_lat < 1e-6:
        lng_delta = 180.0
    else:
        lng_delta = min(180.0, radius_km / (KM_PER_DEGREE * cos_lat))
    return (
        max(-90.0, latitude - lat_delta),
        min(90.0, latitude + lat_delta),
        longitude - lng_delta,
        longitude + lng_delta,
    )


def format_distance(distance_km):
    """Human-readable distance for list cards ('350 m', '1.2 km')."""
    if distance_km is None:
        return ''
    if distance_km < 1:
        return f"{int(round(distance_km * 1000))} m"
    return f"{distance_km:.1f} km"
