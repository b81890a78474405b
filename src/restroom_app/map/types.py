"""Value types shared by the map implementations."""
import math
from dataclasses import dataclass, field
from typing import Optional, Any, List

MAP_NOT_AVAILABLE = 'MAP_NOT_AVAILABLE'
LEAFLET_NOT_AVAILABLE = 'LEAFLET_NOT_AVAILABLE'

MAX_ZOOM = 19


class MapUnavailableError(Exception):
    """No map is mounted to answer the request."""


@dataclass
class MapRegion:
    """Visible area: centre plus the span in degrees."""
    latitude: float
    longitude: float
    latitude_delta: float = 0.0922
    longitude_delta: float = 0.0421


@dataclass
class Coordinate:
    latitude: float
    longitude: float


@dataclass
class MapBounds:
    north_east: Coordinate
    south_west: Coordinate

    def contains(self, latitude, longitude):
        return (self.south_west.latitude <= latitude <= self.north_east.latitude and
                self.south_west.longitude <= longitude <= self.north_east.longitude)


@dataclass
class MapMarker:
    id: str
    latitude: float
    longitude: float
    title: Optional[str] = None
    description: Optional[str] = None
    # The record the marker stands for, handed back on press
    data: Any = None

    @classmethod
    def from_restroom(cls, restroom):
        return cls(
            id=str(restroom['id']),
            latitude=float(restroom['latitude']),
            longitude=float(restroom['longitude']),
            title=restroom.get('name'),
            description=restroom.get('address'),
            data=restroom,
        )


@dataclass
class MapError:
    code: str
    message: str
    details: Any = None


def zoom_from_delta(latitude_delta):
    """Tile zoom level showing ``latitude_delta`` degrees: round(log2(360 / delta))."""
    if latitude_delta <= 0:
        return MAX_ZOOM
    return max(0, min(MAX_ZOOM, round(math.log2(360 / latitude_delta))))


def delta_from_zoom(zoom):
    """Inverse of ``zoom_from_delta``."""
    return 360 / (2 ** zoom)


def region_bounds(region):
    """Corners of a region."""
    half_lat = region.latitude_delta / 2
    half_lng = region.longitude_delta / 2
    return MapBounds(
        north_east=Coordinate(min(90.0, region.latitude + half_lat), region.longitude + half_lng),
        south_west=Coordinate(max(-90.0, region.latitude - half_lat), region.longitude - half_lng),
    )


def region_for_markers(markers: List[MapMarker], padding=0.2, min_delta=0.005):
    """Smallest region showing every marker with a margin around them.

    Returns:
        MapRegion, or None for an empty list
    """
    if not markers:
        return None
    lats = [m.latitude for m in markers]
    lngs = [m.longitude for m in markers]
    lat_span = max(lats) - min(lats)
    lng_span = max(lngs) - min(lngs)
    return MapRegion(
        latitude=(max(lats) + min(lats)) / 2,
        longitude=(max(lngs) + min(lngs)) / 2,
        latitude_delta=max(min_delta, lat_span * (1 + padding)),
        longitude_delta=max(min_delta, lng_span * (1 + padding)),
    )
