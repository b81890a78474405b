"""Cross-platform map: one interface over toga.MapView and a Leaflet WebView."""
import logging
import toga
from toga.style import Pack
from toga.style.pack import COLUMN
from .provider import MapContext, detect_platform, NATIVE, WEB
from .types import (
    MapRegion, MapMarker, MapBounds, Coordinate, MapError, MapUnavailableError,
    MAP_NOT_AVAILABLE, LEAFLET_NOT_AVAILABLE, zoom_from_delta,
)
from .base import MapImplementation
from .fallback_map import FallbackMap

logger = logging.getLogger(__name__)


def create_map(context, region=None, markers=None, on_marker_press=None, map_type='standard', poll_interval=0.5):
    """Build the map implementation for ``context.platform``.

    If the platform's map cannot be created, the error is recorded on the
    context and a FallbackMap is returned instead.
    """
    if context.platform == WEB:
        try:
            from .web_map import WebMap
            return WebMap(context, region, markers, on_marker_press, map_type=map_type, poll_interval=poll_interval)
        except Exception as e:
            logger.warning(f"Leaflet map unavailable: {e}")
            context.set_error(MapError(LEAFLET_NOT_AVAILABLE, 'Leaflet map library is not available', str(e)))
    else:
        try:
            from .native_map import NativeMap
            return NativeMap(context, region, markers, on_marker_press)
        except Exception as e:
            logger.warning(f"Native map unavailable: {e}")
            context.set_error(MapError(MAP_NOT_AVAILABLE,
                                       'Native map component is not available on this platform', str(e)))
    return FallbackMap(context, region, markers, on_marker_press)


class MapComponent:
    """A map plus its loading overlay and error line, as one widget tree.

    Imperative calls are forwarded to the implementation.
    """

    def __init__(self, context=None, region=None, markers=None, on_marker_press=None,
                 map_type='standard', poll_interval=0.5, force_platform=None):
        self.context = context or MapContext(detect_platform(force_platform))
        self.implementation = create_map(self.context, region, markers, on_marker_press,
                                         map_type=map_type, poll_interval=poll_interval)

        self.loading_overlay = toga.Box(
            children=[
                toga.ActivityIndicator(running=True, style=Pack(padding=10)),
                toga.Label('Loading map...', style=Pack(color='#6B7280')),
            ],
            style=Pack(direction=COLUMN, padding=10),
        )
        self.error_label = toga.Label('', style=Pack(color='#EF4444', padding=(5, 10)))
        self.widget = toga.Box(
            children=[self.loading_overlay, self.error_label, self.implementation.widget],
            style=Pack(direction=COLUMN, flex=1),
        )
        self._unsubscribe = self.context.subscribe(self._on_context_change)
        self._on_context_change(self.context)

    def _on_context_change(self, context):
        self.loading_overlay.style.visibility = 'visible' if context.is_loading else 'hidden'
        self.error_label.text = context.error.message if context.error else ''

    @property
    def region(self):
        return self.implementation.region

    def set_region(self, region):
        self.implementation.set_region(region)

    def set_markers(self, markers):
        self.implementation.set_markers(markers)

    def animate_to_region(self, region, duration=1000):
        self.implementation.animate_to_region(region, duration)

    def animate_to_coordinate(self, latitude, longitude, duration=1000):
        self.implementation.animate_to_coordinate(latitude, longitude, duration)

    def fit_to_markers(self, markers, animated=True):
        self.implementation.fit_to_markers(markers, animated)

    async def get_map_boundaries(self):
        return await self.implementation.get_map_boundaries()

    def close(self):
        self._unsubscribe()
        self.implementation.close()


__all__ = [
    'MapComponent', 'MapContext', 'MapImplementation', 'FallbackMap', 'create_map', 'detect_platform',
    'MapRegion', 'MapMarker', 'MapBounds', 'Coordinate', 'MapError', 'MapUnavailableError',
    'MAP_NOT_AVAILABLE', 'LEAFLET_NOT_AVAILABLE', 'NATIVE', 'WEB', 'zoom_from_delta',
]
