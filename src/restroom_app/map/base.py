"""Interface every map implementation provides."""
import logging
from .types import MapRegion


class MapImplementation:
    """Common state and marker dispatch for map backends.

    Subclasses build ``self.widget`` and implement the imperative methods.
    All methods run on the UI thread.
    """

    def __init__(self, context, region=None, markers=None, on_marker_press=None):
        self.context = context
        self.region = region or MapRegion(37.78825, -122.4324)
        self.markers = list(markers or [])
        self.on_marker_press = on_marker_press
        self.widget = None
        self.logger = logging.getLogger(self.__class__.__name__)

    def set_region(self, region):
        raise NotImplementedError

    def set_markers(self, markers):
        raise NotImplementedError

    def animate_to_region(self, region, duration=1000):
        raise NotImplementedError

    def animate_to_coordinate(self, latitude, longitude, duration=1000):
        """Centre on a coordinate keeping the current zoom."""
        raise NotImplementedError

    def fit_to_markers(self, markers, animated=True):
        raise NotImplementedError

    async def get_map_boundaries(self):
        """MapBounds of the visible area; MapUnavailableError without a map."""
        raise NotImplementedError

    def close(self):
        """Release background work tied to the widget."""

    def find_marker(self, marker_id):
        return next((m for m in self.markers if m.id == str(marker_id)), None)

    def dispatch_marker_press(self, marker_id):
        marker = self.find_marker(marker_id)
        if marker is None:
            self.logger.debug(f"Press on unknown marker {marker_id}")
            return
        if self.on_marker_press:
            self.on_marker_press(marker)
