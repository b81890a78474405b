"""Native map backed by toga.MapView."""
import toga
from toga.style import Pack
from .base import MapImplementation
from .types import MapRegion, MapUnavailableError, zoom_from_delta, delta_from_zoom, region_bounds, region_for_markers


class NativeMap(MapImplementation):
    """toga.MapView with one toga.MapPin per marker.

    MapView animates location and zoom changes itself, so ``duration`` is
    accepted for interface parity only.
    """

    def __init__(self, context, region=None, markers=None, on_marker_press=None):
        super().__init__(context, region, markers, on_marker_press)
        self._pin_markers = {}
        self.widget = toga.MapView(
            location=(self.region.latitude, self.region.longitude),
            zoom=zoom_from_delta(self.region.latitude_delta),
            on_select=self._on_pin_select,
            style=Pack(flex=1),
        )
        self._render_pins()
        self.context.clear_error()

    def _render_pins(self):
        self.widget.pins.clear()
        self._pin_markers = {}
        for marker in self.markers:
            pin = toga.MapPin((marker.latitude, marker.longitude), title=marker.title or '',
                              subtitle=marker.description)
            self.widget.pins.add(pin)
            self._pin_markers[id(pin)] = marker

    def _on_pin_select(self, widget, *, pin, **kwargs):
        marker = self._pin_markers.get(id(pin))
        if marker is not None:
            self.dispatch_marker_press(marker.id)

    def set_region(self, region):
        self.region = region
        self.widget.location = (region.latitude, region.longitude)
        self.widget.zoom = zoom_from_delta(region.latitude_delta)

    def set_markers(self, markers):
        self.markers = list(markers)
        self._render_pins()

    def animate_to_region(self, region, duration=1000):
        self.set_region(region)

    def animate_to_coordinate(self, latitude, longitude, duration=1000):
        self.region = MapRegion(latitude, longitude, self.region.latitude_delta, self.region.longitude_delta)
        self.widget.location = (latitude, longitude)

    def fit_to_markers(self, markers, animated=True):
        region = region_for_markers(markers)
        if region is None:
            return
        self.set_region(region)

    async def get_map_boundaries(self):
        if self.widget is None:
            raise MapUnavailableError('Map reference not available')
        # MapView reports centre and zoom only; derive the span from the zoom
        location = self.widget.location
        lat_delta = delta_from_zoom(self.widget.zoom)
        ratio = self.region.longitude_delta / self.region.latitude_delta if self.region.latitude_delta else 1
        return region_bounds(MapRegion(location.lat, location.lng, lat_delta, lat_delta * ratio))
