"""Static stand-in used when no map library can be loaded."""
import toga
from toga.style import Pack
from toga.style.pack import COLUMN
from .base import MapImplementation
from .types import MapUnavailableError

PREVIEW_COUNT = 3


class FallbackMap(MapImplementation):
    """Lists the first few restrooms instead of drawing a map."""

    def __init__(self, context, region=None, markers=None, on_marker_press=None):
        super().__init__(context, region, markers, on_marker_press)
        self.count_label = toga.Label('', style=Pack(padding=(0, 0, 10, 0), color='#666666'))
        self.list_box = toga.Box(style=Pack(direction=COLUMN))
        self.widget = toga.Box(
            children=[
                toga.Label('Interactive Map', style=Pack(font_size=18, font_weight='bold', padding=(0, 0, 5, 0))),
                self.count_label,
                toga.Label('Full map functionality is not available on this device',
                           style=Pack(padding=(0, 0, 10, 0), color='#999999')),
                self.list_box,
            ],
            style=Pack(direction=COLUMN, padding=20, flex=1),
        )
        self._render()

    def _render(self):
        self.count_label.text = f"{len(self.markers)} restrooms found in your area"
        self.list_box.clear()
        for marker in self.markers[:PREVIEW_COUNT]:
            self.list_box.add(toga.Button(
                marker.title or 'Restroom',
                on_press=lambda w, marker_id=marker.id: self.dispatch_marker_press(marker_id),
                style=Pack(padding=(5, 0, 0, 0)),
            ))
            self.list_box.add(toga.Label(marker.description or '', style=Pack(color='#666666')))

    def set_region(self, region):
        self.region = region
        self.logger.debug("set_region ignored: no map available")

    def set_markers(self, markers):
        self.markers = list(markers)
        self._render()

    def animate_to_region(self, region, duration=1000):
        self.region = region
        self.logger.debug("animate_to_region ignored: no map available")

    def animate_to_coordinate(self, latitude, longitude, duration=1000):
        self.logger.debug("animate_to_coordinate ignored: no map available")

    def fit_to_markers(self, markers, animated=True):
        self.logger.debug("fit_to_markers ignored: no map available")

    async def get_map_boundaries(self):
        raise MapUnavailableError('Map reference not available')
