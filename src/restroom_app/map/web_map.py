"""Web map: a Leaflet page hosted in a toga.WebView."""
import asyncio
import json
import toga
from toga.style import Pack
from .base import MapImplementation
from .types import (
    MapRegion, MapBounds, Coordinate, MapError, MapUnavailableError, LEAFLET_NOT_AVAILABLE, zoom_from_delta
)

LEAFLET_VERSION = '1.9.4'

TILE_LAYERS = {
    'standard': (
        'https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png',
        '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a>',
    ),
    'satellite': (
        'https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}',
        '&copy; <a href="https://www.esri.com/">Esri</a>',
    ),
    'terrain': (
        'https://{s}.tile.opentopomap.org/{z}/{x}/{y}.png',
        '&copy; <a href="https://opentopomap.org/">OpenTopoMap</a>',
    ),
}

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<link rel="stylesheet" href="https://unpkg.com/leaflet@{version}/dist/leaflet.css">
<script src="https://unpkg.com/leaflet@{version}/dist/leaflet.js"></script>
<style>html, body, #map {{ height: 100%; margin: 0; }}</style>
</head>
<body>
<div id="map"></div>
<script>
var map = null;
var markerLayer = null;
var pendingClicks = [];

function leafletReady() {{ return typeof L !== 'undefined' && map !== null; }}

if (typeof L !== 'undefined') {{
  map = L.map('map').setView([{lat}, {lng}], {zoom});
  L.tileLayer({tile_url}, {{attribution: {attribution}, maxZoom: 19}}).addTo(map);
  markerLayer = L.featureGroup().addTo(map);
}}

function setView(lat, lng, zoom) {{ map.setView([lat, lng], zoom); }}

function flyTo(lat, lng, zoom, seconds) {{
  map.flyTo([lat, lng], zoom === null ? map.getZoom() : zoom, {{duration: seconds}});
}}

function setMarkers(markers) {{
  markerLayer.clearLayers();
  markers.forEach(function (m) {{
    var marker = L.marker([m.latitude, m.longitude]);
    if (m.title || m.description) {{
      var popup = document.createElement('div');
      if (m.title) {{ var t = document.createElement('strong'); t.textContent = m.title; popup.appendChild(t); }}
      if (m.description) {{ var d = document.createElement('div'); d.textContent = m.description; popup.appendChild(d); }}
      marker.bindPopup(popup);
    }}
    marker.on('click', function () {{ pendingClicks.push(m.id); }});
    markerLayer.addLayer(marker);
  }});
}}

function fitMarkers(markers, animated) {{
  var bounds = L.latLngBounds(markers.map(function (m) {{ return [m.latitude, m.longitude]; }}));
  if (animated) {{ map.flyToBounds(bounds, {{padding: [20, 20]}}); }}
  else {{ map.fitBounds(bounds, {{padding: [20, 20]}}); }}
}}

function getBounds() {{
  var b = map.getBounds();
  return JSON.stringify({{north: b.getNorth(), east: b.getEast(), south: b.getSouth(), west: b.getWest()}});
}}

function drainMarkerClicks() {{
  var clicks = pendingClicks;
  pendingClicks = [];
  return JSON.stringify(clicks);
}}
</script>
</body>
</html>
"""


def marker_payload(markers):
    return [
        {'id': m.id, 'latitude': m.latitude, 'longitude': m.longitude,
         'title': m.title, 'description': m.description}
        for m in markers
    ]


def build_page(region, map_type='standard'):
    """Leaflet page centred on ``region``."""
    tile_url, attribution = TILE_LAYERS.get(map_type, TILE_LAYERS['standard'])
    return PAGE_TEMPLATE.format(
        version=LEAFLET_VERSION,
        lat=region.latitude,
        lng=region.longitude,
        zoom=zoom_from_delta(region.latitude_delta),
        tile_url=json.dumps(tile_url),
        attribution=json.dumps(attribution),
    )


class WebMap(MapImplementation):
    """Leaflet map driven through ``evaluate_javascript``.

    Calls made before the page has loaded only update the Python-side state,
    which is pushed to the page once it is ready. Marker clicks are queued in
    the page and collected by a polling task.
    """

    def __init__(self, context, region=None, markers=None, on_marker_press=None,
                 map_type='standard', poll_interval=0.5):
        super().__init__(context, region, markers, on_marker_press)
        self.map_type = map_type
        self.poll_interval = poll_interval
        self.ready = False
        self._poll_task = None
        self.widget = toga.WebView(on_webview_load=self._on_page_load, style=Pack(flex=1))
        self.context.set_loading(True)
        self.widget.set_content('https://localhost/', build_page(self.region, map_type))

    def _run(self, script):
        if not self.ready:
            return None
        return self.widget.evaluate_javascript(script)

    async def _on_page_load(self, widget, **kwargs):
        try:
            available = await self.widget.evaluate_javascript('leafletReady()')
        except Exception as e:
            self.logger.error(f"Could not query map page: {e}")
            available = False

        if not available:
            self.context.set_error(MapError(LEAFLET_NOT_AVAILABLE, 'Leaflet map library is not available'))
            return

        self.ready = True
        self.context.clear_error()
        self.context.set_loading(False)
        self.set_region(self.region)
        self.set_markers(self.markers)
        if self._poll_task is None:
            self._poll_task = asyncio.get_event_loop().create_task(self._poll_marker_clicks())

    async def _poll_marker_clicks(self):
        while self.ready:
            await asyncio.sleep(self.poll_interval)
            try:
                raw = await self.widget.evaluate_javascript('drainMarkerClicks()')
            except Exception as e:
                self.logger.debug(f"Marker click poll failed: {e}")
                continue
            for marker_id in json.loads(raw or '[]'):
                self.dispatch_marker_press(marker_id)

    def set_region(self, region):
        self.region = region
        self._run(f"setView({region.latitude}, {region.longitude}, {zoom_from_delta(region.latitude_delta)})")

    def set_markers(self, markers):
        self.markers = list(markers)
        self._run(f"setMarkers({json.dumps(marker_payload(self.markers))})")

    def animate_to_region(self, region, duration=1000):
        self.region = region
        zoom = zoom_from_delta(region.latitude_delta)
        self._run(f"flyTo({region.latitude}, {region.longitude}, {zoom}, {duration / 1000})")

    def animate_to_coordinate(self, latitude, longitude, duration=1000):
        self.region = MapRegion(latitude, longitude, self.region.latitude_delta, self.region.longitude_delta)
        self._run(f"flyTo({latitude}, {longitude}, null, {duration / 1000})")

    def fit_to_markers(self, markers, animated=True):
        if not markers:
            return
        self._run(f"fitMarkers({json.dumps(marker_payload(markers))}, {'true' if animated else 'false'})")

    async def get_map_boundaries(self):
        if not self.ready:
            raise MapUnavailableError('Map reference not available')
        bounds = json.loads(await self.widget.evaluate_javascript('getBounds()'))
        return MapBounds(
            north_east=Coordinate(bounds['north'], bounds['east']),
            south_west=Coordinate(bounds['south'], bounds['west']),
        )

    def close(self):
        self.ready = False
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None
