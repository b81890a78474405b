"""Tests for the cross-platform map layer."""
import asyncio
import pytest
from unittest.mock import Mock, AsyncMock, patch
from src.restroom_app.map import (
    create_map, detect_platform, MapContext, FallbackMap, MapRegion, MapMarker, MapError,
    MapUnavailableError, MAP_NOT_AVAILABLE, LEAFLET_NOT_AVAILABLE, NATIVE, WEB,
)
from src.restroom_app.map.types import (
    zoom_from_delta, delta_from_zoom, region_bounds, region_for_markers, MAX_ZOOM,
)
from src.restroom_app.map.native_map import NativeMap
from src.restroom_app.map.web_map import WebMap, build_page, marker_payload


def _markers():
    return [
        MapMarker('a', 37.70, -122.50, 'A', 'First St'),
        MapMarker('b', 37.80, -122.40, 'B', 'Second St'),
    ]


class TestRegionMath:
    """Test zoom and region conversions."""

    def test_zoom_from_delta(self):
        assert zoom_from_delta(360) == 0
        assert zoom_from_delta(0.0922) == 12
        assert zoom_from_delta(0) == MAX_ZOOM
        assert zoom_from_delta(1e-9) == MAX_ZOOM
        assert zoom_from_delta(10000) == 0

    def test_delta_from_zoom(self):
        assert delta_from_zoom(0) == 360
        assert zoom_from_delta(delta_from_zoom(7)) == 7

    def test_region_bounds(self):
        bounds = region_bounds(MapRegion(10, 20, 2, 4))
        assert (bounds.north_east.latitude, bounds.north_east.longitude) == (11, 22)
        assert (bounds.south_west.latitude, bounds.south_west.longitude) == (9, 18)
        assert bounds.contains(10, 20)
        assert not bounds.contains(12, 20)

    def test_region_for_markers(self):
        region = region_for_markers(_markers(), padding=0.2)
        assert region.latitude == pytest.approx(37.75)
        assert region.longitude == pytest.approx(-122.45)
        assert region.latitude_delta == pytest.approx(0.12)
        assert region_for_markers([]) is None

    def test_region_for_single_marker_uses_minimum_span(self):
        region = region_for_markers(_markers()[:1])
        assert region.latitude_delta == 0.005
        assert region.longitude_delta == 0.005

    def test_marker_from_restroom(self):
        restroom = {'id': 7, 'latitude': '37.7', 'longitude': '-122.4', 'name': 'Library', 'address': 'Larkin'}
        marker = MapMarker.from_restroom(restroom)
        assert marker.id == '7'
        assert marker.latitude == 37.7
        assert marker.data is restroom


class TestMapContext:
    """Test shared loading and error state."""

    def test_detect_platform_override(self):
        assert detect_platform('web') == WEB
        assert detect_platform('native') == NATIVE

    def test_subscribe_and_error(self):
        context = MapContext(NATIVE)
        seen = []
        unsubscribe = context.subscribe(lambda c: seen.append((c.is_loading, c.error)))

        context.set_loading(True)
        error = MapError(MAP_NOT_AVAILABLE, 'No map')
        context.set_error(error)
        context.clear_error()
        unsubscribe()
        context.set_loading(True)

        assert seen == [(True, None), (False, error), (False, None)]

    def test_failing_subscriber_does_not_block_others(self):
        context = MapContext(WEB)
        called = []
        context.subscribe(Mock(side_effect=RuntimeError('boom')))
        context.subscribe(lambda c: called.append(c))

        context.set_loading(True)

        assert called == [context]


class TestCreateMap:
    """Test implementation selection and fallback."""

    @patch('src.restroom_app.map.fallback_map.toga')
    @patch('src.restroom_app.map.native_map.toga')
    def test_native_failure_falls_back(self, native_toga, fallback_toga):
        native_toga.MapView.side_effect = RuntimeError('no MapView backend')
        context = MapContext(NATIVE)

        implementation = create_map(context, markers=_markers())

        assert isinstance(implementation, FallbackMap)
        assert context.error.code == MAP_NOT_AVAILABLE

    @patch('src.restroom_app.map.fallback_map.toga')
    @patch('src.restroom_app.map.web_map.toga')
    def test_web_failure_falls_back(self, web_toga, fallback_toga):
        web_toga.WebView.side_effect = RuntimeError('no WebView backend')
        context = MapContext(WEB)

        implementation = create_map(context)

        assert isinstance(implementation, FallbackMap)
        assert context.error.code == LEAFLET_NOT_AVAILABLE

    @patch('src.restroom_app.map.native_map.toga')
    def test_native_pin_select_dispatches_marker(self, native_toga):
        pins = []
        native_toga.MapView.return_value.pins.add.side_effect = pins.append
        native_toga.MapPin.side_effect = lambda *args, **kwargs: Mock()
        pressed = []
        context = MapContext(NATIVE)

        implementation = create_map(context, markers=_markers(), on_marker_press=pressed.append)
        implementation._on_pin_select(implementation.widget, pin=pins[1])

        assert [m.id for m in pressed] == ['b']
        assert context.error is None


@patch('src.restroom_app.map.fallback_map.toga')
def test_fallback_map(mock_toga):
    """Test that the fallback lists markers and refuses boundary queries."""
    pressed = []
    fallback = FallbackMap(MapContext(NATIVE), markers=_markers(), on_marker_press=pressed.append)

    assert fallback.count_label.text == '2 restrooms found in your area'
    fallback.dispatch_marker_press('a')
    fallback.dispatch_marker_press('missing')
    assert [m.id for m in pressed] == ['a']

    fallback.animate_to_region(MapRegion(1, 2))
    assert fallback.region == MapRegion(1, 2)

    with pytest.raises(MapUnavailableError):
        asyncio.run(fallback.get_map_boundaries())


class TestWebMap:
    """Test the Leaflet page and its bridge."""

    def test_build_page(self):
        page = build_page(MapRegion(37.5, -122.25, 0.0922), 'satellite')
        assert 'leaflet@1.9.4' in page
        assert 'setView([37.5, -122.25], 12)' in page
        assert 'arcgisonline' in page or 'World_Imagery' in page

    def test_build_page_unknown_type_uses_standard(self):
        assert build_page(MapRegion(0, 0), 'bogus') == build_page(MapRegion(0, 0), 'standard')

    def test_marker_payload(self):
        assert marker_payload(_markers()[:1]) == [
            {'id': 'a', 'latitude': 37.70, 'longitude': -122.50, 'title': 'A', 'description': 'First St'},
        ]

    @patch('src.restroom_app.map.web_map.toga')
    def test_page_without_leaflet_sets_error(self, mock_toga):
        mock_toga.WebView.return_value.evaluate_javascript = AsyncMock(return_value=False)
        context = MapContext(WEB)
        web_map = WebMap(context)
        assert context.is_loading

        asyncio.run(web_map._on_page_load(web_map.widget))

        assert context.error.code == LEAFLET_NOT_AVAILABLE
        assert not context.is_loading
        assert not web_map.ready

    @patch('src.restroom_app.map.web_map.toga')
    def test_calls_before_ready_are_dropped(self, mock_toga):
        web_map = WebMap(MapContext(WEB))
        web_map.set_markers(_markers())
        mock_toga.WebView.return_value.evaluate_javascript.assert_not_called()
        with pytest.raises(MapUnavailableError):
            asyncio.run(web_map.get_map_boundaries())

    @patch('src.restroom_app.map.web_map.toga')
    def test_page_load_pushes_state(self, mock_toga):
        """Test that region and markers set before load reach the page once Leaflet is ready."""
        scripts = []

        def evaluate(script):
            scripts.append(script)
            result = asyncio.get_running_loop().create_future()
            result.set_result(True)
            return result

        mock_toga.WebView.return_value.evaluate_javascript.side_effect = evaluate
        context = MapContext(WEB)
        web_map = WebMap(context, region=MapRegion(37.5, -122.25, 0.0922))
        web_map.set_markers(_markers())

        async def load():
            await web_map._on_page_load(web_map.widget)
            web_map.close()

        asyncio.run(load())

        assert scripts[0] == 'leafletReady()'
        assert scripts[1] == 'setView(37.5, -122.25, 12)'
        assert scripts[2].startswith('setMarkers([{"id": "a"')
        assert context.error is None
        assert not context.is_loading

    def _ready_map(self, mock_toga, **kwargs):
        web_map = WebMap(MapContext(WEB), region=MapRegion(37.5, -122.25, 0.0922), **kwargs)
        web_map.ready = True
        return web_map, mock_toga.WebView.return_value.evaluate_javascript

    @patch('src.restroom_app.map.web_map.toga')
    def test_scripts_once_ready(self, mock_toga):
        """Test that imperative calls become the page's script calls."""
        web_map, evaluate = self._ready_map(mock_toga)

        web_map.set_markers(_markers()[:1])
        assert evaluate.call_args.args[0] == (
            'setMarkers([{"id": "a", "latitude": 37.7, "longitude": -122.5, '
            '"title": "A", "description": "First St"}])'
        )

        web_map.animate_to_region(MapRegion(37.0, -122.0, 0.0922), duration=500)
        assert evaluate.call_args.args[0] == 'flyTo(37.0, -122.0, 12, 0.5)'

        web_map.fit_to_markers(_markers(), animated=False)
        script = evaluate.call_args.args[0]
        assert script.startswith('fitMarkers([')
        assert script.endswith('], false)')

    @patch('src.restroom_app.map.web_map.toga')
    def test_animate_to_coordinate_keeps_zoom(self, mock_toga):
        web_map, evaluate = self._ready_map(mock_toga)

        web_map.animate_to_coordinate(1.0, 2.0)

        evaluate.assert_called_once_with('flyTo(1.0, 2.0, null, 1.0)')
        assert web_map.region == MapRegion(1.0, 2.0, 0.0922, 0.0421)

    @patch('src.restroom_app.map.web_map.toga')
    def test_fit_to_no_markers_is_noop(self, mock_toga):
        web_map, evaluate = self._ready_map(mock_toga)
        web_map.fit_to_markers([])
        evaluate.assert_not_called()

    @patch('src.restroom_app.map.web_map.toga')
    def test_map_boundaries(self, mock_toga):
        web_map, _ = self._ready_map(mock_toga)
        mock_toga.WebView.return_value.evaluate_javascript = AsyncMock(
            return_value='{"north": 38.0, "east": -122.0, "south": 37.0, "west": -123.0}')

        bounds = asyncio.run(web_map.get_map_boundaries())

        assert (bounds.north_east.latitude, bounds.north_east.longitude) == (38.0, -122.0)
        assert (bounds.south_west.latitude, bounds.south_west.longitude) == (37.0, -123.0)

    @patch('src.restroom_app.map.web_map.toga')
    def test_marker_clicks_are_polled(self, mock_toga):
        """Test that clicks drained from the page reach on_marker_press."""
        pressed = []
        web_map = WebMap(MapContext(WEB), markers=_markers(), on_marker_press=pressed.append, poll_interval=0)
        web_map.ready = True
        drained = iter(['["b", "missing"]', None])

        async def drain(script):
            assert script == 'drainMarkerClicks()'
            raw = next(drained)
            if raw is None:
                web_map.ready = False
            return raw

        web_map.widget.evaluate_javascript = drain

        asyncio.run(web_map._poll_marker_clicks())

        assert [m.id for m in pressed] == ['b']


class TestNativeMap:
    """Test the MapView backend."""

    @patch('src.restroom_app.map.native_map.toga')
    def test_animate_to_coordinate_keeps_zoom(self, mock_toga):
        native = NativeMap(MapContext(NATIVE), region=MapRegion(37.0, -122.0, 0.0922, 0.0421))
        zoom = native.widget.zoom

        native.animate_to_coordinate(40.0, -100.0)

        assert native.widget.location == (40.0, -100.0)
        assert native.widget.zoom == zoom
        assert native.region == MapRegion(40.0, -100.0, 0.0922, 0.0421)

    @patch('src.restroom_app.map.native_map.toga')
    def test_fit_to_markers(self, mock_toga):
        native = NativeMap(MapContext(NATIVE), region=MapRegion(37.0, -122.0))
        location = native.widget.location

        native.fit_to_markers([])
        assert native.region == MapRegion(37.0, -122.0)
        assert native.widget.location is location

        native.fit_to_markers(_markers())
        assert native.region.latitude == pytest.approx(37.75)
        assert native.region.longitude == pytest.approx(-122.45)

    @patch('src.restroom_app.map.native_map.toga')
    def test_map_boundaries_from_zoom(self, mock_toga):
        native = NativeMap(MapContext(NATIVE), region=MapRegion(37.0, -122.0, 0.1, 0.2))
        native.widget.location = Mock(lat=37.0, lng=-122.0)
        native.widget.zoom = 12

        bounds = asyncio.run(native.get_map_boundaries())

        delta = delta_from_zoom(12)
        assert bounds.north_east.latitude == pytest.approx(37.0 + delta / 2)
        assert bounds.north_east.longitude == pytest.approx(-122.0 + delta)
        assert bounds.south_west.latitude == pytest.approx(37.0 - delta / 2)
        assert bounds.south_west.longitude == pytest.approx(-122.0 - delta)

    @patch('src.restroom_app.map.native_map.toga')
    def test_map_boundaries_without_widget(self, mock_toga):
        native = NativeMap(MapContext(NATIVE))
        native.widget = None
        with pytest.raises(MapUnavailableError):
            asyncio.run(native.get_map_boundaries())
