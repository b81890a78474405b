"""Map screen handlers for RestroomApp."""
import asyncio
import logging
from ..map import MapComponent, MapContext, MapRegion, MapMarker, NATIVE
from ..services.location_service import LocationError, LocationPermissionError


class MapHandler:
    """Nearby restrooms around the user's position, shown on the map."""

    def __init__(self, app):
        self.app = app
        self.logger = logging.getLogger(self.__class__.__name__)
        self.loading = False
        self.map = None
        self.context = None
        from ..ui.map_view import MapScreenView
        self.view = MapScreenView(self)

    def default_region(self):
        config = self.app.config
        return MapRegion(config.default_latitude, config.default_longitude,
                         config.default_latitude_delta, config.default_longitude_delta)

    def create_content(self):
        """Build the map screen and start locating the user."""
        config = self.app.config
        self.context = MapContext(self.app.platform)
        self.map = MapComponent(
            self.context,
            region=self.default_region(),
            on_marker_press=self.on_marker_press,
            map_type=config.map_type,
            poll_interval=config.marker_poll_interval,
        )
        content = self.view.create_content(self.map.widget)
        asyncio.ensure_future(self.locate_user())
        return content

    async def locate_user(self, widget=None, **kwargs):
        """Centre the map on the device position and load restrooms around it."""
        try:
            latitude, longitude = await self.app.location_service.current_position()
        except LocationPermissionError:
            self.logger.warning("Location permission denied")
            if self.app.platform == NATIVE:
                self.app.show_info('Permission denied', 'Location permission is required to show nearby restrooms')
            self.load_nearby_restrooms(self.map.region.latitude, self.map.region.longitude)
            return
        except LocationError as e:
            self.logger.error(f"Error getting location: {e}")
            if self.app.platform == NATIVE:
                self.app.show_error('Error', 'Failed to get your location')
            self.load_nearby_restrooms(self.map.region.latitude, self.map.region.longitude)
            return

        self.app.state.set_location(latitude, longitude)
        config = self.app.config
        region = MapRegion(latitude, longitude, config.default_latitude_delta, config.default_longitude_delta)
        self.map.animate_to_region(region)
        self.load_nearby_restrooms(latitude, longitude)

    def load_nearby_restrooms(self, latitude, longitude):
        """Fetch restrooms within the configured radius on a worker thread."""
        if self.loading:
            return
        self.loading = True
        self.view.set_busy(True)
        if self.context:
            self.context.set_loading(True)
        self.app.run_background(
            self.app.restroom_service.get_nearby_restrooms,
            latitude, longitude, self.app.config.nearby_radius_meters,
            on_done=self._on_restrooms_loaded,
        )

    def _on_restrooms_loaded(self, future):
        self.loading = False
        self.view.set_busy(False)
        if self.context:
            self.context.set_loading(False)
        try:
            restrooms = future.result() or []
        except Exception as e:
            self.logger.error(f"Error loading restrooms: {e}")
            self.view.set_status('Failed to load nearby restrooms')
            if self.app.platform == NATIVE:
                self.app.show_error('Error', 'Failed to load nearby restrooms')
            return

        self.app.state.nearby_restrooms = restrooms
        markers = []
        for restroom in restrooms:
            try:
                markers.append(MapMarker.from_restroom(restroom))
            except (KeyError, TypeError, ValueError):
                self.logger.warning(f"Skipping restroom without coordinates: {restroom.get('id')}")
        self.map.set_markers(markers)
        self.view.set_status(f"{len(restrooms)} restrooms found in your area")

    def refresh(self, widget):
        """Reload around the last known position (or the current map centre)."""
        state = self.app.state
        if state.has_location:
            self.load_nearby_restrooms(state.current_latitude, state.current_longitude)
        else:
            self.load_nearby_restrooms(self.map.region.latitude, self.map.region.longitude)

    def on_marker_press(self, marker):
        restroom = marker.data or {'id': marker.id, 'name': marker.title, 'address': marker.description}
        self.app.state.selected_restroom = restroom
        self.view.show_restroom(restroom)

    def close(self):
        if self.map:
            self.map.close()
