"""Add-restroom screen handlers for RestroomApp.

The form collects the listing, the device position and optional
accessibility tags, then submits a pending-review restroom.
"""
import functools
import logging
from shared.enums import RestroomStatus
from ..services.location_service import LocationError, LocationPermissionError

SUCCESS_MESSAGE = 'Restroom added successfully! It will be reviewed before appearing on the map.'
NAME_REQUIRED = 'Please enter a name for the restroom'
ADDRESS_REQUIRED = 'Please enter an address for the restroom'
LOCATION_REQUIRED = 'Please get your current location first by tapping the location button'
LOGIN_REQUIRED = 'You must be logged in to add a restroom'
LOCATION_PERMISSION_MESSAGE = 'Location permission is required to add a restroom'
LOCATION_FAILED_MESSAGE = 'Failed to get your location. Please try again or enter the address manually.'


def validate_form(form, location, user):
    """First problem with the form, or None when it can be submitted."""
    if not (form.get('name') or '').strip():
        return NAME_REQUIRED
    if not (form.get('address') or '').strip():
        return ADDRESS_REQUIRED
    if not location:
        return LOCATION_REQUIRED
    if not user:
        return LOGIN_REQUIRED
    return None


def submit_error_message(error):
    """Text shown when the data service rejects a new restroom."""
    message = str(error) if error else ''
    lowered = message.lower()
    status_code = getattr(error, 'status_code', None)
    if not message:
        return 'Failed to add restroom. Please try again.'
    if 'permission' in lowered or status_code in (401, 403):
        return "You don't have permission to add restrooms. Please check your account status."
    if 'network' in lowered:
        return 'Network error. Please check your internet connection and try again.'
    if 'validation' in lowered or status_code == 400:
        return 'Please check all required fields and try again.'
    return f'Error: {message}'


def build_payload(form, location, user, features):
    latitude, longitude = location
    return {
        'name': form['name'].strip(),
        'address': form['address'].strip(),
        'description': (form.get('description') or '').strip() or None,
        'latitude': latitude,
        'longitude': longitude,
        'operating_hours': (form.get('operating_hours') or '').strip() or None,
        'access_requirements': (form.get('access_requirements') or '').strip() or None,
        'accessibility_features': list(features),
        'created_by': user['id'],
        'status': RestroomStatus.PENDING_REVIEW.value,
    }


class AddRestroomHandler:
    """Handles the add-restroom form."""

    def __init__(self, app):
        self.app = app
        self.logger = logging.getLogger(self.__class__.__name__)
        self.current_location = None
        self.features = []
        self.loading = False
        from ..ui.add_restroom_view import AddRestroomView
        self.view = AddRestroomView(self)

    def create_content(self):
        return self.view.create_content()

    def toggle_feature(self, feature, enabled):
        if enabled and feature not in self.features:
            self.features.append(feature)
        elif not enabled and feature in self.features:
            self.features.remove(feature)

    async def use_my_location(self, widget=None, **kwargs):
        """Read the device position and fill the address from it."""
        self.view.clear_messages()
        try:
            latitude, longitude = await self.app.location_service.current_position()
        except LocationPermissionError:
            self.view.show_error(LOCATION_PERMISSION_MESSAGE)
            return
        except LocationError as e:
            self.logger.error(f"Error getting location: {e}")
            self.view.show_error(LOCATION_FAILED_MESSAGE)
            return

        self.current_location = (latitude, longitude)
        self.app.state.set_location(latitude, longitude)
        self.view.show_location(latitude, longitude)
        self.app.run_background(self.app.location_service.reverse_geocode, latitude, longitude,
                                on_done=functools.partial(self._on_address_resolved, (latitude, longitude)))

    def _on_address_resolved(self, coordinates, future):
        try:
            address = future.result()
        except LocationError as e:
            # Coordinates are kept; the user can type the address
            self.logger.warning(f"Reverse geocoding failed: {e}")
            return
        if coordinates != self.current_location:
            # Form was reset or relocated while geocoding
            self.logger.debug(f"Dropping stale address for {coordinates}")
            return
        if address:
            self.view.set_address(address)

    def submit(self, widget=None):
        self.view.clear_messages()
        form = self.view.get_form_data()
        user = self.app.state.current_user

        error = validate_form(form, self.current_location, user)
        if error:
            self.view.show_error(error)
            return
        if self.loading:
            return

        payload = build_payload(form, self.current_location, user, self.features)
        self.logger.info(f"Adding restroom '{payload['name']}' at {self.current_location}")
        self.loading = True
        self.view.set_busy(True)
        self.app.run_background(self.app.restroom_service.create_restroom, payload,
                                on_done=self._on_submit_complete)

    def _on_submit_complete(self, future):
        self.loading = False
        self.view.set_busy(False)
        try:
            restroom = future.result()
        except Exception as e:
            self.logger.error(f"Error adding restroom: {e}")
            self.view.show_error(submit_error_message(e))
            return

        self.logger.info(f"Restroom created: {restroom.get('id') if restroom else None}")
        self.reset_form()
        self.view.show_success(SUCCESS_MESSAGE)

    def reset_form(self):
        self.current_location = None
        self.features = []
        self.view.reset_form()
