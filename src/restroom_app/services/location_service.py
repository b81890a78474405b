"""Device location and reverse geocoding."""
import logging
import requests


class LocationError(Exception):
    """The device position or its address could not be determined."""


class LocationPermissionError(LocationError):
    """The user did not grant location permission."""


def format_address(address):
    """Build "street city region" from a Nominatim ``address`` block."""
    if not isinstance(address, dict):
        return ''
    street = address.get('road') or address.get('pedestrian') or address.get('footway') or ''
    if street and address.get('house_number'):
        street = f"{address['house_number']} {street}"
    city = address.get('city') or address.get('town') or address.get('village') or ''
    region = address.get('state') or address.get('region') or ''
    return f"{street} {city} {region}".strip().replace('  ', ' ')


class LocationService:
    """Wraps the app's ``toga`` location device plus an HTTP reverse geocoder."""

    def __init__(self, location, config):
        self.location = location
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

    async def request_permission(self):
        """Ask for foreground location permission. Returns True when granted."""
        if self.location is None:
            return False
        if self.location.has_permission:
            return True
        granted = await self.location.request_permission()
        self.logger.info(f"Location permission {'granted' if granted else 'denied'}")
        return bool(granted)

    async def current_position(self):
        """Current (latitude, longitude).

        Raises:
            LocationPermissionError: If permission is not granted
            LocationError: If the platform cannot provide a position
        """
        if not await self.request_permission():
            raise LocationPermissionError('Location permission is required')
        try:
            position = await self.location.current_location()
        except NotImplementedError as e:
            raise LocationError(f'Location is not available on this platform: {e}')
        self.logger.debug(f"Current position: {position.lat}, {position.lng}")
        return position.lat, position.lng

    def reverse_geocode(self, latitude, longitude):
        """Street address for a coordinate (blocking; run on a worker thread).

        Returns:
            str: "street city region", or '' when the geocoder knows nothing

        Raises:
            LocationError: On transport or HTTP failure, or a body that is not a JSON object
        """
        try:
            resp = requests.get(self.config.geocoder_url, params={
                'lat': latitude,
                'lon': longitude,
                'format': 'jsonv2',
                'addressdetails': 1,
            }, headers={'User-Agent': self.config.geocoder_user_agent}, timeout=self.config.geocoder_timeout)
            resp.raise_for_status()
            body = resp.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            self.logger.error(f"Reverse geocoding failed: {e}")
            raise LocationError(f'Reverse geocoding failed: {e}')

        if not isinstance(body, dict):
            self.logger.error(f"Reverse geocoding returned {type(body).__name__}, expected an object")
            raise LocationError('Reverse geocoding returned an unexpected response')
        address = format_address(body.get('address'))
        self.logger.debug(f"Reverse geocoded ({latitude}, {longitude}) -> {address!r}")
        return address
