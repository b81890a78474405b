"""Configuration Manager for the Restroom Finder app."""
from typing import Optional
from pydantic_settings import BaseSettings


class ConfigManager(BaseSettings):
    """Manages application configuration settings using Pydantic BaseSettings."""

    # API settings
    api_timeout: float = 10.0
    api_base_url: str = 'http://localhost:5000'
    api_max_retries: int = 3
    api_retry_delay: float = 1.0

    # Default map region (San Francisco)
    default_latitude: float = 37.78825
    default_longitude: float = -122.4324
    default_latitude_delta: float = 0.0922
    default_longitude_delta: float = 0.0421

    # Search settings
    nearby_radius_meters: int = 5000
    search_radius_meters: int = 50000
    fallback_result_limit: int = 50

    # Reverse geocoding (Nominatim-compatible)
    geocoder_url: str = 'https://nominatim.openstreetmap.org/reverse'
    geocoder_user_agent: str = 'RestroomFinder/1.0'
    geocoder_timeout: float = 5.0

    # Map settings
    map_type: str = 'standard'  # standard, satellite, terrain
    marker_poll_interval: float = 0.5  # seconds, web map click polling
    force_platform: Optional[str] = None  # 'native' or 'web'

    class Config:
        env_prefix = 'RESTROOM_'
        case_sensitive = False

    def get(self, key, default=None):
        """Get a configuration value."""
        return getattr(self, key, default)

    def set(self, key, value):
        """Set a configuration value."""
        setattr(self, key, value)

    def get_all(self):
        """Get all configuration values as dictionary."""
        return self.model_dump()
