"""Application state management for RestroomApp."""
from dataclasses import dataclass, field
from typing import Optional, List


@dataclass
class SessionState:
    """State shared between screens.

    Screen-local state lives on each handler; only what several screens read
    is kept here.
    """
    # Signed-in user ({id, email, username}) or None
    current_user: Optional[dict] = None

    # Last known device position
    current_latitude: Optional[float] = None
    current_longitude: Optional[float] = None

    # Restrooms most recently shown on the map
    nearby_restrooms: List[dict] = field(default_factory=list)

    # Restroom opened from a marker or a search result
    selected_restroom: Optional[dict] = None

    @property
    def has_location(self):
        return self.current_latitude is not None and self.current_longitude is not None

    def set_location(self, latitude, longitude):
        self.current_latitude = latitude
        self.current_longitude = longitude

    def clear_user_state(self):
        """Reset user-specific state on sign-out."""
        self.current_user = None
        self.selected_restroom = None
