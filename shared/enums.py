import enum


class RestroomStatus(str, enum.Enum):
    """Restroom lifecycle status.

    New restrooms start in PENDING_REVIEW until a moderator activates them.
    """
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING_REVIEW = "pending_review"


# Statuses shown on the map and returned by nearby search
VISIBLE_RESTROOM_STATUSES = (RestroomStatus.ACTIVE, RestroomStatus.PENDING_REVIEW)


class OperationalStatus(str, enum.Enum):
    """Operational status reported by a reviewer at visit time."""
    BROKEN = "broken"
    MAINTENANCE = "maintenance"
    WORKING = "working"


class ReportType(str, enum.Enum):
    """Reasons a user can report a restroom listing."""
    CLOSED = "closed"
    INAPPROPRIATE = "inappropriate"
    INCORRECT_INFO = "incorrect_info"
    OTHER = "other"


class ReportStatus(str, enum.Enum):
    """Moderation status of a report."""
    PENDING = "pending"
    RESOLVED = "resolved"
    REVIEWED = "reviewed"


class UserRole(str, enum.Enum):
    """User roles for access control.

    Moderators may change restroom status and work the report queue.
    """
    MODERATOR = "moderator"
    USER = "user"


class AccessibilityFeature(str, enum.Enum):
    """Accessibility tags offered on the add-restroom form."""
    WHEELCHAIR_ACCESSIBLE = "Wheelchair Accessible"
    BABY_CHANGING_STATION = "Baby Changing Station"
    GRAB_BARS = "Grab Bars"
    WIDE_DOORWAY = "Wide Doorway"
    LOWERED_SINK = "Lowered Sink"
    BRAILLE_SIGNAGE = "Braille Signage"
