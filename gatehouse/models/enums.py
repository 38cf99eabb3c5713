"""
Database enums shared by models and schemas.
"""

import enum
from datetime import datetime
from typing import Optional


class UserRole(str, enum.Enum):
    """User role enumeration."""
    RESIDENT = "RESIDENT"
    GATEKEEPER = "GATEKEEPER"
    ADMIN = "ADMIN"


class VisitorType(str, enum.Enum):
    """Kind of visitor announced at the gate."""
    GUEST = "GUEST"
    DELIVERY = "DELIVERY"
    CAB_AUTO = "CAB_AUTO"


class VisitorStatus(str, enum.Enum):
    """
    Lifecycle state of a visitor.

    Never stored; always derived from the check-in/check-out timestamps.
    """
    PENDING = "pending"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"

    @classmethod
    def derive(cls, check_in_at: Optional[datetime], check_out_at: Optional[datetime]) -> "VisitorStatus":
        if check_out_at is not None:
            return cls.CHECKED_OUT
        if check_in_at is not None:
            return cls.CHECKED_IN
        return cls.PENDING


class BookingStatus(str, enum.Enum):
    """Facility booking status."""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class PackageStatus(str, enum.Enum):
    """Gate package status."""
    PENDING = "PENDING"
    PICKED = "PICKED"


class NotificationType(str, enum.Enum):
    """Push payload type; mobile clients deep-link on it."""
    BOOKING_REMINDER = "BOOKING_REMINDER"
    VISITOR_CHECKIN = "VISITOR_CHECKIN"
    PACKAGE = "PACKAGE"

    @property
    def entity_key(self) -> str:
        """Per-type id key existing clients read from the payload"""
        return _ENTITY_KEYS[self]


_ENTITY_KEYS = {
    NotificationType.BOOKING_REMINDER: "bookingId",
    NotificationType.VISITOR_CHECKIN: "visitorId",
    NotificationType.PACKAGE: "packageId",
}
