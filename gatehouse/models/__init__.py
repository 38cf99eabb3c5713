"""
ORM models. Importing this package registers every table on ``Base.metadata``.
"""

from gatehouse.models.booking import Booking, Facility
from gatehouse.models.enums import (
    BookingStatus,
    NotificationType,
    PackageStatus,
    UserRole,
    VisitorStatus,
    VisitorType,
)
from gatehouse.models.package import Package
from gatehouse.models.user import Block, Unit, User
from gatehouse.models.visitor import Visitor

__all__ = [
    "Block",
    "Booking",
    "BookingStatus",
    "Facility",
    "NotificationType",
    "Package",
    "PackageStatus",
    "Unit",
    "User",
    "UserRole",
    "Visitor",
    "VisitorStatus",
    "VisitorType",
]
