"""
Data access layer.
"""

from gatehouse.repositories.booking_repository import BookingRepository
from gatehouse.repositories.package_repository import PackageRepository
from gatehouse.repositories.user_repository import UserRepository
from gatehouse.repositories.visitor_repository import VisitorRepository

__all__ = [
    "BookingRepository",
    "PackageRepository",
    "UserRepository",
    "VisitorRepository",
]
