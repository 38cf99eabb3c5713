"""
Booking repository; read-only access for the reminder job.
"""

from datetime import datetime
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from gatehouse.models.booking import Booking
from gatehouse.models.enums import BookingStatus
from gatehouse.repositories.base.base_repository import BaseRepository


class BookingRepository(BaseRepository[Booking]):

    def __init__(self, db: Session):
        super().__init__(Booking, db)

    def find_confirmed_starting_between(self, start: datetime, end: datetime) -> List[Booking]:
        """CONFIRMED bookings with ``starts_at`` in ``[start, end]``, across all communities."""
        stmt = (
            select(Booking)
            .where(
                Booking.status == BookingStatus.CONFIRMED,
                Booking.starts_at >= start,
                Booking.starts_at <= end,
            )
            .order_by(Booking.starts_at.asc())
        )
        return self._scalars(stmt)
