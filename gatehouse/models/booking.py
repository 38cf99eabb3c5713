"""
Facility bookings, read by the reminder job.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gatehouse.db.base import Base
from gatehouse.models.base import TenantMixin, TimestampMixin, UUIDMixin
from gatehouse.models.enums import BookingStatus
from gatehouse.models.user import User


class Facility(UUIDMixin, TenantMixin, Base):
    __tablename__ = "facilities"

    name: Mapped[str] = mapped_column(String(255), nullable=False)


class Booking(UUIDMixin, TenantMixin, TimestampMixin, Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("idx_booking_status_starts_at", "status", "starts_at"),
    )

    facility_id: Mapped[str] = mapped_column(ForeignKey("facilities.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    starts_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    ends_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    status: Mapped[BookingStatus] = mapped_column(
        SAEnum(BookingStatus, native_enum=False, length=20),
        nullable=False,
        default=BookingStatus.PENDING,
    )

    facility: Mapped[Facility] = relationship(lazy="joined")
    user: Mapped[User] = relationship(lazy="joined")
