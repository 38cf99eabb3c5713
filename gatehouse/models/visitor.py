# --- File: gatehouse/models/visitor.py ---
"""
Visitor model for the gate workflow.

Status is intentionally absent from the table: it is a projection of
``check_in_at`` / ``check_out_at`` (see ``VisitorStatus.derive``).
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Enum as SAEnum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gatehouse.db.base import Base
from gatehouse.models.base import TenantMixin, TimestampMixin, UUIDMixin
from gatehouse.models.enums import VisitorStatus, VisitorType
from gatehouse.models.user import User

__all__ = ["Visitor"]


class Visitor(UUIDMixin, TenantMixin, TimestampMixin, Base):
    """
    Expected or actual visitor announced by a resident host.

    Lifecycle: PENDING -> CHECKED_IN -> CHECKED_OUT, with an administrative
    reset back to PENDING.
    """

    __tablename__ = "visitors"
    __table_args__ = (
        Index("idx_visitor_community_visit_date", "community_id", "visit_date"),
        Index("idx_visitor_host", "user_id"),
        CheckConstraint(
            "check_out_at IS NULL OR (check_in_at IS NOT NULL AND check_out_at >= check_in_at)",
            name="ck_visitor_checkout_after_checkin",
        ),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Email for GUEST visitors, phone or free text otherwise",
    )
    vehicle_no: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    visitor_type: Mapped[VisitorType] = mapped_column(
        SAEnum(VisitorType, native_enum=False, length=20),
        nullable=False,
        default=VisitorType.GUEST,
    )
    visit_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    check_in_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    check_out_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="Hosting resident",
    )
    host: Mapped[User] = relationship(lazy="joined")

    @property
    def status(self) -> VisitorStatus:
        return VisitorStatus.derive(self.check_in_at, self.check_out_at)

    def __repr__(self) -> str:
        return f"<Visitor(id={self.id}, status={self.status.value})>"
