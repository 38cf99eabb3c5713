"""
Resident/staff accounts and the unit/block records used for display.

Account lifecycle belongs to the community platform; this service reads
these rows and only ever writes ``push_token``.
"""

from typing import List, Optional

from sqlalchemy import Boolean, Enum as SAEnum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gatehouse.db.base import Base
from gatehouse.models.base import TenantMixin, TimestampMixin, UUIDMixin
from gatehouse.models.enums import UserRole


class Block(UUIDMixin, TenantMixin, Base):
    __tablename__ = "blocks"

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    units: Mapped[List["Unit"]] = relationship(back_populates="block")


class Unit(UUIDMixin, TenantMixin, Base):
    __tablename__ = "units"

    number: Mapped[str] = mapped_column(String(20), nullable=False)
    block_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("blocks.id", ondelete="SET NULL"), nullable=True
    )

    block: Mapped[Optional[Block]] = relationship(back_populates="units", lazy="joined")
    residents: Mapped[List["User"]] = relationship(back_populates="unit")


class User(UUIDMixin, TenantMixin, TimestampMixin, Base):
    """Community member; residents host visitors and own bookings/packages."""

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, native_enum=False, length=20),
        nullable=False,
        default=UserRole.RESIDENT,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    unit_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("units.id", ondelete="SET NULL"), nullable=True, index=True
    )
    push_token: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Expo push address; NULL disables push delivery",
    )

    unit: Mapped[Optional[Unit]] = relationship(back_populates="residents", lazy="joined")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, role={self.role.value})>"
