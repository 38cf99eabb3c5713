"""
Parcels received at the gate on behalf of residents.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, Index, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gatehouse.db.base import Base
from gatehouse.models.base import TenantMixin, TimestampMixin, UUIDMixin
from gatehouse.models.enums import PackageStatus
from gatehouse.models.user import User


class Package(UUIDMixin, TenantMixin, TimestampMixin, Base):
    __tablename__ = "packages"
    __table_args__ = (
        Index("idx_package_owner_created", "community_id", "user_id", "created_at"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    image: Mapped[Optional[bytes]] = mapped_column(LargeBinary, nullable=True)
    image_content_type: Mapped[str] = mapped_column(String(100), nullable=False, default="image/jpeg")
    status: Mapped[PackageStatus] = mapped_column(
        SAEnum(PackageStatus, native_enum=False, length=20),
        nullable=False,
        default=PackageStatus.PENDING,
    )
    picked_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    owner: Mapped[User] = relationship(lazy="joined")
