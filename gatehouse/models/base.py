"""
SQLAlchemy model mixins for reusable functionality.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from gatehouse.utils.datetime_utils import DateTimeHelper


class UUIDMixin:
    """String UUID primary key generated on the Python side."""

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
        comment="Primary key (UUID)",
    )


class TimestampMixin:
    """Creation/update audit timestamps (naive UTC)."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=DateTimeHelper.utcnow,
        comment="Record creation timestamp (UTC)",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=DateTimeHelper.utcnow,
        onupdate=DateTimeHelper.utcnow,
        comment="Record last update timestamp (UTC)",
    )


class TenantMixin:
    """Community (tenant) scoping column."""

    community_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        index=True,
        comment="Owning community (tenant)",
    )
