# --- File: gatehouse/repositories/visitor_repository.py ---
"""
Visitor repository: tenant-scoped lookups, filtered listings and the
per-day counts behind gate statistics.
"""

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import and_, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gatehouse.core.exceptions import DatabaseError
from gatehouse.core.logging import get_logger
from gatehouse.models.enums import VisitorStatus, VisitorType
from gatehouse.models.visitor import Visitor
from gatehouse.repositories.base.base_repository import BaseRepository

logger = get_logger(__name__)


def status_clause(status: VisitorStatus):
    """SQL predicate equivalent to ``VisitorStatus.derive``."""
    if status == VisitorStatus.CHECKED_OUT:
        return Visitor.check_out_at.is_not(None)
    if status == VisitorStatus.CHECKED_IN:
        return and_(Visitor.check_in_at.is_not(None), Visitor.check_out_at.is_(None))
    return and_(Visitor.check_in_at.is_(None), Visitor.check_out_at.is_(None))


class VisitorRepository(BaseRepository[Visitor]):
    """Repository for Visitor entity."""

    def __init__(self, db: Session):
        super().__init__(Visitor, db)

    def find_many(
        self,
        tenant_id: str,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        status: Optional[VisitorStatus] = None,
        visitor_type: Optional[VisitorType] = None,
        host_id: Optional[str] = None,
    ) -> List[Visitor]:
        """
        List visitors of one community, newest visit date first.

        Args:
            tenant_id: Community id
            date_from: Inclusive lower bound on visit date
            date_to: Inclusive upper bound on visit date
            status: Derived status filter
            visitor_type: Visitor type filter
            host_id: Restrict to visitors hosted by this user

        Returns:
            Matching visitors
        """
        stmt = select(Visitor).where(Visitor.community_id == tenant_id)

        if date_from is not None:
            stmt = stmt.where(Visitor.visit_date >= date_from)
        if date_to is not None:
            stmt = stmt.where(Visitor.visit_date <= date_to)
        if status is not None:
            stmt = stmt.where(status_clause(status))
        if visitor_type is not None:
            stmt = stmt.where(Visitor.visitor_type == visitor_type)
        if host_id is not None:
            stmt = stmt.where(Visitor.user_id == host_id)

        stmt = stmt.order_by(Visitor.visit_date.desc(), Visitor.created_at.desc())
        return self._scalars(stmt)

    def find_between(self, tenant_id: str, start: datetime, end: datetime) -> List[Visitor]:
        """Visitors whose visit date lies in ``[start, end)``, earliest first."""
        stmt = (
            select(Visitor)
            .where(
                Visitor.community_id == tenant_id,
                Visitor.visit_date >= start,
                Visitor.visit_date < end,
            )
            .order_by(Visitor.visit_date.asc())
        )
        return self._scalars(stmt)

    def count_by_status(self, tenant_id: str, start: datetime, end: datetime) -> Dict[VisitorStatus, int]:
        in_range = and_(
            Visitor.community_id == tenant_id,
            Visitor.visit_date >= start,
            Visitor.visit_date < end,
        )
        counts = {}
        try:
            for status in VisitorStatus:
                stmt = select(func.count(Visitor.id)).where(in_range, status_clause(status))
                counts[status] = self.db.execute(stmt).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Status count failed: {e}", exc_info=True)
            raise DatabaseError(operation="count", table=Visitor.__tablename__) from e
        return counts

    def count_by_type(self, tenant_id: str, start: datetime, end: datetime) -> Dict[VisitorType, int]:
        stmt = (
            select(Visitor.visitor_type, func.count(Visitor.id))
            .where(
                Visitor.community_id == tenant_id,
                Visitor.visit_date >= start,
                Visitor.visit_date < end,
            )
            .group_by(Visitor.visitor_type)
        )
        try:
            rows = self.db.execute(stmt).all()
        except SQLAlchemyError as e:
            logger.error(f"Type count failed: {e}", exc_info=True)
            raise DatabaseError(operation="count", table=Visitor.__tablename__) from e
        return {visitor_type: count for visitor_type, count in rows}
