"""
Per-day visitor statistics for the gate dashboard.
"""

from datetime import date, datetime
from typing import Optional, Union

from sqlalchemy.orm import Session

from gatehouse.models.enums import VisitorStatus, VisitorType
from gatehouse.repositories.visitor_repository import VisitorRepository
from gatehouse.schemas.visitor.visitor_response import VisitorStats
from gatehouse.utils.datetime_utils import DateTimeHelper


class VisitorStatsService:

    def __init__(self, db: Session):
        self.repository = VisitorRepository(db)

    def stats(self, tenant_id: str, day: Optional[Union[date, datetime]] = None) -> VisitorStats:
        """
        Counts for visitors whose visit date falls on ``day`` (UTC, default today).

        ``type_breakdown`` always lists every visitor type.
        """
        start, end = DateTimeHelper.day_bounds(day or DateTimeHelper.utcnow())

        by_status = self.repository.count_by_status(tenant_id, start, end)
        by_type = self.repository.count_by_type(tenant_id, start, end)

        breakdown = {visitor_type.value: 0 for visitor_type in VisitorType}
        for visitor_type, count in by_type.items():
            breakdown[VisitorType(visitor_type).value] = count

        return VisitorStats(
            pending=by_status.get(VisitorStatus.PENDING, 0),
            checked_in=by_status.get(VisitorStatus.CHECKED_IN, 0),
            checked_out=by_status.get(VisitorStatus.CHECKED_OUT, 0),
            total=sum(by_status.values()),
            type_breakdown=breakdown,
        )
