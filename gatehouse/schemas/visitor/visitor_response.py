# --- File: gatehouse/schemas/visitor/visitor_response.py ---
"""
Visitor response schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional

from pydantic import Field

from gatehouse.models.enums import VisitorStatus, VisitorType
from gatehouse.models.visitor import Visitor
from gatehouse.schemas.common.base import BaseResponseSchema, BaseSchema

__all__ = [
    "VisitorResponse",
    "VisitorCreatedResponse",
    "VisitorEnvelope",
    "VisitorStats",
]

UNKNOWN_HOST = "Unknown"
NOT_AVAILABLE = "N/A"


class VisitorResponse(BaseResponseSchema):
    """Visitor with derived status and host display fields."""

    community_id: str
    name: str
    contact: str
    vehicle_no: Optional[str] = None
    notes: Optional[str] = None
    visitor_type: VisitorType
    visit_date: datetime
    check_in_at: Optional[datetime] = None
    check_out_at: Optional[datetime] = None
    status: VisitorStatus
    user_id: str
    host_name: str = UNKNOWN_HOST
    unit_number: str = NOT_AVAILABLE
    block_name: str = NOT_AVAILABLE

    @classmethod
    def from_visitor(cls, visitor: Visitor) -> "VisitorResponse":
        host = visitor.host
        unit = host.unit if host is not None else None
        block = unit.block if unit is not None else None

        return cls(
            id=visitor.id,
            created_at=visitor.created_at,
            updated_at=visitor.updated_at,
            community_id=visitor.community_id,
            name=visitor.name,
            contact=visitor.contact,
            vehicle_no=visitor.vehicle_no,
            notes=visitor.notes,
            visitor_type=visitor.visitor_type,
            visit_date=visitor.visit_date,
            check_in_at=visitor.check_in_at,
            check_out_at=visitor.check_out_at,
            status=visitor.status,
            user_id=visitor.user_id,
            host_name=(host.name if host is not None and host.name else UNKNOWN_HOST),
            unit_number=(unit.number if unit is not None and unit.number else NOT_AVAILABLE),
            block_name=(block.name if block is not None and block.name else NOT_AVAILABLE),
        )


class VisitorEnvelope(BaseSchema):
    visitor: VisitorResponse


class VisitorCreatedResponse(VisitorEnvelope):
    message: str = Field(default="Visitor created")


class VisitorStats(BaseSchema):
    """Per-day visitor counts for one community."""

    pending: int = 0
    checked_in: int = 0
    checked_out: int = 0
    total: int = 0
    type_breakdown: Dict[str, int] = Field(
        default_factory=lambda: {visitor_type.value: 0 for visitor_type in VisitorType}
    )
