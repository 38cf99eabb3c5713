# --- File: gatehouse/services/visitor/visitor_service.py ---
"""
Visitor registry: creation, lifecycle transitions and listings.

Lifecycle:
    PENDING -> CHECKED_IN -> CHECKED_OUT
    any -> PENDING (administrative reset)

Status is derived from ``check_in_at`` / ``check_out_at``; transitions only
ever touch those two columns, and every rejection happens before either is
modified.
"""

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from gatehouse.core.exceptions import (
    ConflictError,
    ErrorCode,
    PreconditionFailedError,
    ValidationError,
)
from gatehouse.core.logging import get_logger
from gatehouse.models.enums import VisitorStatus, VisitorType
from gatehouse.models.visitor import Visitor
from gatehouse.repositories.visitor_repository import VisitorRepository
from gatehouse.schemas.visitor.visitor_base import VisitorCreate
from gatehouse.utils.datetime_utils import DateTimeHelper

logger = get_logger(__name__)


def _field_errors(exc: PydanticValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "request"
        errors.setdefault(location, []).append(error.get("msg", "Invalid value"))
    return errors


class VisitorService:
    """Visitor registry operations, all scoped to one community"""

    def __init__(self, db: Session):
        self.repository = VisitorRepository(db)

    def create(
        self,
        tenant_id: str,
        host_id: str,
        data: Union[VisitorCreate, Mapping[str, Any]],
    ) -> Visitor:
        """
        Register a PENDING visitor hosted by ``host_id``.

        Raises:
            ValidationError: If name/contact are missing or the visitor
                type or contact is invalid
        """
        if not isinstance(data, VisitorCreate):
            try:
                data = VisitorCreate.model_validate(data)
            except PydanticValidationError as e:
                raise ValidationError("Invalid visitor details", _field_errors(e)) from e

        visitor = Visitor(
            community_id=tenant_id,
            user_id=host_id,
            name=data.name,
            contact=data.contact,
            vehicle_no=data.vehicle_no,
            notes=data.notes,
            visitor_type=data.visitor_type,
            visit_date=data.visit_date or DateTimeHelper.utcnow(),
        )
        visitor = self.repository.create(visitor)
        logger.info(
            "Visitor registered",
            extra={"visitor_id": visitor.id, "community_id": tenant_id, "visitor_type": visitor.visitor_type.value},
        )
        return visitor

    def transition(
        self,
        tenant_id: str,
        visitor_id: str,
        target: Union[VisitorStatus, str],
        now: Optional[datetime] = None,
    ) -> Visitor:
        """
        Move a visitor to ``target``.

        Raises:
            ValidationError: If the id is blank or the target is unknown
            ResourceNotFoundError: If the visitor is not in this community
            ConflictError: If already checked in (or out)
            PreconditionFailedError: If checking out before checking in
        """
        if not visitor_id or not str(visitor_id).strip():
            raise ValidationError("Visitor id is required", {"id": ["Field required"]})
        try:
            target = VisitorStatus(target)
        except ValueError as e:
            allowed = ", ".join(s.value for s in VisitorStatus)
            raise ValidationError(
                f"Status must be one of: {allowed}", {"status": [f"Unknown status {target!r}"]}
            ) from e

        visitor = self.repository.get_in_tenant(tenant_id, visitor_id)
        now = now or DateTimeHelper.utcnow()

        if target == VisitorStatus.CHECKED_IN:
            if visitor.check_in_at is not None:
                raise ConflictError(
                    "Visitor already checked in",
                    ErrorCode.VISITOR_ALREADY_CHECKED_IN,
                    visitor.id,
                )
            with self.repository.transaction():
                visitor.check_in_at = now

        elif target == VisitorStatus.CHECKED_OUT:
            if visitor.check_out_at is not None:
                raise ConflictError(
                    "Visitor already checked out",
                    ErrorCode.VISITOR_ALREADY_CHECKED_OUT,
                    visitor.id,
                )
            if visitor.check_in_at is None:
                raise PreconditionFailedError(
                    "Visitor has not checked in yet",
                    ErrorCode.VISITOR_NOT_CHECKED_IN,
                    visitor.id,
                )
            with self.repository.transaction():
                # Never earlier than check-in, even with clock skew
                visitor.check_out_at = max(now, visitor.check_in_at)

        else:
            with self.repository.transaction():
                visitor.check_in_at = None
                visitor.check_out_at = None

        logger.info(
            "Visitor status updated",
            extra={"visitor_id": visitor.id, "community_id": tenant_id, "visitor_status": visitor.status.value},
        )
        return visitor

    def query(
        self,
        tenant_id: str,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        status: Optional[VisitorStatus] = None,
        visitor_type: Optional[VisitorType] = None,
        host_id: Optional[str] = None,
    ) -> List[Visitor]:
        """Visitors matching every given filter, newest visit date first."""
        return self.repository.find_many(
            tenant_id,
            date_from=date_from,
            date_to=date_to,
            status=status,
            visitor_type=visitor_type,
            host_id=host_id,
        )

    def today(self, tenant_id: str, now: Optional[datetime] = None) -> List[Visitor]:
        start, end = DateTimeHelper.day_bounds(now or DateTimeHelper.utcnow())
        return self.repository.find_between(tenant_id, start, end)
