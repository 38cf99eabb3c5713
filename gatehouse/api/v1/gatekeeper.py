"""
Gate endpoints: pass scanning, lifecycle transitions and daily statistics.
"""

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from gatehouse.api import deps
from gatehouse.core.exceptions import AuthorizationError, ErrorCode, ValidationError
from gatehouse.core.logging import get_logger
from gatehouse.models.enums import VisitorStatus
from gatehouse.models.user import User
from gatehouse.schemas.visitor import VisitorEnvelope, VisitorResponse, VisitorStats, VisitorStatusUpdate
from gatehouse.services.notification.notification_dispatcher import NotificationDispatcher
from gatehouse.services.visitor.gate_verifier import GateVerifier
from gatehouse.services.visitor.visitor_notification_service import VisitorNotificationService
from gatehouse.services.visitor.visitor_service import VisitorService
from gatehouse.services.visitor.visitor_stats_service import VisitorStatsService
from gatehouse.utils.datetime_utils import DateTimeHelper

logger = get_logger(__name__)

router = APIRouter(prefix="/gatekeeper", tags=["Gatekeeper"])


@router.get("", response_model=List[VisitorResponse])
def todays_visitors(
    current_user: User = Depends(deps.require_gate_staff),
    db: Session = Depends(deps.get_db),
):
    visitors = VisitorService(db).today(current_user.community_id)
    return [VisitorResponse.from_visitor(v) for v in visitors]


@router.get("/scan", response_model=VisitorEnvelope)
def scan_pass(
    token: Optional[str] = Query(None),
    visitor_id: Optional[str] = Query(None, alias="id"),
    tenant_id: Optional[str] = Query(None, alias="tenantId"),
    current_user: User = Depends(deps.require_gate_staff),
    db: Session = Depends(deps.get_db),
):
    """
    Resolve a scanned pass. ``id`` is accepted in place of ``token`` so the
    URL encoded in the pass can be opened directly.
    """
    token = token or visitor_id
    missing = [name for name, value in (("token", token), ("tenantId", tenant_id)) if not value]
    if missing:
        raise ValidationError(
            "token and tenantId are required",
            {name: ["Field required"] for name in missing},
            ErrorCode.MISSING_REQUIRED_FIELD,
        )
    if tenant_id != current_user.community_id:
        logger.warning("Pass scanned for another community", extra={"gate_user": current_user.id})
        raise AuthorizationError("Pass belongs to another community", error_code=ErrorCode.TENANT_MISMATCH)

    visitor = GateVerifier(db).verify(current_user.community_id, token)
    return VisitorEnvelope(visitor=VisitorResponse.from_visitor(visitor))


@router.post("/update-status", response_model=VisitorEnvelope)
def update_status(
    payload: VisitorStatusUpdate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(deps.require_gate_staff),
    db: Session = Depends(deps.get_db),
    dispatcher: NotificationDispatcher = Depends(deps.get_dispatcher),
):
    visitor = VisitorService(db).transition(current_user.community_id, payload.id, payload.status)

    if payload.status == VisitorStatus.CHECKED_IN:
        notice = VisitorNotificationService(db).check_in_notice(visitor)
        background_tasks.add_task(dispatcher.deliver, notice)

    return VisitorEnvelope(visitor=VisitorResponse.from_visitor(visitor))


@router.get("/stats", response_model=VisitorStats)
def visitor_stats(
    day: Optional[str] = Query(None),
    current_user: User = Depends(deps.require_gate_staff),
    db: Session = Depends(deps.get_db),
):
    parsed_day = None
    if day:
        try:
            parsed_day = DateTimeHelper.parse_datetime(day)
        except ValueError as e:
            raise ValidationError(
                f"Invalid day: {day}", {"day": ["Expected an ISO-8601 date"]}, ErrorCode.INVALID_FORMAT
            ) from e
    return VisitorStatsService(db).stats(current_user.community_id, parsed_day)
