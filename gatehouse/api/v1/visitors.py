"""
Resident-facing visitor endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from gatehouse.api import deps
from gatehouse.api.v1.params import parse_from, parse_to, parse_visitor_type
from gatehouse.models.enums import UserRole, VisitorStatus, VisitorType
from gatehouse.models.user import User
from gatehouse.schemas.visitor import VisitorCreate, VisitorCreatedResponse, VisitorResponse
from gatehouse.services.communication.email_service import EmailService
from gatehouse.services.visitor.visitor_pass_mailer import VisitorPassMailer
from gatehouse.services.visitor.visitor_service import VisitorService

router = APIRouter(prefix="/visitors", tags=["Visitors"])


@router.post(
    "/create-visitor",
    response_model=VisitorCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_visitor(
    payload: VisitorCreate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(deps.require_resident),
    db: Session = Depends(deps.get_db),
    email_service: EmailService = Depends(deps.get_email_service),
):
    visitor = VisitorService(db).create(current_user.community_id, current_user.id, payload)

    message = "Visitor created"
    if visitor.visitor_type == VisitorType.GUEST:
        mailer = VisitorPassMailer(email_service)
        background_tasks.add_task(
            mailer.send_pass,
            visitor.id,
            visitor.community_id,
            visitor.name,
            visitor.contact,
        )
        message = "Visitor created and pass email dispatched"

    return VisitorCreatedResponse(visitor=VisitorResponse.from_visitor(visitor), message=message)


@router.get("", response_model=List[VisitorResponse])
def list_visitors(
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    visitor_status: Optional[VisitorStatus] = Query(None, alias="status"),
    visitor_type: Optional[str] = Query(None, alias="visitorType"),
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
):
    """Residents see the visitors they host; gate staff see the whole community."""
    host_id = current_user.id if current_user.role == UserRole.RESIDENT else None
    visitors = VisitorService(db).query(
        current_user.community_id,
        date_from=parse_from(date_from),
        date_to=parse_to(date_to),
        status=visitor_status,
        visitor_type=parse_visitor_type(visitor_type),
        host_id=host_id,
    )
    return [VisitorResponse.from_visitor(v) for v in visitors]
