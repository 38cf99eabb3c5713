"""
Gate package desk endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from gatehouse.api import deps
from gatehouse.api.v1.params import parse_from, parse_to
from gatehouse.models.enums import UserRole
from gatehouse.models.user import User
from gatehouse.schemas.package import PackageCreate, PackageResponse
from gatehouse.services.communication.email_service import EmailService
from gatehouse.services.notification.notification_dispatcher import NotificationDispatcher
from gatehouse.services.package.package_service import PackageService, send_pickup_email

router = APIRouter(prefix="/packages", tags=["Packages"])


@router.post("", response_model=PackageResponse, status_code=status.HTTP_201_CREATED)
def create_package(
    payload: PackageCreate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(deps.require_gate_staff),
    db: Session = Depends(deps.get_db),
    dispatcher: NotificationDispatcher = Depends(deps.get_dispatcher),
):
    package, notice = PackageService(db).create(current_user.community_id, payload)
    background_tasks.add_task(dispatcher.deliver, notice)
    return package


@router.get("", response_model=List[PackageResponse])
def list_packages(
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    user_id: Optional[str] = Query(None, alias="userId"),
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
):
    """Residents list their own packages; gate staff may pass ``userId``."""
    owner_id = current_user.id
    if current_user.role != UserRole.RESIDENT and user_id:
        owner_id = user_id
    return PackageService(db).list_for_owner(
        current_user.community_id,
        owner_id,
        parse_from(date_from),
        parse_to(date_to),
    )


@router.post("/{package_id}/picked", response_model=PackageResponse)
def mark_package_picked(
    package_id: str,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(deps.require_gate_staff),
    db: Session = Depends(deps.get_db),
    email_service: EmailService = Depends(deps.get_email_service),
):
    package, email = PackageService(db).mark_picked(current_user.community_id, package_id)
    if email is not None:
        background_tasks.add_task(send_pickup_email, email_service, email)
    return package
