"""
Endpoints for the external scheduler.
"""

import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.orm import Session

from gatehouse.api import deps
from gatehouse.config.settings import settings
from gatehouse.core.exceptions import AuthenticationError
from gatehouse.core.logging import get_logger
from gatehouse.schemas.notification import ReminderRunResponse
from gatehouse.services.booking.booking_reminder_service import BookingReminderService
from gatehouse.services.notification.notification_dispatcher import NotificationDispatcher

logger = get_logger(__name__)

router = APIRouter(prefix="/cron", tags=["Cron"])


def require_cron_secret(
    x_cron_secret: Optional[str] = Header(None, alias="x-cron-secret"),
    secret: Optional[str] = Query(None),
) -> None:
    expected = settings.CRON_SECRET
    supplied = x_cron_secret or secret
    if not expected or not supplied or not secrets.compare_digest(supplied.encode(), expected.encode()):
        logger.warning("Rejected cron trigger")
        raise AuthenticationError("Unauthorized")


@router.get(
    "/booking-reminder",
    response_model=ReminderRunResponse,
    dependencies=[Depends(require_cron_secret)],
)
def booking_reminder(
    db: Session = Depends(deps.get_db),
    dispatcher: NotificationDispatcher = Depends(deps.get_dispatcher),
):
    """Meant to be called exactly once per minute."""
    sent = BookingReminderService(db, dispatcher).run()
    return ReminderRunResponse(ok=True, sent=sent)
