"""
Push notification for visitor check-ins.

The notice is assembled inside the request (token lookup needs the
session) and delivered afterwards from a background task.
"""

from sqlalchemy.orm import Session

from gatehouse.models.enums import NotificationType
from gatehouse.models.visitor import Visitor
from gatehouse.repositories.user_repository import UserRepository
from gatehouse.services.notification.notification_dispatcher import PushNotice, build_payload


class VisitorNotificationService:

    def __init__(self, db: Session):
        self.users = UserRepository(db)

    def check_in_notice(self, visitor: Visitor) -> PushNotice:
        """Notice for everyone in the host's household."""
        tokens = self.users.household_push_tokens(visitor.host) if visitor.host is not None else []
        return PushNotice(
            tokens=tokens,
            title="🚪 Visitor Arrived",
            body=f"{visitor.name} has checked in at the gate",
            data=build_payload(NotificationType.VISITOR_CHECKIN, visitor.id),
        )
