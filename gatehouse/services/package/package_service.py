"""
Gate package desk.

Creating a package pushes a notice to its owner; marking it picked emails
the owner the photo taken on arrival. Both side effects are returned as
plain values for the caller to run after the response.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from gatehouse.config.settings import settings
from gatehouse.core.exceptions import ConflictError, EmailDeliveryError, ErrorCode, ResourceNotFoundError
from gatehouse.core.logging import get_logger
from gatehouse.models.enums import NotificationType, PackageStatus, UserRole
from gatehouse.models.package import Package
from gatehouse.repositories.package_repository import PackageRepository
from gatehouse.repositories.user_repository import UserRepository
from gatehouse.schemas.package.package import PackageCreate
from gatehouse.services.communication.email_service import EmailAttachment, EmailService
from gatehouse.services.communication.template_engine import TemplateEngine, template_engine
from gatehouse.services.notification.notification_dispatcher import PushNotice, build_payload
from gatehouse.utils.datetime_utils import DateTimeHelper

logger = get_logger(__name__)


@dataclass
class PickupEmail:
    """Everything needed to send the pickup email without a session."""
    recipient: str
    owner_name: str
    package_name: str
    picked_at: datetime
    image: Optional[bytes]
    image_content_type: str


class PackageService:

    def __init__(self, db: Session):
        self.repository = PackageRepository(db)
        self.users = UserRepository(db)

    def create(self, tenant_id: str, data: PackageCreate) -> Tuple[Package, PushNotice]:
        """
        Log a parcel for a resident of this community.

        Raises:
            ResourceNotFoundError: If the owner is not a resident here
        """
        owner = self.users.find_in_tenant(tenant_id, data.user_id)
        if owner is None or owner.role != UserRole.RESIDENT:
            raise ResourceNotFoundError("User", data.user_id)

        package = self.repository.create(
            Package(
                community_id=tenant_id,
                user_id=owner.id,
                name=data.name,
                image=data.image_bytes(),
                image_content_type=data.content_type,
                status=PackageStatus.PENDING,
            )
        )
        notice = PushNotice(
            tokens=[owner.push_token] if owner.push_token else [],
            title="📦 Package Arrived",
            body=f"Your package ({package.name}) is waiting at the gate",
            data=build_payload(NotificationType.PACKAGE, package.id),
        )
        return package, notice

    def mark_picked(self, tenant_id: str, package_id: str, now: Optional[datetime] = None) -> Tuple[Package, Optional[PickupEmail]]:
        """
        Raises:
            ResourceNotFoundError: If the package is not in this community
            ConflictError: If it was already picked
        """
        package = self.repository.get_in_tenant(tenant_id, package_id)
        if package.status == PackageStatus.PICKED:
            raise ConflictError("Package already picked", ErrorCode.PACKAGE_ALREADY_PICKED, package.id)

        with self.repository.transaction():
            package.status = PackageStatus.PICKED
            package.picked_at = now or DateTimeHelper.utcnow()

        owner = package.owner
        email = None
        if owner is not None and owner.email:
            email = PickupEmail(
                recipient=owner.email,
                owner_name=owner.name,
                package_name=package.name,
                picked_at=package.picked_at,
                image=package.image,
                image_content_type=package.image_content_type,
            )
        logger.info("Package picked", extra={"package_id": package.id, "community_id": tenant_id})
        return package, email

    def list_for_owner(
        self,
        tenant_id: str,
        owner_id: str,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> List[Package]:
        return self.repository.find_for_owner(tenant_id, owner_id, date_from, date_to)


def send_pickup_email(
    email_service: EmailService,
    email: PickupEmail,
    templates: Optional[TemplateEngine] = None,
) -> bool:
    templates = templates or template_engine
    bodies = templates.render_pair(
        "package_picked",
        {
            "owner_name": email.owner_name,
            "package_name": email.package_name,
            "picked_at": email.picked_at.strftime("%Y-%m-%d %H:%M"),
            "sender_name": settings.EMAIL_FROM_NAME,
        },
    )
    attachments = []
    if email.image:
        extension = email.image_content_type.partition("/")[2] or "bin"
        attachments.append(
            EmailAttachment(
                filename=f"package.{extension}",
                content=email.image,
                content_type=email.image_content_type,
            )
        )

    try:
        email_service.send(
            to=email.recipient,
            subject=f"Package picked up: {email.package_name}",
            html=bodies["html"],
            text=bodies["text"],
            attachments=attachments,
        )
    except EmailDeliveryError as e:
        logger.error(f"Package pickup email failed: {e.message}")
        return False
    return True
