"""
Emails a freshly issued pass to a GUEST visitor.

Runs as a background task after the create request has returned, so it
only receives plain values and never raises.
"""

from typing import Optional

from gatehouse.config.settings import settings
from gatehouse.core.exceptions import EmailDeliveryError
from gatehouse.core.logging import get_logger
from gatehouse.services.communication.email_service import EmailAttachment, EmailService
from gatehouse.services.communication.template_engine import TemplateEngine, template_engine
from gatehouse.services.visitor.pass_issuer import PASS_CONTENT_TYPE, PASS_FILENAME, PassIssuer

logger = get_logger(__name__)


class VisitorPassMailer:

    def __init__(
        self,
        email_service: EmailService,
        issuer: Optional[PassIssuer] = None,
        templates: Optional[TemplateEngine] = None,
    ):
        self.email_service = email_service
        self.issuer = issuer or PassIssuer()
        self.templates = templates or template_engine

    def send_pass(self, visitor_id: str, tenant_id: str, visitor_name: str, recipient: str) -> bool:
        """
        Render the pass and mail it with the image inline.

        Returns:
            True if the mail transport accepted the message
        """
        visitor_pass = self.issuer.issue_for(visitor_id, tenant_id)
        bodies = self.templates.render_pair(
            "visitor_pass",
            {
                "visitor_name": visitor_name,
                "content_id": visitor_pass.content_id,
                "image_size": self.issuer.image_size,
                "sender_name": settings.EMAIL_FROM_NAME,
            },
        )

        try:
            self.email_service.send(
                to=recipient,
                subject=f"Your {settings.EMAIL_FROM_NAME} visitor pass (QR): {visitor_name}",
                html=bodies["html"],
                text=bodies["text"],
                attachments=[
                    EmailAttachment(
                        filename=PASS_FILENAME,
                        content=visitor_pass.image,
                        content_type=PASS_CONTENT_TYPE,
                        content_id=visitor_pass.content_id,
                    )
                ],
            )
        except EmailDeliveryError as e:
            logger.error(f"Visitor pass email failed: {e.message}", extra={"visitor_id": visitor_id})
            return False

        logger.info("Visitor pass emailed", extra={"visitor_id": visitor_id})
        return True
