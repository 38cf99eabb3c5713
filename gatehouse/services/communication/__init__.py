from gatehouse.services.communication.email_service import EmailAttachment, EmailService
from gatehouse.services.communication.template_engine import TemplateEngine, template_engine

__all__ = [
    "EmailAttachment",
    "EmailService",
    "TemplateEngine",
    "template_engine",
]
