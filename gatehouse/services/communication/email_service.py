"""
Outbound email over SMTP.

Supports an HTML body with a plain-text fallback and binary attachments;
an attachment carrying a ``content_id`` is embedded inline so the HTML can
reference it as ``cid:<content_id>``.
"""

import smtplib
import ssl
from dataclasses import dataclass
from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import List, Optional, Sequence

from gatehouse.config.settings import Settings, settings as default_settings
from gatehouse.core.exceptions import EmailDeliveryError
from gatehouse.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class EmailAttachment:
    """Binary attachment; inline when ``content_id`` is set."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"
    content_id: Optional[str] = None


class EmailService:
    """SMTP email sender"""

    def __init__(self, config: Optional[Settings] = None):
        config = config or default_settings
        self.smtp_server = config.SMTP_HOST
        self.smtp_port = config.SMTP_PORT
        self.username = config.SMTP_USER
        self.password = config.SMTP_PASSWORD
        self.use_tls = config.SMTP_TLS
        self.timeout = config.SMTP_TIMEOUT_SECONDS
        self.from_address = config.EMAIL_FROM_ADDRESS or config.SMTP_USER
        self.from_name = config.EMAIL_FROM_NAME

    def send(
        self,
        to: str,
        subject: str,
        html: str,
        text: Optional[str] = None,
        attachments: Sequence[EmailAttachment] = (),
    ) -> None:
        """
        Send one message.

        Raises:
            EmailDeliveryError: If configuration is incomplete or SMTP fails
        """
        if not self.smtp_server or not self.from_address:
            raise EmailDeliveryError("Email configuration incomplete", recipient=to)

        msg = self.build_message(to, subject, html, text, attachments)
        try:
            with smtplib.SMTP(self.smtp_server, self.smtp_port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls(context=ssl.create_default_context())
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP error: {e}", extra={"recipient": to})
            raise EmailDeliveryError(f"SMTP error: {e}", recipient=to) from e

        logger.info(f"Email sent successfully to {to}")

    def build_message(
        self,
        to: str,
        subject: str,
        html: str,
        text: Optional[str] = None,
        attachments: Sequence[EmailAttachment] = (),
    ) -> MIMEMultipart:
        inline = [a for a in attachments if a.content_id]
        regular = [a for a in attachments if not a.content_id]

        body = MIMEMultipart("alternative")
        if text:
            body.attach(MIMEText(text, "plain", "utf-8"))
        body.attach(MIMEText(html, "html", "utf-8"))

        # multipart/mixed > multipart/related > multipart/alternative
        content = body
        if inline:
            content = MIMEMultipart("related")
            content.attach(body)
            for attachment in inline:
                content.attach(self._mime_part(attachment))

        msg = MIMEMultipart("mixed")
        msg.attach(content)
        for attachment in regular:
            msg.attach(self._mime_part(attachment))

        msg["Subject"] = subject
        msg["From"] = formataddr((self.from_name, self.from_address))
        msg["To"] = to
        return msg

    @staticmethod
    def _mime_part(attachment: EmailAttachment) -> MIMEBase:
        maintype, _, subtype = attachment.content_type.partition("/")
        part = MIMEBase(maintype or "application", subtype or "octet-stream")
        part.set_payload(attachment.content)
        encoders.encode_base64(part)
        if attachment.content_id:
            part.add_header("Content-ID", f"<{attachment.content_id}>")
            part.add_header("Content-Disposition", "inline", filename=attachment.filename)
        else:
            part.add_header("Content-Disposition", "attachment", filename=attachment.filename)
        return part


__all__: List[str] = ["EmailAttachment", "EmailService"]
