"""
Visitor pass rendering.

The pass token is the scan URL of the gate endpoint with the visitor id and
community id as query parameters. It is not signed: knowing a visitor id is
enough to produce a valid pass.
"""

from io import BytesIO
from typing import NamedTuple, Optional
from urllib.parse import parse_qs, urlencode, urlsplit

import qrcode
from PIL import Image

from gatehouse.config.settings import settings
from gatehouse.core.logging import get_logger
from gatehouse.models.visitor import Visitor

logger = get_logger(__name__)

PASS_FILENAME = "visitor-qr.png"
PASS_CONTENT_TYPE = "image/png"


class VisitorPass(NamedTuple):
    token: str
    image: bytes
    content_id: str


class PassIssuer:
    """Encodes a visitor id into a square QR PNG"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        image_size: Optional[int] = None,
        border: Optional[int] = None,
        content_id_domain: Optional[str] = None,
    ):
        self.base_url = (base_url or settings.PASS_BASE_URL).rstrip("/")
        self.image_size = image_size or settings.PASS_IMAGE_SIZE
        self.border = settings.PASS_IMAGE_BORDER if border is None else border
        self.content_id_domain = content_id_domain or settings.PASS_CONTENT_ID_DOMAIN

    def token_for(self, visitor_id: str, tenant_id: str) -> str:
        query = urlencode({"id": visitor_id, "tenantId": tenant_id})
        return f"{self.base_url}{settings.API_V1_STR}/gatekeeper/scan?{query}"

    def content_id_for(self, visitor_id: str) -> str:
        return f"qr-{visitor_id}@{self.content_id_domain}"

    def render(self, token: str) -> bytes:
        """
        Render ``token`` as a PNG.

        Args:
            token: String to encode

        Returns:
            PNG bytes, ``image_size`` pixels square
        """
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=self.border,
        )
        qr.add_data(token)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")
        img = img.resize((self.image_size, self.image_size), Image.Resampling.NEAREST)

        buffer = BytesIO()
        img.save(buffer, format="PNG")
        logger.debug(f"Generated visitor pass image ({self.image_size}x{self.image_size})")
        return buffer.getvalue()

    def issue_for(self, visitor_id: str, tenant_id: str) -> VisitorPass:
        token = self.token_for(visitor_id, tenant_id)
        return VisitorPass(
            token=token,
            image=self.render(token),
            content_id=self.content_id_for(visitor_id),
        )

    def issue(self, visitor: Visitor) -> VisitorPass:
        return self.issue_for(visitor.id, visitor.community_id)


def extract_visitor_id(token: Optional[str]) -> Optional[str]:
    """
    Visitor id carried by a scanned token.

    Accepts a full pass URL (``...?id=<id>``) or a bare id.
    """
    if not token or not token.strip():
        return None
    token = token.strip()

    parts = urlsplit(token)
    if parts.scheme or parts.query:
        values = parse_qs(parts.query).get("id")
        if not values or not values[0].strip():
            return None
        return values[0].strip()
    return token
