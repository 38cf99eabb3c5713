"""
Resolves a scanned pass back to a visitor of the scanning gate's community.
"""

from sqlalchemy.orm import Session

from gatehouse.core.exceptions import ResourceNotFoundError
from gatehouse.core.logging import get_logger
from gatehouse.models.visitor import Visitor
from gatehouse.repositories.visitor_repository import VisitorRepository
from gatehouse.services.visitor.pass_issuer import extract_visitor_id

logger = get_logger(__name__)


class GateVerifier:

    def __init__(self, db: Session):
        self.visitors = VisitorRepository(db)

    def verify(self, tenant_id: str, token: str) -> Visitor:
        """
        Look up the visitor a token names. Read-only.

        Raises:
            ResourceNotFoundError: If the token has no id, or the id is
                unknown in this community
        """
        visitor_id = extract_visitor_id(token)
        if visitor_id is None:
            raise ResourceNotFoundError("Visitor", message="Pass does not identify a visitor")

        visitor = self.visitors.find_in_tenant(tenant_id, visitor_id)
        if visitor is None:
            logger.warning("Scanned pass did not resolve", extra={"community_id": tenant_id})
            raise ResourceNotFoundError("Visitor", visitor_id)
        return visitor
