"""
Package repository.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from gatehouse.models.package import Package
from gatehouse.repositories.base.base_repository import BaseRepository


class PackageRepository(BaseRepository[Package]):

    def __init__(self, db: Session):
        super().__init__(Package, db)

    def find_for_owner(
        self,
        tenant_id: str,
        owner_id: str,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> List[Package]:
        stmt = select(Package).where(
            Package.community_id == tenant_id,
            Package.user_id == owner_id,
        )
        if date_from is not None:
            stmt = stmt.where(Package.created_at >= date_from)
        if date_to is not None:
            stmt = stmt.where(Package.created_at <= date_to)
        return self._scalars(stmt.order_by(Package.created_at.desc()))
