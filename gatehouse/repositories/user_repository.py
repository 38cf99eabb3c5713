"""
User repository. Only push tokens are written here.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from gatehouse.models.user import User
from gatehouse.repositories.base.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):

    def __init__(self, db: Session):
        super().__init__(User, db)

    def find_active(self, user_id: str) -> Optional[User]:
        user = self.find_by_id(user_id)
        if user is None or not user.is_active:
            return None
        return user

    def set_push_token(self, user: User, push_token: Optional[str]) -> User:
        """Overwrite (or clear with ``None``) the user's push token."""
        with self.transaction():
            user.push_token = push_token
        return user

    def household_push_tokens(self, user: User) -> List[str]:
        """
        Push tokens for everyone living in the user's unit.

        Falls back to the user alone when they have no unit.
        """
        if user.unit_id is None:
            return [user.push_token] if user.push_token else []

        stmt = select(User).where(
            User.community_id == user.community_id,
            User.unit_id == user.unit_id,
            User.is_active.is_(True),
            User.push_token.is_not(None),
        )
        return [member.push_token for member in self._scalars(stmt)]
