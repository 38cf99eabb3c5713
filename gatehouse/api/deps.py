# gatehouse/api/deps.py
"""
FastAPI dependencies: database session, caller identity, role checks and
the outbound collaborators (push transport, email).

Example usage in a router:
    from fastapi import Depends, APIRouter
    from gatehouse.api import deps

    router = APIRouter()

    @router.get("/me")
    def read_me(current_user = Depends(deps.get_current_user)):
        return current_user
"""

from functools import lru_cache
from typing import Sequence

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from gatehouse.core.exceptions import AuthenticationError, AuthorizationError
from gatehouse.core.security import verify_token
from gatehouse.db.session import get_db
from gatehouse.models.enums import UserRole
from gatehouse.models.user import User
from gatehouse.repositories.user_repository import UserRepository
from gatehouse.services.communication.email_service import EmailService
from gatehouse.services.notification.notification_dispatcher import NotificationDispatcher
from gatehouse.services.notification.push_client import PushClient

bearer_scheme = HTTPBearer(auto_error=False)


# --- Authentication & Authorization -------------------------------------------

def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to an active user."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing bearer token")

    payload = verify_token(credentials.credentials)
    user = UserRepository(db).find_active(payload["sub"])
    if user is None:
        raise AuthenticationError("User not found or inactive")
    return user


class RoleChecker:
    """Dependency that admits only the given roles"""

    def __init__(self, roles: Sequence[UserRole]):
        self.roles = tuple(roles)

    def __call__(self, current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in self.roles:
            raise AuthorizationError(
                "Insufficient role for this operation",
                required_role=" | ".join(role.value for role in self.roles),
            )
        return current_user


require_resident = RoleChecker([UserRole.RESIDENT])
require_gate_staff = RoleChecker([UserRole.GATEKEEPER, UserRole.ADMIN])


# --- Collaborators --------------------------------------------------------------

@lru_cache()
def get_push_client() -> PushClient:
    return PushClient()


def get_dispatcher(client: PushClient = Depends(get_push_client)) -> NotificationDispatcher:
    return NotificationDispatcher(client)


def get_email_service() -> EmailService:
    return EmailService()


__all__ = [
    "get_db",
    "get_current_user",
    "RoleChecker",
    "require_resident",
    "require_gate_staff",
    "get_push_client",
    "get_dispatcher",
    "get_email_service",
]
