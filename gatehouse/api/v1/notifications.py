"""
Push token registration for the signed-in user.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gatehouse.api import deps
from gatehouse.models.user import User
from gatehouse.repositories.user_repository import UserRepository
from gatehouse.schemas.notification import PushTokenRegister, SuccessResponse

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.post("/token", response_model=SuccessResponse)
def register_push_token(
    payload: PushTokenRegister,
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
):
    UserRepository(db).set_push_token(current_user, payload.push_token)
    return SuccessResponse()


@router.delete("/token", response_model=SuccessResponse)
def clear_push_token(
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
):
    UserRepository(db).set_push_token(current_user, None)
    return SuccessResponse()
