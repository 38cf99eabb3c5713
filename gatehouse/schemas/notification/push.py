"""
Push token registration and reminder-trigger schemas.
"""

from __future__ import annotations

from pydantic import Field

from gatehouse.schemas.common.base import BaseSchema

__all__ = ["PushTokenRegister", "SuccessResponse", "ReminderRunResponse"]


class PushTokenRegister(BaseSchema):
    push_token: str = Field(..., min_length=1, max_length=255)


class SuccessResponse(BaseSchema):
    success: bool = True


class ReminderRunResponse(BaseSchema):
    ok: bool = True
    sent: int = Field(..., ge=0, description="Reminders handed to the push transport")
