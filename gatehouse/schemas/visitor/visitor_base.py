# --- File: gatehouse/schemas/visitor/visitor_base.py ---
"""
Visitor request schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import EmailStr, Field, TypeAdapter, ValidationError, field_validator, model_validator

from gatehouse.models.enums import VisitorStatus, VisitorType
from gatehouse.schemas.common.base import BaseCreateSchema, BaseSchema
from gatehouse.utils.datetime_utils import DateTimeHelper

__all__ = [
    "VisitorCreate",
    "VisitorStatusUpdate",
]

_email_adapter = TypeAdapter(EmailStr)


class VisitorCreate(BaseCreateSchema):
    """
    Visitor announced by a resident.

    GUEST visitors receive their pass by email, so their contact must be
    an email address. Other visitor types accept any contact string.
    """

    name: str = Field(..., min_length=1, max_length=255, description="Visitor display name")
    contact: str = Field(..., min_length=1, max_length=255, description="Email or phone")
    visit_date: Optional[datetime] = Field(
        default=None,
        description="Expected visit time; defaults to now",
    )
    visitor_type: VisitorType = Field(default=VisitorType.GUEST)
    vehicle_no: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("visitor_type", mode="before")
    @classmethod
    def normalize_visitor_type(cls, v: Any) -> Any:
        if v is None or v == "":
            return VisitorType.GUEST
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("visit_date")
    @classmethod
    def normalize_visit_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return DateTimeHelper.to_naive_utc(v)

    @field_validator("vehicle_no", "notes")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @model_validator(mode="after")
    def guest_contact_is_email(self) -> "VisitorCreate":
        if self.visitor_type == VisitorType.GUEST:
            try:
                _email_adapter.validate_python(self.contact)
            except ValidationError:
                raise ValueError("contact must be a valid email address for GUEST visitors")
        return self


class VisitorStatusUpdate(BaseSchema):
    """Gate transition request."""

    id: str = Field(..., min_length=1, description="Visitor id")
    status: VisitorStatus = Field(..., description="Target status")
