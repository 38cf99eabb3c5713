# --- File: gatehouse/schemas/package/package.py ---
"""
Gate package schemas.

Images arrive as base64, either bare or as a ``data:<type>;base64,`` URL
(what a browser ``FileReader`` produces).
"""

from __future__ import annotations

import base64
import binascii
from datetime import datetime
from typing import Any, Optional

from pydantic import Field, field_validator, model_validator

from gatehouse.models.enums import PackageStatus
from gatehouse.schemas.common.base import BaseCreateSchema, BaseResponseSchema

__all__ = ["PackageCreate", "PackageResponse"]

DEFAULT_IMAGE_TYPE = "image/jpeg"


class PackageCreate(BaseCreateSchema):
    user_id: str = Field(..., min_length=1, description="Owning resident")
    name: str = Field(..., min_length=1, max_length=255)
    image: str = Field(..., min_length=1, description="Base64 image or data URL")
    content_type: str = Field(default=DEFAULT_IMAGE_TYPE, max_length=100)

    @model_validator(mode="before")
    @classmethod
    def split_data_url(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        image = data.get("image")
        if isinstance(image, str) and image.startswith("data:") and "," in image:
            header, payload = image.split(",", 1)
            media_type = header[len("data:"):].split(";", 1)[0]
            data = dict(data)
            data["image"] = payload
            if media_type and not (data.get("contentType") or data.get("content_type")):
                data["contentType"] = media_type
        return data

    @field_validator("image")
    @classmethod
    def validate_base64(cls, v: str) -> str:
        try:
            base64.b64decode(v, validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("image must be base64 encoded")
        return v

    def image_bytes(self) -> bytes:
        return base64.b64decode(self.image)


class PackageResponse(BaseResponseSchema):
    community_id: str
    user_id: str
    name: str
    status: PackageStatus
    image_content_type: str
    picked_at: Optional[datetime] = None
