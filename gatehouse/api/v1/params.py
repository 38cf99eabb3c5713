"""
Query-string parsing shared by the v1 routers.
"""

from datetime import datetime
from typing import Optional

from gatehouse.core.exceptions import ErrorCode, ValidationError
from gatehouse.models.enums import VisitorType
from gatehouse.utils.datetime_utils import DateTimeHelper


def parse_from(value: Optional[str], field: str = "from") -> Optional[datetime]:
    if not value:
        return None
    try:
        return DateTimeHelper.parse_datetime(value)
    except ValueError as e:
        raise ValidationError(
            f"Invalid date: {value}",
            {field: ["Expected an ISO-8601 date or datetime"]},
            ErrorCode.INVALID_FORMAT,
        ) from e


def parse_to(value: Optional[str], field: str = "to") -> Optional[datetime]:
    if not value:
        return None
    try:
        return DateTimeHelper.parse_range_end(value)
    except ValueError as e:
        raise ValidationError(
            f"Invalid date: {value}",
            {field: ["Expected an ISO-8601 date or datetime"]},
            ErrorCode.INVALID_FORMAT,
        ) from e


def parse_visitor_type(value: Optional[str]) -> Optional[VisitorType]:
    if not value:
        return None
    try:
        return VisitorType(value.strip().upper())
    except ValueError as e:
        allowed = ", ".join(t.value for t in VisitorType)
        raise ValidationError(
            f"visitorType must be one of: {allowed}", {"visitorType": [f"Unknown type {value!r}"]}
        ) from e
