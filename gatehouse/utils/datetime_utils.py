"""
Date and time helpers.

All persisted timestamps are naive UTC; anything arriving with tzinfo is
converted before it reaches a query or a column.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple, Union

from dateutil import parser
from dateutil.parser import isoparser


class DateTimeHelper:
    """Date and time manipulation utilities"""

    @staticmethod
    def utcnow() -> datetime:
        """Current UTC time without tzinfo"""
        return datetime.now(timezone.utc).replace(tzinfo=None)

    @staticmethod
    def to_naive_utc(dt: Optional[datetime]) -> Optional[datetime]:
        if dt is None or dt.tzinfo is None:
            return dt
        return dt.astimezone(timezone.utc).replace(tzinfo=None)

    @staticmethod
    def parse_datetime(value: str) -> datetime:
        """Parse an ISO-8601 date or datetime string into naive UTC"""
        try:
            parsed = parser.isoparse(value)
        except (ValueError, TypeError) as e:
            raise ValueError(f"Unable to parse datetime string: {value}") from e
        return DateTimeHelper.to_naive_utc(parsed)

    @staticmethod
    def start_of_day(day: Union[date, datetime]) -> datetime:
        if isinstance(day, datetime):
            day = DateTimeHelper.to_naive_utc(day).date()
        return datetime.combine(day, time.min)

    @staticmethod
    def day_bounds(day: Union[date, datetime]) -> Tuple[datetime, datetime]:
        """Half-open ``[start, start + 24h)`` range for a calendar day"""
        start = DateTimeHelper.start_of_day(day)
        return start, start + timedelta(days=1)

    @staticmethod
    def parse_range_end(value: str) -> datetime:
        """Parse an inclusive upper bound; a bare date covers that whole day"""
        try:
            day = isoparser().parse_isodate(value.strip())
        except (ValueError, TypeError):
            return DateTimeHelper.parse_datetime(value)
        return datetime.combine(day, time.max)
