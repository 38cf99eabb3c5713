"""
Booking reminder job.

Each run looks at CONFIRMED bookings starting in
``[now + REMINDER_WINDOW_START_MINUTES, now + REMINDER_WINDOW_END_MINUTES]``
and reminds their owners. Nothing is recorded about reminders already
sent: with the default one-minute window the trigger must fire exactly
once per minute, or bookings are missed (gaps) or reminded twice (overlap).
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from gatehouse.config.settings import settings
from gatehouse.core.logging import get_logger, log_execution_time
from gatehouse.models.enums import NotificationType
from gatehouse.repositories.booking_repository import BookingRepository
from gatehouse.services.notification.notification_dispatcher import NotificationDispatcher, build_payload
from gatehouse.utils.datetime_utils import DateTimeHelper

logger = get_logger(__name__)

REMINDER_TITLE = "⏰ Booking Starting Soon"


@dataclass
class ReminderWindow:
    start: datetime
    end: datetime

    @classmethod
    def at(cls, now: datetime) -> "ReminderWindow":
        return cls(
            start=now + timedelta(minutes=settings.REMINDER_WINDOW_START_MINUTES),
            end=now + timedelta(minutes=settings.REMINDER_WINDOW_END_MINUTES),
        )


class BookingReminderService:

    def __init__(self, db: Session, dispatcher: NotificationDispatcher):
        self.bookings = BookingRepository(db)
        self.dispatcher = dispatcher

    @log_execution_time()
    def run(self, now: Optional[datetime] = None) -> int:
        """
        Send reminders for bookings entering the window.

        Returns:
            Number of bookings whose owner had a push token
        """
        window = ReminderWindow.at(DateTimeHelper.to_naive_utc(now) if now else DateTimeHelper.utcnow())
        bookings = self.bookings.find_confirmed_starting_between(window.start, window.end)

        sent = 0
        for booking in bookings:
            owner = booking.user
            if owner is None or not owner.push_token:
                continue
            self.dispatcher.send_one(
                owner.push_token,
                REMINDER_TITLE,
                f"Your {booking.facility.name} booking starts in {settings.REMINDER_WINDOW_END_MINUTES} minutes",
                build_payload(NotificationType.BOOKING_REMINDER, booking.id),
            )
            sent += 1

        logger.info(
            "Booking reminders processed",
            extra={"candidates": len(bookings), "sent": sent, "window_start": window.start.isoformat()},
        )
        return sent
