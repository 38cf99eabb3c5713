"""
Booking reminder window.
"""
from datetime import datetime, timedelta

import pytest

from conftest import ExplodingClient, FakePushClient, expo_token
from gatehouse.models.enums import BookingStatus
from gatehouse.services.booking.booking_reminder_service import (
    REMINDER_TITLE,
    BookingReminderService,
    ReminderWindow,
)
from gatehouse.services.notification.notification_dispatcher import NotificationDispatcher

T = datetime(2024, 5, 1, 17, 0)


@pytest.fixture
def push():
    return FakePushClient()


@pytest.fixture
def reminder(db, push):
    return BookingReminderService(db, NotificationDispatcher(push))


def test_window_is_nine_to_ten_minutes_ahead():
    window = ReminderWindow.at(T)
    assert window.start == T + timedelta(minutes=9)
    assert window.end == T + timedelta(minutes=10)


def test_booking_in_window_is_reminded_exactly_once(reminder, push, make_user, make_booking):
    owner = make_user(push_token=expo_token(1))
    booking = make_booking(owner, starts_at=T + timedelta(minutes=9, seconds=30), facility_name="Pool")

    assert reminder.run(now=T) == 1
    assert push.messages == [{
        "to": expo_token(1),
        "sound": "default",
        "title": REMINDER_TITLE,
        "body": "Your Pool booking starts in 10 minutes",
        "data": {"type": "BOOKING_REMINDER", "entityId": booking.id, "bookingId": booking.id},
    }]

    # One minute later the window is [T+10, T+11]; no marker is needed
    assert reminder.run(now=T + timedelta(minutes=1)) == 0
    assert len(push.messages) == 1


def test_window_bounds_are_inclusive(reminder, make_user, make_booking):
    owner = make_user(push_token=expo_token(1))
    make_booking(owner, starts_at=T + timedelta(minutes=9))
    make_booking(owner, starts_at=T + timedelta(minutes=10))
    make_booking(owner, starts_at=T + timedelta(minutes=10, seconds=1))

    assert reminder.run(now=T) == 2


@pytest.mark.parametrize("status", [BookingStatus.PENDING, BookingStatus.CANCELLED, BookingStatus.COMPLETED])
def test_only_confirmed_bookings(reminder, push, make_user, make_booking, status):
    make_booking(make_user(push_token=expo_token(1)), starts_at=T + timedelta(minutes=9, seconds=30), status=status)

    assert reminder.run(now=T) == 0
    assert push.calls == 0


def test_owner_without_token_is_skipped(reminder, push, make_user, make_booking):
    make_booking(make_user(), starts_at=T + timedelta(minutes=9, seconds=30))

    assert reminder.run(now=T) == 0
    assert push.calls == 0


def test_transport_failure_does_not_abort_run(db, make_user, make_booking):
    push = FakePushClient(fail_batches={0})
    make_booking(make_user(push_token=expo_token(1)), starts_at=T + timedelta(minutes=9, seconds=10))
    make_booking(make_user(push_token=expo_token(2)), starts_at=T + timedelta(minutes=9, seconds=20))

    sent = BookingReminderService(db, NotificationDispatcher(push)).run(now=T)

    assert sent == 2
    assert [m["to"] for m in push.messages] == [expo_token(2)]


def test_unexpected_client_error_does_not_abort_run(db, make_user, make_booking):
    client = ExplodingClient(fail_calls={0})
    make_booking(make_user(push_token=expo_token(1)), starts_at=T + timedelta(minutes=9, seconds=10))
    make_booking(make_user(push_token=expo_token(2)), starts_at=T + timedelta(minutes=9, seconds=20))

    sent = BookingReminderService(db, NotificationDispatcher(client)).run(now=T)

    assert client.calls == 2
    assert sent == 2
