from gatehouse.services.booking.booking_reminder_service import BookingReminderService, ReminderWindow

__all__ = ["BookingReminderService", "ReminderWindow"]
