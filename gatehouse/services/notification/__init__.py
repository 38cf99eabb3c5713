from gatehouse.services.notification.notification_dispatcher import (
    NotificationDispatcher,
    PushNotice,
    build_payload,
    is_push_token,
)
from gatehouse.services.notification.push_client import PushClient

__all__ = [
    "NotificationDispatcher",
    "PushClient",
    "PushNotice",
    "build_payload",
    "is_push_token",
]
