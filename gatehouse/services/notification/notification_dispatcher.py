"""
Best-effort push notification dispatch.

Nothing here raises to the caller: invalid tokens are skipped silently and
transport failures are logged. A bulk send is split into chunks of at most
``PUSH_BATCH_LIMIT`` messages; a failed chunk does not stop later chunks
and is not retried.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from gatehouse.config.settings import settings
from gatehouse.core.exceptions import PushDeliveryError
from gatehouse.core.logging import get_logger
from gatehouse.models.enums import NotificationType
from gatehouse.services.notification.push_client import PushClient

logger = get_logger(__name__)

_PUSH_TOKEN_RE = re.compile(r"^(?:Exponent|Expo)PushToken\[.+\]$")
_DEVICE_ID_RE = re.compile(
    r"^[a-z\d]{8}-[a-z\d]{4}-[a-z\d]{4}-[a-z\d]{4}-[a-z\d]{12}$",
    re.IGNORECASE,
)


def is_push_token(token: Any) -> bool:
    """Format check only; says nothing about whether the device exists."""
    if not isinstance(token, str):
        return False
    return bool(_PUSH_TOKEN_RE.match(token) or _DEVICE_ID_RE.match(token))


def build_payload(notification_type: NotificationType, entity_id: str) -> Dict[str, str]:
    """
    Deep-link payload for mobile clients.

    Carries the generic ``entityId`` and the per-type key clients already
    read (``bookingId``, ``visitorId`` or ``packageId``).
    """
    return {
        "type": notification_type.value,
        "entityId": entity_id,
        notification_type.entity_key: entity_id,
    }


@dataclass
class PushNotice:
    """Plain-value message, safe to hand to a background task."""
    tokens: List[str]
    title: str
    body: str
    data: Dict[str, Any] = field(default_factory=dict)


def chunk(items: List[Any], size: int) -> List[List[Any]]:
    if size < 1:
        raise ValueError("chunk size must be positive")
    return [items[i:i + size] for i in range(0, len(items), size)]


class NotificationDispatcher:
    """Sends push messages through a ``PushClient``"""

    def __init__(self, client: PushClient, batch_limit: Optional[int] = None):
        self.client = client
        self.batch_limit = batch_limit or settings.PUSH_BATCH_LIMIT

    @staticmethod
    def _message(token: str, title: str, body: str, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            "to": token,
            "sound": "default",
            "title": title,
            "body": body,
            "data": data or {},
        }

    def send_one(
        self,
        token: Optional[str],
        title: str,
        body: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> Optional[List[Dict[str, Any]]]:
        """
        Send a single message.

        Returns:
            Push tickets, or None when skipped or failed
        """
        if not is_push_token(token):
            return None

        try:
            return self.client.send([self._message(token, title, body, data)])
        except PushDeliveryError as e:
            logger.error(f"Push notification error: {e.message}", extra={"notification_type": (data or {}).get("type")})
            return None
        except Exception as e:
            logger.error(
                f"Unexpected push notification failure: {e}",
                extra={"notification_type": (data or {}).get("type"), "error_type": type(e).__name__},
                exc_info=True,
            )
            return None

    def send_bulk(
        self,
        tokens: Iterable[Optional[str]],
        title: str,
        body: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> int:
        """
        Send the same message to many recipients.

        Returns:
            Number of chunks the transport accepted
        """
        valid = [token for token in (tokens or []) if is_push_token(token)]
        if not valid:
            return 0

        messages = [self._message(token, title, body, data) for token in valid]
        delivered = 0
        for index, batch in enumerate(chunk(messages, self.batch_limit)):
            try:
                self.client.send(batch)
            except PushDeliveryError as e:
                logger.error(
                    f"Bulk push notification error: {e.message}",
                    extra={"chunk_index": index, "batch_size": len(batch)},
                )
                continue
            except Exception as e:
                logger.error(
                    f"Unexpected bulk push failure: {e}",
                    extra={"chunk_index": index, "batch_size": len(batch), "error_type": type(e).__name__},
                    exc_info=True,
                )
                continue
            delivered += 1

        logger.info(
            "Bulk push dispatched",
            extra={"recipients": len(valid), "chunks_delivered": delivered},
        )
        return delivered

    def deliver(self, notice: PushNotice) -> int:
        return self.send_bulk(notice.tokens, notice.title, notice.body, notice.data)


__all__ = [
    "NotificationDispatcher",
    "PushNotice",
    "build_payload",
    "chunk",
    "is_push_token",
]
