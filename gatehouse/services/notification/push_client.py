"""
Expo push transport.

One ``send`` call is one HTTP request; batching is the dispatcher's job.
"""

from typing import Any, Dict, List, Optional

import httpx

from gatehouse.config.settings import Settings, settings as default_settings
from gatehouse.core.exceptions import PushDeliveryError
from gatehouse.core.logging import get_logger

logger = get_logger(__name__)


class PushClient:
    """HTTP client for the Expo push API"""

    def __init__(self, config: Optional[Settings] = None, transport: Optional[httpx.BaseTransport] = None):
        config = config or default_settings
        self.url = config.EXPO_PUSH_URL
        headers = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
            "Content-Type": "application/json",
        }
        if config.EXPO_ACCESS_TOKEN:
            headers["Authorization"] = f"Bearer {config.EXPO_ACCESS_TOKEN}"
        self._client = httpx.Client(
            headers=headers,
            timeout=config.PUSH_TIMEOUT_SECONDS,
            transport=transport,
        )

    def send(self, messages: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Deliver one batch and return Expo's push tickets.

        Raises:
            PushDeliveryError: On transport errors, a non-2xx response or a
                body that is not a ticket envelope
        """
        try:
            response = self._client.post(self.url, json=messages)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PushDeliveryError(
                f"Push service returned {e.response.status_code}",
                batch_size=len(messages),
            ) from e
        except httpx.HTTPError as e:
            raise PushDeliveryError(f"Push transport error: {e}", batch_size=len(messages)) from e

        try:
            body = response.json()
        except ValueError as e:
            raise PushDeliveryError("Push service returned invalid JSON", batch_size=len(messages)) from e

        if not isinstance(body, dict):
            raise PushDeliveryError("Push service returned an unexpected body", batch_size=len(messages))

        tickets = body.get("data") or []
        if isinstance(tickets, dict):
            tickets = [tickets]
        elif not isinstance(tickets, list):
            raise PushDeliveryError("Push service returned an unexpected body", batch_size=len(messages))
        tickets = [t for t in tickets if isinstance(t, dict)]

        errors = [t for t in tickets if t.get("status") == "error"]
        if errors:
            # Per-recipient rejections do not fail the batch
            logger.warning(
                "Push service rejected some messages",
                extra={"rejected": len(errors), "batch_size": len(messages)},
            )
        return tickets

    def close(self) -> None:
        self._client.close()
