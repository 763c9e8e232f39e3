"""HTTP notification adapter — implements NotificationPort against the email relay."""

from __future__ import annotations

import logging

import httpx

from fieldservice.application.ports.notification_port import NotificationPort
from fieldservice.domain.errors import NotificationError

logger = logging.getLogger(__name__)


class HttpNotificationAdapter(NotificationPort):
    """Posts `{userEmail, subject, emailBody}` to the notification service."""

    def __init__(
        self,
        service_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._url = service_url
        self._timeout = timeout
        self._transport = transport

    async def send(self, to_email: str, subject: str, body: str) -> None:
        payload = {"userEmail": to_email, "subject": subject, "emailBody": body}
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(self._url, json=payload, timeout=self._timeout)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise NotificationError(f"Notification service rejected '{subject}' for {to_email}: {e}") from e
        logger.debug("Notification relay accepted '%s' for %s", subject, to_email)
