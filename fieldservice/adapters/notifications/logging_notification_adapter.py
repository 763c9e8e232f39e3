"""Logging notification adapter — used when no notification service is configured."""

from __future__ import annotations

import logging

from fieldservice.application.ports.notification_port import NotificationPort

logger = logging.getLogger(__name__)


class LoggingNotificationAdapter(NotificationPort):
    async def send(self, to_email: str, subject: str, body: str) -> None:
        logger.info("Notification to %s: %s\n%s", to_email, subject, body)
