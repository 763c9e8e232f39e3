"""NotificationInboxUseCase — the caller's in-app notifications."""

from __future__ import annotations

import logging

from fieldservice.application.geocoding import required_text
from fieldservice.application.principals import Principal
from fieldservice.application.ports.notification_repo import NotificationRepository
from fieldservice.application.results import OperationResult, guarded
from fieldservice.domain.entities.notification import Notification
from fieldservice.domain.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def parse_notification_id(raw) -> int:
    text = str(raw).strip() if raw is not None else ""
    if not text.isdigit() or int(text) <= 0:
        raise ValidationError("Invalid notification ID")
    return int(text)


class NotificationInboxUseCase:
    def __init__(self, notification_repo: NotificationRepository):
        self._inbox = notification_repo

    async def list_notifications(self, principal: Principal, unread_only: bool = False) -> OperationResult:
        async def run() -> OperationResult:
            entries = await self._inbox.list_by_email(principal.email, unread_only=unread_only)
            return OperationResult.ok(data=entries)

        return await guarded("listing notifications", run)

    async def mark_as_read(self, principal: Principal, notification_id) -> OperationResult:
        """Only the recipient may mark an entry; others get "not found"."""

        async def run() -> OperationResult:
            nid = parse_notification_id(notification_id)
            entry = await self._inbox.get_by_id(nid)
            if entry is None or entry.email != principal.email:
                raise NotFoundError("Notification not found")
            if entry.mark_read():
                await self._inbox.mark_read(nid)
            return OperationResult.ok("Notification marked as read", data=entry)

        return await guarded("marking the notification as read", run)

    async def create_notification(self, email, message) -> OperationResult:
        async def run() -> OperationResult:
            entry = Notification(
                id=None,
                email=required_text("email", email),
                message=required_text("message", message),
            )
            await self._inbox.save(entry)
            logger.info("Notification %s created for %s", entry.id, entry.email)
            return OperationResult.ok("Notification created", data=entry)

        return await guarded("creating the notification", run)
