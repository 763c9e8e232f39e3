"""Notification hook — best-effort delivery of lifecycle messages."""

from __future__ import annotations

import asyncio
import logging

from fieldservice.application.ports.notification_port import NotificationPort
from fieldservice.application.ports.notification_repo import NotificationRepository
from fieldservice.domain.entities.notification import Notification
from fieldservice.domain.entities.ticket import Ticket

logger = logging.getLogger(__name__)

SIGNATURE = "Best Regards\nTelecom Services"


def ticket_raised_message(ticket: Ticket) -> tuple[str, str]:
    body = (
        f"Dear User,\nTicket with {ticket.id} raised successfully and assigned to "
        f"{ticket.engineer_label()}.\n\n"
        "Ticket Details:\n"
        f"Ticket ID: {ticket.id}\n"
        f"Service Type: {ticket.service_type.value}\n"
        f"Description: {ticket.description}\n"
        f"Location: {ticket.address or ticket.pincode}\n"
        f"Created at: {ticket.created_at.isoformat()}\n\n"
        f"{SIGNATURE}"
    )
    return "Ticket Raised Successfully", body


def ticket_resolved_message(ticket: Ticket) -> tuple[str, str]:
    return "Ticket resolved", f"Your ticket with id {ticket.id} has been resolved."


def engineer_approval_message(approved: bool) -> tuple[str, str]:
    if approved:
        return (
            "Registration Approved",
            "Dear Engineer,\nWelcome! Your registration was successfully approved. "
            f"You can login now.\n{SIGNATURE}",
        )
    return (
        "Registration Denied",
        "Dear Engineer,\nSorry, your registration was denied. "
        f"Please try again later.\n{SIGNATURE}",
    )


class NotificationDispatcher:
    """Fire-and-forget wrapper around a NotificationPort.

    Delivery problems are logged and reported as False; they never reach the
    operation that triggered the notification. When an inbox is attached,
    every dispatched message also leaves an in-app entry for the recipient,
    on the same best-effort terms.
    """

    def __init__(
        self,
        sink: NotificationPort,
        timeout_seconds: float = 10.0,
        inbox: NotificationRepository | None = None,
    ):
        self._sink = sink
        self._timeout = timeout_seconds
        self._inbox = inbox

    async def dispatch(
        self, to_email: str | None, subject: str, body: str, summary: str | None = None
    ) -> bool:
        """Send *subject*/*body*; the inbox entry carries *summary* (or the subject)."""
        if not to_email or not subject or not body:
            logger.warning("Skipping notification with missing fields (to=%r, subject=%r)", to_email, subject)
            return False
        await self._record(to_email, summary or subject)
        try:
            await asyncio.wait_for(self._sink.send(to_email, subject, body), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning("Notification '%s' to %s timed out after %.1fs", subject, to_email, self._timeout)
            return False
        except Exception:
            logger.exception("Notification '%s' to %s failed", subject, to_email)
            return False
        logger.info("Notification '%s' sent to %s", subject, to_email)
        return True

    async def _record(self, to_email: str, message: str) -> None:
        if self._inbox is None:
            return
        try:
            await self._inbox.save(Notification(id=None, email=to_email, message=message))
        except Exception:
            logger.exception("Recording inbox entry for %s failed", to_email)
