"""TicketLifecycleUseCase — accept / reject / status / reassign transitions.

Every operation mutates the ticket and the engineer workload(s) it touches
and saves them through versioned updates. The caller owns the transaction:
a failed result means the surrounding unit of work must be rolled back.
"""

from __future__ import annotations

import logging

from fieldservice.application.notifications import NotificationDispatcher, ticket_resolved_message
from fieldservice.application.ports.engineer_repo import EngineerRepository
from fieldservice.application.ports.ticket_repo import TicketRepository
from fieldservice.application.principals import Principal
from fieldservice.application.results import OperationResult, guarded
from fieldservice.domain.entities.engineer import Engineer
from fieldservice.domain.entities.ticket import Ticket
from fieldservice.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
)
from fieldservice.domain.value_objects.enums import TicketStatus

logger = logging.getLogger(__name__)


def parse_ticket_id(raw) -> int:
    """Accept ints and numeric strings; anything else is a ValidationError."""
    if isinstance(raw, bool) or raw is None:
        raise ValidationError("Invalid ticket ID")
    if isinstance(raw, int):
        ticket_id = raw
    else:
        text = str(raw).strip()
        if not text.isdigit():
            raise ValidationError("Invalid ticket ID")
        ticket_id = int(text)
    if ticket_id <= 0:
        raise ValidationError("Invalid ticket ID")
    return ticket_id


def parse_status(raw) -> TicketStatus:
    try:
        return TicketStatus(str(raw).strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid status: {raw}") from None


class TicketLifecycleUseCase:
    """Engineer and admin actions on an existing ticket."""

    def __init__(
        self,
        ticket_repo: TicketRepository,
        engineer_repo: EngineerRepository,
        notifier: NotificationDispatcher,
    ):
        self._tickets = ticket_repo
        self._engineers = engineer_repo
        self._notifier = notifier

    # ─── Engineer actions ────────────────────────────────────────────

    async def accept_task(self, engineer_email: str, ticket_id) -> OperationResult:
        """Engineer takes a ticket.

        Idempotent for the same engineer. A ticket already accepted by
        someone else is a conflict; a tentative assignment to someone else
        is released from that engineer's workload first.
        """

        async def run() -> OperationResult:
            engineer = await self._require_engineer(engineer_email)
            tid = parse_ticket_id(ticket_id)
            ticket = await self._require_ticket(tid)

            if ticket.is_accepted_by(engineer.email):
                raise ConflictError("Task already assigned to this engineer")
            if ticket.accepted and ticket.engineer_email:
                raise ConflictError("Task already accepted by another engineer")

            if ticket.engineer_email and not ticket.is_assigned_to(engineer.email):
                await self._release_from(ticket.engineer_email, tid)

            ticket.accept_by(engineer.email)
            await self._tickets.update(ticket)

            if engineer.add_task(tid):
                await self._engineers.update(engineer)

            logger.info("Ticket %s accepted by %s", tid, engineer.email)
            return OperationResult.ok("Task accepted successfully", data=ticket)

        return await guarded("accepting the task", run)

    async def reject_task(self, engineer_email: str, ticket_id) -> OperationResult:
        """Engineer hands a ticket back; it waits for an admin to reassign it."""

        async def run() -> OperationResult:
            engineer = await self._require_engineer(engineer_email)
            tid = parse_ticket_id(ticket_id)
            ticket = await self._require_ticket(tid)

            if not ticket.is_assigned_to(engineer.email):
                raise ConflictError("Task is not assigned to this engineer")

            if engineer.remove_task(tid):
                await self._engineers.update(engineer)

            # status is deliberately left as-is
            ticket.release()
            await self._tickets.update(ticket)

            logger.info("Ticket %s rejected by %s", tid, engineer.email)
            return OperationResult.ok("Task rejected successfully", data=ticket)

        return await guarded("rejecting the task", run)

    async def update_ticket_status(
        self, ticket_id, new_status, principal: Principal | None = None
    ) -> OperationResult:
        """Move a ticket to *new_status*; completion notifies the owner.

        When *principal* is given it must be able to see the ticket, so an
        engineer can only move tickets assigned to them.
        """

        async def run() -> OperationResult:
            status = parse_status(new_status)
            tid = parse_ticket_id(ticket_id)
            ticket = await self._require_ticket(tid)
            if principal is not None and not principal.can_view(ticket):
                raise ConflictError("Task is not assigned to this engineer")

            ticket.change_status(status)
            await self._tickets.update(ticket)
            logger.info("Ticket %s → %s", tid, status.value)

            if status == TicketStatus.COMPLETED:
                subject, body = ticket_resolved_message(ticket)
                await self._notifier.dispatch(ticket.user_email, subject, body, summary=body)

            return OperationResult.ok("Ticket status updated", data=ticket)

        return await guarded("updating ticket status", run)

    # ─── Admin actions ───────────────────────────────────────────────

    async def reassign_ticket(self, ticket_id, new_engineer_email: str) -> OperationResult:
        """Force a ticket onto another engineer and restart the acceptance flow."""

        async def run() -> OperationResult:
            tid = parse_ticket_id(ticket_id)
            ticket = await self._require_ticket(tid)
            new_engineer = await self._require_engineer(new_engineer_email)

            if not new_engineer.can_handle(ticket.service_type):
                raise ConflictError(
                    f"Engineer specialization ({new_engineer.specialization.value}) does not "
                    f"match ticket service type ({ticket.service_type.value})"
                )

            previous = None
            if ticket.engineer_email:
                previous = await self._engineers.get_by_email(ticket.engineer_email)

            if previous is not None:
                if previous.email == new_engineer.email:
                    raise ConflictError(
                        "Cannot reassign ticket to the same engineer who deferred it"
                    )
                if previous.remove_task(tid):
                    await self._engineers.update(previous)

            ticket.assign_to(new_engineer.email)
            ticket.change_status(TicketStatus.OPEN)
            await self._tickets.update(ticket)

            if new_engineer.add_task(tid):
                await self._engineers.update(new_engineer)

            logger.info(
                "Ticket %s reassigned %s → %s",
                tid, previous.email if previous else None, new_engineer.email,
            )
            return OperationResult.ok("Ticket reassigned successfully", data=ticket)

        return await guarded("reassigning the ticket", run)

    # ─── Helpers ─────────────────────────────────────────────────────

    async def _require_engineer(self, email: str | None) -> Engineer:
        if not email or not str(email).strip():
            raise ValidationError("Missing engineer email")
        engineer = await self._engineers.get_by_email(str(email).strip())
        if engineer is None:
            raise NotFoundError("Engineer not found")
        return engineer

    async def _require_ticket(self, ticket_id: int) -> Ticket:
        ticket = await self._tickets.get_by_id(ticket_id)
        if ticket is None:
            raise NotFoundError("Ticket not found")
        return ticket

    async def _release_from(self, engineer_email: str, ticket_id: int) -> None:
        holder = await self._engineers.get_by_email(engineer_email)
        if holder is not None and holder.remove_task(ticket_id):
            await self._engineers.update(holder)
            logger.info("Ticket %s released from tentative engineer %s", ticket_id, engineer_email)
