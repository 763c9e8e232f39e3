"""EngineerAdminUseCase — admin views of engineers and users, registration approval."""

from __future__ import annotations

import logging
from datetime import tzinfo

from fieldservice.application.notifications import (
    NotificationDispatcher,
    engineer_approval_message,
)
from fieldservice.application.ports.engineer_repo import EngineerRepository
from fieldservice.application.ports.ticket_repo import TicketRepository
from fieldservice.application.ports.user_repo import UserRepository
from fieldservice.application.results import OperationResult, guarded
from fieldservice.application.use_cases.ticket_lifecycle import parse_ticket_id
from fieldservice.domain.entities.engineer import Engineer
from fieldservice.domain.entities.ticket import utcnow
from fieldservice.domain.errors import NotFoundError, ValidationError
from fieldservice.domain.policies.engineer_ranking import (
    filter_candidates,
    rank_engineers,
    weekday_name,
)
from fieldservice.domain.value_objects.enums import WEEKDAYS

logger = logging.getLogger(__name__)


def parse_weekday(raw: str | None) -> str | None:
    if raw is None or not str(raw).strip():
        return None
    name = str(raw).strip().capitalize()
    if name not in WEEKDAYS:
        raise ValidationError(f"Invalid weekday: {raw}")
    return name


class EngineerAdminUseCase:
    def __init__(
        self,
        ticket_repo: TicketRepository,
        engineer_repo: EngineerRepository,
        user_repo: UserRepository,
        notifier: NotificationDispatcher,
        local_tz: tzinfo | None = None,
    ):
        self._tickets = ticket_repo
        self._engineers = engineer_repo
        self._users = user_repo
        self._notifier = notifier
        self._tz = local_tz

    async def eligible_engineers_for_ticket(self, ticket_id, weekday: str | None = None) -> OperationResult:
        """Reassignment candidates for a ticket.

        Approved engineers available on *weekday* (today when omitted) with a
        matching specialization, minus the ticket's current engineer, ordered
        like the assignment engine orders them.
        """

        async def run() -> OperationResult:
            tid = parse_ticket_id(ticket_id)
            day = parse_weekday(weekday) or weekday_name(utcnow(), self._tz)
            ticket = await self._tickets.get_by_id(tid)
            if ticket is None:
                raise NotFoundError("Ticket not found")

            available = await self._engineers.list_available(day)
            candidates = [
                e for e in filter_candidates(available, day, ticket.service_type)
                if e.email != ticket.engineer_email
            ]
            ranked = rank_engineers(candidates, ticket.location)
            # Engineers without a location cannot be ranked but are still valid picks
            ranked_emails = {r.engineer.email for r in ranked}
            unranked = [e for e in candidates if e.email not in ranked_emails]

            logger.info(
                "Ticket %s: %d eligible engineers on %s for '%s'",
                tid, len(candidates), day, ticket.service_type.value,
            )
            return OperationResult.ok(
                data={
                    "ticket": ticket,
                    "weekday": day,
                    "engineers": ranked,
                    "unlocated": unranked,
                }
            )

        return await guarded("finding eligible engineers", run)

    async def list_engineers(
        self, approved: bool | None = None, weekday: str | None = None
    ) -> OperationResult:
        """All engineers, optionally narrowed by approval and by a day they work."""

        async def run() -> OperationResult:
            day = parse_weekday(weekday)
            if approved is None:
                engineers = await self._engineers.get_all()
            else:
                engineers = await self._engineers.list_by_approval(approved)
            if day is not None:
                engineers = [e for e in engineers if e.is_available_on(day)]
            return OperationResult.ok(data=engineers)

        return await guarded("listing engineers", run)

    async def get_engineer(self, engineer_email: str) -> OperationResult:
        async def run() -> OperationResult:
            return OperationResult.ok(data=await self._require_engineer(engineer_email))

        return await guarded("fetching the engineer", run)

    async def list_users(self) -> OperationResult:
        async def run() -> OperationResult:
            return OperationResult.ok(data=await self._users.get_all())

        return await guarded("listing users", run)

    async def approve_engineer(self, engineer_email: str, approve: bool) -> OperationResult:
        """Flip the approval gate and tell the engineer, best effort."""

        async def run() -> OperationResult:
            engineer = await self._require_engineer(engineer_email)
            engineer.is_engineer = bool(approve)
            await self._engineers.update(engineer)

            logger.info("Engineer %s approval set to %s", engineer.email, engineer.is_engineer)
            subject, body = engineer_approval_message(engineer.is_engineer)
            await self._notifier.dispatch(engineer.email, subject, body)
            return OperationResult.ok("Engineer approval updated", data=engineer)

        return await guarded("approving the engineer", run)

    async def _require_engineer(self, engineer_email: str | None) -> Engineer:
        if not engineer_email or not engineer_email.strip():
            raise ValidationError("Missing engineer email")
        engineer = await self._engineers.get_by_email(engineer_email.strip())
        if engineer is None:
            raise NotFoundError("Engineer not found")
        return engineer
