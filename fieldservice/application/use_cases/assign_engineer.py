"""AssignEngineerUseCase — pick and pre-assign the nearest suitable engineer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import tzinfo

from fieldservice.application.ports.engineer_repo import EngineerRepository
from fieldservice.application.ports.ticket_repo import TicketRepository
from fieldservice.domain.entities.engineer import Engineer
from fieldservice.domain.entities.ticket import Ticket
from fieldservice.domain.policies.engineer_ranking import (
    filter_candidates,
    rank_engineers,
    weekday_name,
)

logger = logging.getLogger(__name__)

NO_ENGINEERS_MESSAGE = "No available engineers for this day"
TICKET_UPDATE_FAILED = "Ticket update failed"
ENGINEER_UPDATE_FAILED = "Engineer update failed."


@dataclass
class AssignmentOutcome:
    """Result of one assignment attempt; engineer_email is None when nobody fits."""

    engineer_email: str | None
    message: str | None = None
    distance_km: float | None = None
    engineer: Engineer | None = None

    @property
    def assigned(self) -> bool:
        return self.engineer_email is not None


class AssignEngineerUseCase:
    """Orchestrates candidate lookup, ranking and the tentative assignment."""

    def __init__(
        self,
        ticket_repo: TicketRepository,
        engineer_repo: EngineerRepository,
        local_tz: tzinfo | None = None,
    ):
        self._tickets = ticket_repo
        self._engineers = engineer_repo
        self._tz = local_tz

    async def execute(self, ticket: Ticket) -> AssignmentOutcome:
        """Pre-assign *ticket* to the best engineer.

        Pipeline:
        1. Weekday the ticket was raised on (engineers' local time)
        2. Engineers available that day
        3. Specialization filter
        4. Rank by distance, then load
        5. Persist ticket reference and engineer workload

        The ticket stays unaccepted; the engineer has to accept it.
        """
        weekday = weekday_name(ticket.created_at, self._tz)

        available = await self._engineers.list_available(weekday)
        if not available:
            logger.info("Ticket %s: no engineers available on %s", ticket.id, weekday)
            return AssignmentOutcome(engineer_email=None, message=NO_ENGINEERS_MESSAGE)

        candidates = filter_candidates(available, weekday, ticket.service_type)
        ranked = rank_engineers(candidates, ticket.location)
        if not ranked:
            logger.info(
                "Ticket %s: %d engineers available on %s, none ranked for '%s'",
                ticket.id, len(available), weekday, ticket.service_type.value,
            )
            return AssignmentOutcome(engineer_email=None, message=NO_ENGINEERS_MESSAGE)

        best = ranked[0]
        chosen = best.engineer

        ticket.assign_to(chosen.email)
        try:
            await self._tickets.update(ticket)
        except Exception:
            logger.exception("Ticket %s: failed to store engineer %s", ticket.id, chosen.email)
            ticket.release()
            return AssignmentOutcome(engineer_email=None, message=TICKET_UPDATE_FAILED)

        chosen.add_task(ticket.id)
        try:
            await self._engineers.update(chosen)
        except Exception:
            logger.exception("Ticket %s: failed to update workload of %s", ticket.id, chosen.email)
            ticket.release()
            return AssignmentOutcome(engineer_email=None, message=ENGINEER_UPDATE_FAILED)

        logger.info(
            "Ticket %s → Engineer %s (distance: %s km, load: %d)",
            ticket.id, chosen.email,
            None if best.distance_km is None else round(best.distance_km, 2),
            chosen.current_tasks,
        )
        return AssignmentOutcome(
            engineer_email=chosen.email,
            distance_km=best.distance_km,
            engineer=chosen,
        )
