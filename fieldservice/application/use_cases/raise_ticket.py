"""RaiseTicketUseCase — full pipeline: geocode → id → priority → persist → assign → notify."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime

from fieldservice.application.notifications import NotificationDispatcher, ticket_raised_message
from fieldservice.application.ports.geocoder_port import GeocoderPort
from fieldservice.application.ports.ticket_repo import TicketRepository
from fieldservice.application.ports.user_repo import UserRepository
from fieldservice.application.results import ErrorCode, OperationResult
from fieldservice.application.use_cases.assign_engineer import AssignEngineerUseCase
from fieldservice.domain.entities.ticket import Ticket, utcnow
from fieldservice.domain.errors import FieldServiceError, NotFoundError, ValidationError
from fieldservice.domain.policies.priority import PriorityPolicy, score_priority
from fieldservice.domain.value_objects.enums import ServiceType, TicketStatus
from fieldservice.domain.value_objects.geo_point import GeocodedAddress

logger = logging.getLogger(__name__)


@dataclass
class RaiseTicketCommand:
    user_email: str
    service_type: str
    pincode: str
    description: str
    created_at: datetime | None = None


class RaiseTicketUseCase:
    """Creates a ticket and runs the assignment engine on it."""

    def __init__(
        self,
        geocoder: GeocoderPort,
        ticket_repo: TicketRepository,
        user_repo: UserRepository,
        assigner: AssignEngineerUseCase,
        notifier: NotificationDispatcher,
        priority_policy: PriorityPolicy | None = None,
        geocoder_timeout_seconds: float = 10.0,
    ):
        self._geocoder = geocoder
        self._tickets = ticket_repo
        self._users = user_repo
        self._assigner = assigner
        self._notifier = notifier
        self._priority = priority_policy or PriorityPolicy()
        self._geocoder_timeout = geocoder_timeout_seconds

    async def execute(self, command: RaiseTicketCommand) -> OperationResult:
        """Raise a ticket for a user.

        Steps run strictly in order: geocode, reserve id, initial priority,
        insert, assign, store the assignment, notify the owner.
        """
        try:
            service_type = self._validate(command)
            owner = await self._users.get_by_email(command.user_email.strip())
            if owner is None:
                raise NotFoundError("User not found")
        except FieldServiceError as e:
            return OperationResult.from_error(e)

        try:
            resolved = await self._geocode(command.pincode.strip())

            ticket = Ticket(
                id=await self._tickets.next_ticket_id(),
                user_email=owner.email,
                service_type=service_type,
                pincode=command.pincode.strip(),
                description=command.description.strip(),
                location=resolved.location if resolved else None,
                address=resolved.display_address if resolved else None,
                status=TicketStatus.OPEN,
                accepted=False,
                created_at=command.created_at or utcnow(),
            )
            # No engineer yet, so this is "low" unless fault_is_high applies
            ticket.priority = score_priority(ticket, None, self._priority)
            await self._tickets.save(ticket)
            logger.info(
                "Ticket %s raised by %s (%s, pincode %s, geocoded=%s)",
                ticket.id, ticket.user_email, service_type.value,
                ticket.pincode, ticket.is_location_known(),
            )

            outcome = await self._assigner.execute(ticket)
            if not outcome.assigned:
                logger.info("Ticket %s left unassigned: %s", ticket.id, outcome.message)
                ticket.release()
            elif self._priority.rescore_on_assignment:
                ticket.priority = score_priority(ticket, outcome.engineer, self._priority)
            await self._tickets.update(ticket)
        except FieldServiceError as e:
            logger.warning("Raising ticket for %s failed: %s", command.user_email, e)
            return OperationResult.from_error(e)
        except Exception as e:
            logger.exception("Error raising ticket for %s", command.user_email)
            return OperationResult.fail(ErrorCode.COLLABORATOR, "Error raising ticket", error=str(e))

        subject, body = ticket_raised_message(ticket)
        await self._notifier.dispatch(
            ticket.user_email, subject, body,
            summary=f"Ticket {ticket.id} raised and assigned to {ticket.engineer_label()}",
        )

        return OperationResult.ok("Ticket raised successfully", data=ticket)

    @staticmethod
    def _validate(command: RaiseTicketCommand) -> ServiceType:
        if not command.user_email or not command.user_email.strip():
            raise ValidationError("Missing user email")
        if not command.pincode or not command.pincode.strip():
            raise ValidationError("Missing pincode")
        if not command.description or not command.description.strip():
            raise ValidationError("Missing description")
        try:
            return ServiceType(str(command.service_type).strip().lower())
        except ValueError:
            raise ValidationError(f"Invalid service type: {command.service_type}") from None

    async def _geocode(self, pincode: str) -> GeocodedAddress | None:
        """Resolve the pincode; any failure leaves the ticket un-geocoded."""
        try:
            resolved = await asyncio.wait_for(
                self._geocoder.resolve(pincode), timeout=self._geocoder_timeout
            )
        except asyncio.TimeoutError:
            logger.warning("Geocoding pincode %s timed out after %.1fs", pincode, self._geocoder_timeout)
            return None
        except Exception:
            logger.exception("Geocoding pincode %s failed", pincode)
            return None
        if resolved is None:
            logger.warning("Pincode %s could not be geocoded", pincode)
        return resolved
