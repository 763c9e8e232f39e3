"""TicketQueryUseCase — role-scoped ticket listings."""

from __future__ import annotations

from fieldservice.application.principals import Principal
from fieldservice.application.ports.ticket_repo import TicketRepository
from fieldservice.application.results import OperationResult, guarded
from fieldservice.application.use_cases.ticket_lifecycle import parse_status, parse_ticket_id
from fieldservice.domain.errors import NotFoundError, ValidationError
from fieldservice.domain.value_objects.enums import Priority


def parse_priority(raw) -> Priority:
    try:
        return Priority(str(raw).strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid priority: {raw}") from None


class TicketQueryUseCase:
    def __init__(self, ticket_repo: TicketRepository):
        self._tickets = ticket_repo

    async def list_tickets(self, principal: Principal) -> OperationResult:
        """Users and engineers do not see deferred tickets here; admins see everything."""

        async def run() -> OperationResult:
            return OperationResult.ok(data=await principal.list_tickets(self._tickets))

        return await guarded("listing tickets", run)

    async def list_tickets_by_status(self, principal: Principal, status) -> OperationResult:
        async def run() -> OperationResult:
            parsed = parse_status(status)
            return OperationResult.ok(
                data=await principal.list_tickets_by_status(self._tickets, parsed)
            )

        return await guarded("listing tickets by status", run)

    async def list_tickets_by_priority(self, principal: Principal, priority) -> OperationResult:
        async def run() -> OperationResult:
            parsed = parse_priority(priority)
            return OperationResult.ok(
                data=await principal.list_tickets_by_priority(self._tickets, parsed)
            )

        return await guarded("listing tickets by priority", run)

    async def get_ticket(self, principal: Principal, ticket_id) -> OperationResult:
        async def run() -> OperationResult:
            ticket = await self._tickets.get_by_id(parse_ticket_id(ticket_id))
            # Hide existence of other people's tickets
            if ticket is None or not principal.can_view(ticket):
                raise NotFoundError("Ticket not found")
            return OperationResult.ok(data=ticket)

        return await guarded("fetching the ticket", run)
