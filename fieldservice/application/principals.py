"""Principals — the closed set of caller roles, resolved once per request.

Each principal knows which slice of the ticket store it may see, so the
query use cases never branch on a role string.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from fieldservice.application.ports.ticket_repo import TicketRepository
from fieldservice.domain.entities.ticket import Ticket
from fieldservice.domain.errors import ValidationError
from fieldservice.domain.value_objects.enums import Priority, Role, TicketStatus


@dataclass(frozen=True)
class Principal(ABC):
    email: str

    role: ClassVar[Role]

    @abstractmethod
    def can_view(self, ticket: Ticket) -> bool:
        ...

    @abstractmethod
    async def list_tickets(self, tickets: TicketRepository) -> list[Ticket]:
        ...

    @abstractmethod
    async def list_tickets_by_status(
        self, tickets: TicketRepository, status: TicketStatus
    ) -> list[Ticket]:
        ...

    @abstractmethod
    async def list_tickets_by_priority(
        self, tickets: TicketRepository, priority: Priority
    ) -> list[Ticket]:
        ...

    @property
    def is_admin(self) -> bool:
        return False


@dataclass(frozen=True)
class UserPrincipal(Principal):
    role: ClassVar[Role] = Role.USER

    def can_view(self, ticket: Ticket) -> bool:
        return ticket.user_email == self.email

    async def list_tickets(self, tickets):
        return await tickets.list_by_user_email(self.email, include_deferred=False)

    async def list_tickets_by_status(self, tickets, status):
        return await tickets.list_by_status(status, user_email=self.email)

    async def list_tickets_by_priority(self, tickets, priority):
        return await tickets.list_by_priority(priority, user_email=self.email)


@dataclass(frozen=True)
class EngineerPrincipal(Principal):
    role: ClassVar[Role] = Role.ENGINEER

    def can_view(self, ticket: Ticket) -> bool:
        return ticket.is_assigned_to(self.email)

    async def list_tickets(self, tickets):
        return await tickets.list_by_engineer_email(self.email, include_deferred=False)

    async def list_tickets_by_status(self, tickets, status):
        return await tickets.list_by_status(status, engineer_email=self.email)

    async def list_tickets_by_priority(self, tickets, priority):
        return await tickets.list_by_priority(priority, engineer_email=self.email)


@dataclass(frozen=True)
class AdminPrincipal(Principal):
    role: ClassVar[Role] = Role.ADMIN

    def can_view(self, ticket: Ticket) -> bool:
        return True

    async def list_tickets(self, tickets):
        return await tickets.get_all()

    async def list_tickets_by_status(self, tickets, status):
        return await tickets.list_by_status(status)

    async def list_tickets_by_priority(self, tickets, priority):
        return await tickets.list_by_priority(priority)

    @property
    def is_admin(self) -> bool:
        return True


_PRINCIPAL_BY_ROLE: dict[Role, type[Principal]] = {
    Role.USER: UserPrincipal,
    Role.ENGINEER: EngineerPrincipal,
    Role.ADMIN: AdminPrincipal,
}


def principal_for(role: str | None, email: str | None) -> Principal:
    """Build the principal for a (role, email) pair coming off the wire."""
    if not email or not email.strip():
        raise ValidationError("Missing caller email")
    try:
        role_enum = Role((role or "").strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid role: {role}") from None
    return _PRINCIPAL_BY_ROLE[role_enum](email=email.strip())
