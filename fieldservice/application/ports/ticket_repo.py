"""Port interface for ticket persistence."""

from abc import ABC, abstractmethod

from fieldservice.domain.entities.ticket import Ticket
from fieldservice.domain.value_objects.enums import Priority, TicketStatus


class TicketRepository(ABC):
    @abstractmethod
    async def next_ticket_id(self) -> int:
        """Reserve the next ticket id. Never hands out the same id twice."""
        ...

    @abstractmethod
    async def save(self, ticket: Ticket) -> Ticket:
        ...

    @abstractmethod
    async def get_by_id(self, ticket_id: int) -> Ticket | None:
        ...

    @abstractmethod
    async def update(self, ticket: Ticket) -> Ticket:
        """Persist changes guarded by ticket.version.

        Raises StaleRecordError if the stored version moved on.
        """
        ...

    @abstractmethod
    async def get_all(self) -> list[Ticket]:
        ...

    @abstractmethod
    async def list_by_user_email(
        self, email: str, *, include_deferred: bool = True
    ) -> list[Ticket]:
        ...

    @abstractmethod
    async def list_by_engineer_email(
        self, email: str, *, include_deferred: bool = True
    ) -> list[Ticket]:
        ...

    @abstractmethod
    async def list_by_status(
        self, status: TicketStatus, *, user_email: str | None = None,
        engineer_email: str | None = None,
    ) -> list[Ticket]:
        ...

    @abstractmethod
    async def list_by_priority(
        self, priority: Priority, *, user_email: str | None = None,
        engineer_email: str | None = None,
    ) -> list[Ticket]:
        ...
