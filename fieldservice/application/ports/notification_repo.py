"""Port interface for the in-app notification inbox."""

from abc import ABC, abstractmethod

from fieldservice.domain.entities.notification import Notification


class NotificationRepository(ABC):
    @abstractmethod
    async def save(self, notification: Notification) -> Notification:
        """Insert an entry and assign its id."""
        ...

    @abstractmethod
    async def get_by_id(self, notification_id: int) -> Notification | None:
        ...

    @abstractmethod
    async def list_by_email(self, email: str, *, unread_only: bool = False) -> list[Notification]:
        """Entries for *email*, newest first."""
        ...

    @abstractmethod
    async def mark_read(self, notification_id: int) -> bool:
        ...
