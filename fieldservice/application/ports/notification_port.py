"""Port interface for outbound notifications (email relay)."""

from abc import ABC, abstractmethod


class NotificationPort(ABC):
    @abstractmethod
    async def send(self, to_email: str, subject: str, body: str) -> None:
        """Deliver a message. Raises NotificationError on failure."""
        ...
