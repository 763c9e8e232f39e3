"""Notification entity — an in-app inbox entry for one recipient."""

from dataclasses import dataclass, field
from datetime import datetime

from fieldservice.domain.entities.ticket import utcnow


@dataclass
class Notification:
    id: int | None
    email: str
    message: str
    is_read: bool = False
    created_at: datetime = field(default_factory=utcnow)

    def mark_read(self) -> bool:
        """Returns False if it was already read."""
        if self.is_read:
            return False
        self.is_read = True
        return True
