"""Ticket entity — an installation or fault request raised by a user."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from fieldservice.domain.value_objects.enums import Priority, ServiceType, TicketStatus
from fieldservice.domain.value_objects.geo_point import GeoPoint

UNASSIGNED_LABEL = "Not Assigned"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Ticket:
    id: int | None
    user_email: str
    service_type: ServiceType
    pincode: str
    description: str
    location: GeoPoint | None = None
    address: str | None = None
    priority: Priority = Priority.LOW
    status: TicketStatus = TicketStatus.OPEN
    accepted: bool = False
    engineer_email: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    version: int = 0

    def is_location_known(self) -> bool:
        return self.location is not None and self.location.is_valid()

    def is_assigned_to(self, engineer_email: str) -> bool:
        return self.engineer_email is not None and self.engineer_email == engineer_email

    def is_accepted_by(self, engineer_email: str) -> bool:
        return self.accepted and self.is_assigned_to(engineer_email)

    def assign_to(self, engineer_email: str) -> None:
        """Tentative assignment: the engineer still has to accept."""
        self.engineer_email = engineer_email
        self.accepted = False
        self.touch()

    def accept_by(self, engineer_email: str) -> None:
        self.engineer_email = engineer_email
        self.accepted = True
        self.touch()

    def release(self) -> None:
        self.engineer_email = None
        self.accepted = False
        self.touch()

    def change_status(self, status: TicketStatus) -> None:
        self.status = status
        self.touch()

    def touch(self) -> None:
        self.updated_at = utcnow()

    def engineer_label(self) -> str:
        return self.engineer_email or UNASSIGNED_LABEL
