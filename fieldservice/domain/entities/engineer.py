"""Engineer entity — a field engineer who takes installation or fault tickets."""

from dataclasses import dataclass, field

from fieldservice.domain.value_objects.enums import ServiceType, Specialization
from fieldservice.domain.value_objects.geo_point import GeoPoint


@dataclass
class Engineer:
    email: str
    name: str
    specialization: Specialization
    availability: set[str] = field(default_factory=set)
    location: GeoPoint | None = None
    phone: str | None = None
    address: str | None = None
    pincode: str | None = None
    current_tasks: int = 0
    assigned_tasks: list[int] = field(default_factory=list)
    is_engineer: bool = False  # set by admin approval
    version: int = 0

    def has_usable_location(self) -> bool:
        return self.location is not None and self.location.is_valid()

    def is_available_on(self, weekday: str) -> bool:
        return weekday in self.availability

    def can_handle(self, service_type: ServiceType | str) -> bool:
        return self.specialization.matches(service_type)

    def has_task(self, ticket_id: int) -> bool:
        return ticket_id in self.assigned_tasks

    def add_task(self, ticket_id: int) -> bool:
        """Add a ticket to the workload. Returns False if it was already there."""
        if self.has_task(ticket_id):
            return False
        self.assigned_tasks.append(ticket_id)
        self.current_tasks += 1
        return True

    def remove_task(self, ticket_id: int) -> bool:
        """Drop a ticket from the workload; the counter never goes below zero."""
        if not self.has_task(ticket_id):
            return False
        self.assigned_tasks = [t for t in self.assigned_tasks if t != ticket_id]
        self.current_tasks = max(0, self.current_tasks - 1)
        return True
