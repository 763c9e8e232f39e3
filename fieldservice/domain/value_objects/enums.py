"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class ServiceType(str, Enum):
    INSTALLATION = "installation"
    FAULT = "fault"


class Specialization(str, Enum):
    INSTALLATION = "Installation"
    FAULT = "Fault"

    def matches(self, service_type: "ServiceType | str") -> bool:
        """Case-insensitive match against a ticket service type."""
        value = service_type.value if isinstance(service_type, ServiceType) else service_type
        return self.value.lower() == str(value).strip().lower()


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TicketStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    FAILED = "failed"
    DEFERRED = "deferred"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Role(str, Enum):
    USER = "user"
    ENGINEER = "engineer"
    ADMIN = "admin"


WEEKDAYS: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
