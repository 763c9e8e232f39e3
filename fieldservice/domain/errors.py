"""Typed exceptions for ticket assignment and lifecycle failures."""


class FieldServiceError(Exception):
    """Base class for all expected field-service failures."""


class ValidationError(FieldServiceError):
    """Malformed or missing identifier, or a value outside its enum."""


class NotFoundError(FieldServiceError):
    """Ticket, engineer, user or hazard does not exist."""


class ConflictError(FieldServiceError):
    """
    The request contradicts the current state of a record.

    Duplicate acceptance, reassignment to the same engineer and
    specialization mismatches all land here.
    """

    retryable = False


class StaleRecordError(ConflictError):
    """A versioned write lost the race against a concurrent writer. Safe to retry."""

    retryable = True

    def __init__(self, entity: str, key):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key} was modified concurrently")


class CollaboratorError(FieldServiceError):
    """Geocoder or store failure."""


class NotificationError(FieldServiceError):
    """Notification relay failure. Always swallowed by the dispatcher."""
