"""PriorityPolicy — derive ticket priority from the assigned engineer's proximity."""

from __future__ import annotations

import math
from dataclasses import dataclass

from fieldservice.domain.entities.engineer import Engineer
from fieldservice.domain.entities.ticket import Ticket
from fieldservice.domain.value_objects.enums import Priority, ServiceType

HIGH_PRIORITY_MAX_KM = 5.0
MEDIUM_PRIORITY_MAX_KM = 15.0


@dataclass(frozen=True)
class PriorityPolicy:
    """Explicit knobs for how priority is derived.

    fault_is_high: fault tickets are always high, regardless of distance.
    rescore_on_assignment: re-score once the engine has picked an engineer.
        Without it the priority at raise time is always low, because no
        engineer is known yet.
    """

    fault_is_high: bool = False
    rescore_on_assignment: bool = False


def priority_for_distance(distance: float) -> Priority:
    """Bucket a distance: <=5 km high, <=15 km medium, otherwise low."""
    if math.isnan(distance):
        return Priority.LOW
    if distance <= HIGH_PRIORITY_MAX_KM:
        return Priority.HIGH
    if distance <= MEDIUM_PRIORITY_MAX_KM:
        return Priority.MEDIUM
    return Priority.LOW


def score_priority(
    ticket: Ticket,
    engineer: Engineer | None = None,
    policy: PriorityPolicy | None = None,
) -> Priority:
    """Pure function: priority of a ticket given its (possibly absent) engineer.

    Business rules:
      1. No engineer, or engineer/ticket without a usable location  →  low.
      2. Otherwise bucket the ticket-to-engineer distance.
      3. With fault_is_high set, fault tickets short-circuit to high.
    """
    policy = policy or PriorityPolicy()

    if policy.fault_is_high and ticket.service_type == ServiceType.FAULT:
        return Priority.HIGH

    if engineer is None or not engineer.has_usable_location():
        return Priority.LOW
    if not ticket.is_location_known():
        return Priority.LOW

    return priority_for_distance(ticket.location.haversine_km(engineer.location))
