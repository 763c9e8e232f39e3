"""EngineerRanking — candidate filtering and nearest-then-least-loaded ordering."""

from __future__ import annotations

import functools
import math
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo

from fieldservice.domain.entities.engineer import Engineer
from fieldservice.domain.value_objects.enums import WEEKDAYS, ServiceType
from fieldservice.domain.value_objects.geo_point import GeoPoint

# Distances closer than this are treated as equal and fall through to load.
DISTANCE_TOLERANCE_KM = 1e-9


@dataclass(frozen=True)
class RankedEngineer:
    """One entry of the ranking; distance_km is None when the ticket has no location."""

    engineer: Engineer
    distance_km: float | None


def weekday_name(moment: datetime, tz: tzinfo | None = None) -> str:
    """English weekday name of *moment* in the engineers' local timezone.

    Naive datetimes are taken to be UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    if tz is not None:
        moment = moment.astimezone(tz)
    return WEEKDAYS[moment.weekday()]


def filter_candidates(
    engineers: list[Engineer],
    weekday: str,
    service_type: ServiceType | str,
) -> list[Engineer]:
    """Keep engineers available on *weekday* whose specialization matches the ticket."""
    return [
        e for e in engineers
        if e.is_available_on(weekday) and e.can_handle(service_type)
    ]


def _compare(a: RankedEngineer, b: RankedEngineer) -> int:
    if a.distance_km is not None and b.distance_km is not None:
        if not math.isclose(a.distance_km, b.distance_km, rel_tol=0.0, abs_tol=DISTANCE_TOLERANCE_KM):
            return -1 if a.distance_km < b.distance_km else 1
    return a.engineer.current_tasks - b.engineer.current_tasks


def rank_engineers(
    candidates: list[Engineer],
    ticket_location: GeoPoint | None,
) -> list[RankedEngineer]:
    """Order candidates by distance to the ticket, then by current load.

    1. Drop engineers without a valid location (they can never be ranked).
    2. Compute the haversine distance to the ticket.
    3. Sort ascending by distance; equidistant engineers go by current_tasks.

    A ticket that could not be geocoded still gets a ranking: load only,
    with distance_km=None.
    """
    located = [e for e in candidates if e.has_usable_location()]

    if ticket_location is None or not ticket_location.is_valid():
        ranked = [RankedEngineer(engineer=e, distance_km=None) for e in located]
    else:
        ranked = [
            RankedEngineer(engineer=e, distance_km=ticket_location.haversine_km(e.location))
            for e in located
        ]

    # sorted() is stable, so fully tied engineers keep their store order
    return sorted(ranked, key=functools.cmp_to_key(_compare))
