"""Hazard entity — a geocoded safety notice engineers should know about."""

from dataclasses import dataclass, field
from datetime import datetime

from fieldservice.domain.entities.ticket import utcnow
from fieldservice.domain.value_objects.enums import RiskLevel
from fieldservice.domain.value_objects.geo_point import GeoPoint


@dataclass
class Hazard:
    id: int | None
    hazard_type: str
    description: str
    risk_level: RiskLevel
    pincode: str
    location: GeoPoint | None = None
    address: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
