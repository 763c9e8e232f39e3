"""GeoPoint value object — immutable (lat, lon) pair, plus the haversine distance."""

import math
from dataclasses import dataclass

EARTH_RADIUS_KM = 6371.0


def _as_float(value) -> float:
    """Coerce a coordinate to float; anything unparseable becomes NaN."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def distance_km(lat1, lon1, lat2, lon2) -> float:
    """Great-circle distance in km between two coordinates (haversine).

    Coordinates may be numbers or numeric strings. Malformed values are not
    rejected: they turn into NaN and the result is NaN, so callers must filter.
    """
    lat1, lon1, lat2, lon2 = (_as_float(v) for v in (lat1, lon1, lat2, lon2))

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def haversine_km(self, other: "GeoPoint") -> float:
        """Calculate distance in km between two points using the Haversine formula."""
        return distance_km(self.latitude, self.longitude, other.latitude, other.longitude)

    def is_valid(self) -> bool:
        """True when both coordinates are real, finite numbers."""
        lat = _as_float(self.latitude)
        lon = _as_float(self.longitude)
        return math.isfinite(lat) and math.isfinite(lon)

    @classmethod
    def parse(cls, latitude, longitude) -> "GeoPoint | None":
        """Build a point from raw (possibly string) coordinates, None when unusable."""
        if latitude is None or longitude is None:
            return None
        point = cls(latitude=_as_float(latitude), longitude=_as_float(longitude))
        return point if point.is_valid() else None


@dataclass(frozen=True)
class GeocodedAddress:
    """A resolved postal code: coordinates plus the provider's display address."""

    location: GeoPoint
    display_address: str | None = None
