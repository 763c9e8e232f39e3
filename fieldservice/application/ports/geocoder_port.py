"""Port interface for resolving postal codes to coordinates."""

from abc import ABC, abstractmethod

from fieldservice.domain.value_objects.geo_point import GeocodedAddress


class GeocoderPort(ABC):
    @abstractmethod
    async def resolve(self, postal_code: str) -> GeocodedAddress | None:
        """Convert a postal code to lat/lon plus a display address.

        Returns None if the postal code cannot be resolved.
        """
        ...
