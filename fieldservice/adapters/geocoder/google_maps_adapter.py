"""Google Maps geocoder adapter — implements GeocoderPort."""

from __future__ import annotations

import logging

import httpx

from fieldservice.application.ports.geocoder_port import GeocoderPort
from fieldservice.domain.errors import CollaboratorError
from fieldservice.domain.value_objects.geo_point import GeocodedAddress, GeoPoint

logger = logging.getLogger(__name__)

GOOGLE_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"


class GoogleMapsAdapter(GeocoderPort):
    """Google Maps implementation of GeocoderPort."""

    def __init__(
        self,
        api_key: str,
        country_codes: str = "",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = api_key
        self._country_codes = country_codes
        self._timeout = timeout
        self._transport = transport
        self._cache: dict[str, GeocodedAddress | None] = {}

    async def resolve(self, postal_code: str) -> GeocodedAddress | None:
        """Geocode a postal code using the Google Maps Geocoding API."""
        if not self._api_key:
            logger.warning("Google Maps API key is not set. Skipping geocoding.")
            return None

        cache_key = postal_code.strip().lower()
        if not cache_key:
            return None
        if cache_key in self._cache:
            return self._cache[cache_key]

        components = f"postal_code:{cache_key}"
        if self._country_codes:
            components += f"|country:{self._country_codes.split(',')[0].strip()}"

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    GOOGLE_GEOCODE_URL,
                    params={"components": components, "key": self._api_key},
                    timeout=self._timeout,
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Google Maps lookup for '%s' failed: %s", postal_code, e)
            raise CollaboratorError(f"Geocoder unavailable for pincode {postal_code}") from e

        status = data.get("status")
        if status == "OK" and data.get("results"):
            first = data["results"][0]
            loc = first["geometry"]["location"]
            point = GeoPoint(latitude=loc["lat"], longitude=loc["lng"])
            logger.info("Google Maps resolved '%s' → (%f, %f)", postal_code, point.latitude, point.longitude)
            resolved = GeocodedAddress(location=point, display_address=first.get("formatted_address"))
            self._cache[cache_key] = resolved
            return resolved

        if status == "ZERO_RESULTS":
            logger.warning("Google Maps could not resolve '%s'", postal_code)
            self._cache[cache_key] = None
            return None

        # OVER_QUERY_LIMIT, REQUEST_DENIED and friends are not answers
        raise CollaboratorError(f"Google Maps geocoding failed for {postal_code}: {status}")
