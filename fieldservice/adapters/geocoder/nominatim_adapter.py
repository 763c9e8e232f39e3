"""Nominatim geocoder adapter — implements GeocoderPort."""

from __future__ import annotations

import logging

import httpx

from fieldservice.application.ports.geocoder_port import GeocoderPort
from fieldservice.domain.errors import CollaboratorError
from fieldservice.domain.value_objects.geo_point import GeocodedAddress, GeoPoint

logger = logging.getLogger(__name__)

NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"


class NominatimAdapter(GeocoderPort):
    """Nominatim postal-code lookup with an in-memory cache.

    Only definitive answers are cached: a hit, or an empty result set.
    Transport and HTTP failures raise CollaboratorError so the caller can
    decide between degrading and failing.
    """

    def __init__(
        self,
        user_agent: str,
        country_codes: str = "",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._user_agent = user_agent
        self._country_codes = country_codes
        self._timeout = timeout
        self._transport = transport
        self._cache: dict[str, GeocodedAddress | None] = {}

    async def resolve(self, postal_code: str) -> GeocodedAddress | None:
        cache_key = postal_code.strip().lower()
        if not cache_key:
            return None

        if cache_key in self._cache:
            logger.debug("Cache hit for pincode '%s'", postal_code)
            return self._cache[cache_key]

        result = await self._lookup(cache_key)
        self._cache[cache_key] = result
        return result

    async def _lookup(self, query: str) -> GeocodedAddress | None:
        params = {"q": query, "format": "json", "limit": 1}
        if self._country_codes:
            params["countrycodes"] = self._country_codes

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    NOMINATIM_URL,
                    params=params,
                    headers={"User-Agent": self._user_agent},
                    timeout=self._timeout,
                )
                response.raise_for_status()
                results = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Nominatim lookup for '%s' failed: %s", query, e)
            raise CollaboratorError(f"Geocoder unavailable for pincode {query}") from e

        if not results:
            logger.info("Nominatim returned no results for '%s'", query)
            return None

        point = GeoPoint.parse(results[0].get("lat"), results[0].get("lon"))
        if point is None:
            logger.warning("Nominatim returned unusable coordinates for '%s'", query)
            return None

        logger.info("Nominatim resolved '%s' → (%f, %f)", query, point.latitude, point.longitude)
        return GeocodedAddress(location=point, display_address=results[0].get("display_name"))
