"""Pick the geocoder adapter from settings."""

from __future__ import annotations

import logging

from fieldservice.adapters.geocoder.google_maps_adapter import GoogleMapsAdapter
from fieldservice.adapters.geocoder.nominatim_adapter import NominatimAdapter
from fieldservice.application.ports.geocoder_port import GeocoderPort
from fieldservice.config import Settings

logger = logging.getLogger(__name__)


def build_geocoder(cfg: Settings) -> GeocoderPort:
    provider = cfg.geocoder_provider.strip().lower()
    if provider == "google" and cfg.google_maps_api_key:
        logger.info("Using Google Maps for geocoding")
        return GoogleMapsAdapter(
            api_key=cfg.google_maps_api_key,
            country_codes=cfg.geocoder_country_codes,
            timeout=cfg.geocoder_timeout_seconds,
        )
    if provider == "google":
        logger.warning("GEOCODER_PROVIDER=google but GOOGLE_MAPS_API_KEY is empty; falling back to Nominatim")
    return NominatimAdapter(
        user_agent=cfg.geocoder_user_agent,
        country_codes=cfg.geocoder_country_codes,
        timeout=cfg.geocoder_timeout_seconds,
    )
