"""Strict pincode resolution for records that are useless without a position."""

from __future__ import annotations

import asyncio
import logging

from fieldservice.application.ports.geocoder_port import GeocoderPort
from fieldservice.domain.errors import CollaboratorError, FieldServiceError, ValidationError
from fieldservice.domain.value_objects.geo_point import GeocodedAddress

logger = logging.getLogger(__name__)


async def resolve_pincode(geocoder: GeocoderPort, pincode: str, timeout_seconds: float) -> GeocodedAddress:
    """Resolve *pincode* or raise.

    A miss is a ValidationError; a timeout or geocoder outage is a
    CollaboratorError.
    """
    try:
        resolved = await asyncio.wait_for(geocoder.resolve(pincode), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        raise CollaboratorError(f"Geocoding pincode {pincode} timed out") from None
    except FieldServiceError:
        raise
    except Exception as e:
        logger.exception("Geocoding pincode %s failed", pincode)
        raise CollaboratorError(f"Geocoding pincode {pincode} failed") from e
    if resolved is None:
        raise ValidationError(f"No results found for pincode {pincode}")
    return resolved


def required_text(name: str, value) -> str:
    """Stripped *value*, or ValidationError("Missing <name>") when blank."""
    if value is None or not str(value).strip():
        raise ValidationError(f"Missing {name}")
    return str(value).strip()
