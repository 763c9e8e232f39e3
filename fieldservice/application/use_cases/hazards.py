"""HazardUseCase — geocoded hazard reports (CRUD)."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fieldservice.application.geocoding import required_text, resolve_pincode
from fieldservice.application.ports.geocoder_port import GeocoderPort
from fieldservice.application.ports.hazard_repo import HazardRepository
from fieldservice.application.results import OperationResult, guarded
from fieldservice.domain.entities.hazard import Hazard
from fieldservice.domain.entities.ticket import utcnow
from fieldservice.domain.errors import NotFoundError, ValidationError
from fieldservice.domain.value_objects.enums import RiskLevel

logger = logging.getLogger(__name__)


@dataclass
class HazardDraft:
    """Fields of a hazard report; None means "leave unchanged" on update."""

    hazard_type: str | None = None
    description: str | None = None
    risk_level: str | None = None
    pincode: str | None = None


class HazardUseCase:
    def __init__(
        self,
        geocoder: GeocoderPort,
        hazard_repo: HazardRepository,
        geocoder_timeout_seconds: float = 10.0,
    ):
        self._geocoder = geocoder
        self._hazards = hazard_repo
        self._geocoder_timeout = geocoder_timeout_seconds

    async def report_hazard(self, draft: HazardDraft) -> OperationResult:
        async def run() -> OperationResult:
            hazard_type = required_text("hazard_type", draft.hazard_type)
            description = required_text("description", draft.description)
            required_text("risk_level", draft.risk_level)
            pincode = required_text("pincode", draft.pincode)
            risk = _parse_risk(draft.risk_level)
            resolved = await resolve_pincode(self._geocoder, pincode, self._geocoder_timeout)

            hazard = Hazard(
                id=None,
                hazard_type=hazard_type,
                description=description,
                risk_level=risk,
                pincode=pincode,
                location=resolved.location,
                address=resolved.display_address,
            )
            await self._hazards.save(hazard)
            logger.info("Hazard %s reported at %s (%s)", hazard.id, hazard.pincode, hazard.risk_level.value)
            return OperationResult.ok("Hazard reported successfully", data=hazard)

        return await guarded("reporting the hazard", run)

    async def update_hazard(self, hazard_id: int, draft: HazardDraft) -> OperationResult:
        """Apply the non-None fields of *draft*; they obey the same rules as a report."""

        async def run() -> OperationResult:
            hazard = await self._require(hazard_id)
            if draft.hazard_type is not None:
                hazard.hazard_type = required_text("hazard_type", draft.hazard_type)
            if draft.description is not None:
                hazard.description = required_text("description", draft.description)
            if draft.risk_level is not None:
                hazard.risk_level = _parse_risk(draft.risk_level)
            if draft.pincode is not None:
                pincode = required_text("pincode", draft.pincode)
                if pincode != hazard.pincode:
                    resolved = await resolve_pincode(self._geocoder, pincode, self._geocoder_timeout)
                    hazard.pincode = pincode
                    hazard.location = resolved.location
                    hazard.address = resolved.display_address
            hazard.updated_at = utcnow()
            await self._hazards.update(hazard)
            return OperationResult.ok("Hazard updated successfully", data=hazard)

        return await guarded("updating the hazard", run)

    async def delete_hazard(self, hazard_id: int) -> OperationResult:
        async def run() -> OperationResult:
            hazard = await self._require(hazard_id)
            await self._hazards.delete(hazard_id)
            logger.info("Hazard %s deleted", hazard_id)
            return OperationResult.ok("Hazard deleted successfully", data=hazard)

        return await guarded("deleting the hazard", run)

    async def get_hazard(self, hazard_id: int) -> OperationResult:
        async def run() -> OperationResult:
            return OperationResult.ok(data=await self._require(hazard_id))

        return await guarded("fetching the hazard", run)

    async def list_hazards(self) -> OperationResult:
        async def run() -> OperationResult:
            return OperationResult.ok(data=await self._hazards.get_all())

        return await guarded("listing hazards", run)

    async def _require(self, hazard_id: int) -> Hazard:
        hazard = await self._hazards.get_by_id(hazard_id)
        if hazard is None:
            raise NotFoundError("Hazard not found")
        return hazard


def _parse_risk(raw) -> RiskLevel:
    try:
        return RiskLevel(str(raw).strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid risk level: {raw}") from None
