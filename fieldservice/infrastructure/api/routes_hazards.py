"""Hazard endpoints — admins report and edit, everyone reads."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.adapters.persistence.database import get_session
from fieldservice.application.principals import Principal
from fieldservice.application.use_cases.hazards import HazardDraft, HazardUseCase
from fieldservice.infrastructure.api.dependencies import get_hazard_uc, get_principal, require_admin
from fieldservice.infrastructure.api.responses import respond
from fieldservice.infrastructure.api.serializers import serialize_hazard, serialize_hazards

router = APIRouter(prefix="/hazards", tags=["hazards"])


class HazardRequest(BaseModel):
    hazard_type: str | None = None
    description: str | None = None
    risk_level: str | None = None
    pincode: str | None = None

    def to_draft(self) -> HazardDraft:
        return HazardDraft(
            hazard_type=self.hazard_type,
            description=self.description,
            risk_level=self.risk_level,
            pincode=self.pincode,
        )


@router.post("", status_code=201, dependencies=[Depends(require_admin)])
async def report_hazard(
    body: HazardRequest,
    uc: HazardUseCase = Depends(get_hazard_uc),
    session: AsyncSession = Depends(get_session),
):
    return await respond(session, await uc.report_hazard(body.to_draft()), serialize_hazard)


@router.get("")
async def list_hazards(
    _: Principal = Depends(get_principal),
    uc: HazardUseCase = Depends(get_hazard_uc),
    session: AsyncSession = Depends(get_session),
):
    return await respond(session, await uc.list_hazards(), serialize_hazards)


@router.get("/{hazard_id}")
async def get_hazard(
    hazard_id: int,
    _: Principal = Depends(get_principal),
    uc: HazardUseCase = Depends(get_hazard_uc),
    session: AsyncSession = Depends(get_session),
):
    return await respond(session, await uc.get_hazard(hazard_id), serialize_hazard)


@router.patch("/{hazard_id}", dependencies=[Depends(require_admin)])
async def update_hazard(
    hazard_id: int,
    body: HazardRequest,
    uc: HazardUseCase = Depends(get_hazard_uc),
    session: AsyncSession = Depends(get_session),
):
    return await respond(session, await uc.update_hazard(hazard_id, body.to_draft()), serialize_hazard)


@router.delete("/{hazard_id}", dependencies=[Depends(require_admin)])
async def delete_hazard(
    hazard_id: int,
    uc: HazardUseCase = Depends(get_hazard_uc),
    session: AsyncSession = Depends(get_session),
):
    return await respond(session, await uc.delete_hazard(hazard_id), serialize_hazard)
