"""Profile endpoints — the caller's own user or engineer record."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.adapters.persistence.database import get_session
from fieldservice.application.principals import Principal
from fieldservice.application.use_cases.profile import ProfileDraft, ProfileUseCase
from fieldservice.infrastructure.api.dependencies import get_principal, get_profile_uc
from fieldservice.infrastructure.api.responses import respond
from fieldservice.infrastructure.api.serializers import serialize_profile

router = APIRouter(prefix="/profile", tags=["profile"])


class ProfileRequest(BaseModel):
    name: str | None = None
    phone: str | None = None
    address: str | None = None
    pincode: str | None = None
    specialization: str | None = None
    availability: list[str] | None = None

    def to_draft(self) -> ProfileDraft:
        return ProfileDraft(**self.model_dump())


@router.get("")
async def get_profile(
    principal: Principal = Depends(get_principal),
    uc: ProfileUseCase = Depends(get_profile_uc),
    session: AsyncSession = Depends(get_session),
):
    return await respond(session, await uc.get_profile(principal), serialize_profile)


@router.patch("")
async def update_profile(
    body: ProfileRequest,
    principal: Principal = Depends(get_principal),
    uc: ProfileUseCase = Depends(get_profile_uc),
    session: AsyncSession = Depends(get_session),
):
    """Only the fields present in the body change."""
    result = await uc.update_profile(principal, body.to_draft())
    return await respond(session, result, serialize_profile)
