"""Admin endpoints — reassignment, eligible engineers, engineer and user lookups, approval."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.adapters.persistence.database import get_session
from fieldservice.application.use_cases.engineer_admin import EngineerAdminUseCase
from fieldservice.application.use_cases.ticket_lifecycle import TicketLifecycleUseCase
from fieldservice.infrastructure.api.dependencies import (
    get_engineer_admin_uc,
    get_lifecycle_uc,
    require_admin,
)
from fieldservice.infrastructure.api.responses import respond
from fieldservice.infrastructure.api.serializers import (
    serialize_eligible,
    serialize_engineer,
    serialize_engineers,
    serialize_ticket,
    serialize_users,
)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


class ReassignRequest(BaseModel):
    engineer_email: str


class ApprovalRequest(BaseModel):
    approve: bool


@router.post("/tickets/{ticket_id}/reassign")
async def reassign_ticket(
    ticket_id: str,
    body: ReassignRequest,
    uc: TicketLifecycleUseCase = Depends(get_lifecycle_uc),
    session: AsyncSession = Depends(get_session),
):
    result = await uc.reassign_ticket(ticket_id, body.engineer_email)
    return await respond(session, result, serialize_ticket)


@router.get("/tickets/{ticket_id}/eligible-engineers")
async def eligible_engineers(
    ticket_id: str,
    weekday: str | None = None,
    uc: EngineerAdminUseCase = Depends(get_engineer_admin_uc),
    session: AsyncSession = Depends(get_session),
):
    """Reassignment candidates, nearest first."""
    result = await uc.eligible_engineers_for_ticket(ticket_id, weekday)
    return await respond(session, result, serialize_eligible)


@router.get("/engineers")
async def list_engineers(
    approved: bool | None = None,
    weekday: str | None = None,
    uc: EngineerAdminUseCase = Depends(get_engineer_admin_uc),
    session: AsyncSession = Depends(get_session),
):
    return await respond(session, await uc.list_engineers(approved, weekday), serialize_engineers)


@router.get("/engineers/{email}")
async def get_engineer(
    email: str,
    uc: EngineerAdminUseCase = Depends(get_engineer_admin_uc),
    session: AsyncSession = Depends(get_session),
):
    return await respond(session, await uc.get_engineer(email), serialize_engineer)


@router.get("/users")
async def list_users(
    uc: EngineerAdminUseCase = Depends(get_engineer_admin_uc),
    session: AsyncSession = Depends(get_session),
):
    return await respond(session, await uc.list_users(), serialize_users)


@router.post("/engineers/{email}/approval")
async def approve_engineer(
    email: str,
    body: ApprovalRequest,
    uc: EngineerAdminUseCase = Depends(get_engineer_admin_uc),
    session: AsyncSession = Depends(get_session),
):
    result = await uc.approve_engineer(email, body.approve)
    return await respond(session, result, serialize_engineer)
