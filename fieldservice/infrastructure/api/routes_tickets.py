"""Ticket endpoints — raise, role-scoped listing, engineer lifecycle actions."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.adapters.persistence.database import get_session
from fieldservice.application.principals import EngineerPrincipal, Principal, UserPrincipal
from fieldservice.application.use_cases.raise_ticket import RaiseTicketCommand, RaiseTicketUseCase
from fieldservice.application.use_cases.ticket_lifecycle import TicketLifecycleUseCase
from fieldservice.application.use_cases.ticket_queries import TicketQueryUseCase
from fieldservice.infrastructure.api.dependencies import (
    get_lifecycle_uc,
    get_principal,
    get_raise_ticket_uc,
    get_ticket_query_uc,
    require_engineer,
    require_staff,
    require_user,
)
from fieldservice.infrastructure.api.responses import respond
from fieldservice.infrastructure.api.serializers import serialize_ticket, serialize_tickets

router = APIRouter(prefix="/tickets", tags=["tickets"])


class RaiseTicketRequest(BaseModel):
    service_type: str
    pincode: str
    description: str


class StatusUpdateRequest(BaseModel):
    status: str


@router.post("", status_code=201)
async def raise_ticket(
    body: RaiseTicketRequest,
    user: UserPrincipal = Depends(require_user),
    uc: RaiseTicketUseCase = Depends(get_raise_ticket_uc),
    session: AsyncSession = Depends(get_session),
):
    """Raise a ticket for the calling user and pre-assign an engineer."""
    result = await uc.execute(
        RaiseTicketCommand(
            user_email=user.email,
            service_type=body.service_type,
            pincode=body.pincode,
            description=body.description,
        )
    )
    return await respond(session, result, serialize_ticket)


@router.get("")
async def list_tickets(
    principal: Principal = Depends(get_principal),
    uc: TicketQueryUseCase = Depends(get_ticket_query_uc),
    session: AsyncSession = Depends(get_session),
):
    return await respond(session, await uc.list_tickets(principal), serialize_tickets)


@router.get("/status/{status}")
async def list_tickets_by_status(
    status: str,
    principal: Principal = Depends(get_principal),
    uc: TicketQueryUseCase = Depends(get_ticket_query_uc),
    session: AsyncSession = Depends(get_session),
):
    return await respond(session, await uc.list_tickets_by_status(principal, status), serialize_tickets)


@router.get("/priority/{priority}")
async def list_tickets_by_priority(
    priority: str,
    principal: Principal = Depends(get_principal),
    uc: TicketQueryUseCase = Depends(get_ticket_query_uc),
    session: AsyncSession = Depends(get_session),
):
    return await respond(session, await uc.list_tickets_by_priority(principal, priority), serialize_tickets)


@router.get("/{ticket_id}")
async def get_ticket(
    ticket_id: str,
    principal: Principal = Depends(get_principal),
    uc: TicketQueryUseCase = Depends(get_ticket_query_uc),
    session: AsyncSession = Depends(get_session),
):
    return await respond(session, await uc.get_ticket(principal, ticket_id), serialize_ticket)


@router.patch("/{ticket_id}/status")
async def update_ticket_status(
    ticket_id: str,
    body: StatusUpdateRequest,
    principal: Principal = Depends(require_staff),
    uc: TicketLifecycleUseCase = Depends(get_lifecycle_uc),
    session: AsyncSession = Depends(get_session),
):
    result = await uc.update_ticket_status(ticket_id, body.status, principal)
    return await respond(session, result, serialize_ticket)


@router.post("/{ticket_id}/accept")
async def accept_task(
    ticket_id: str,
    engineer: EngineerPrincipal = Depends(require_engineer),
    uc: TicketLifecycleUseCase = Depends(get_lifecycle_uc),
    session: AsyncSession = Depends(get_session),
):
    result = await uc.accept_task(engineer.email, ticket_id)
    return await respond(session, result, serialize_ticket)


@router.post("/{ticket_id}/reject")
async def reject_task(
    ticket_id: str,
    engineer: EngineerPrincipal = Depends(require_engineer),
    uc: TicketLifecycleUseCase = Depends(get_lifecycle_uc),
    session: AsyncSession = Depends(get_session),
):
    result = await uc.reject_task(engineer.email, ticket_id)
    return await respond(session, result, serialize_ticket)
