"""In-app notification endpoints — the caller's inbox."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.adapters.persistence.database import get_session
from fieldservice.application.principals import Principal
from fieldservice.application.use_cases.notification_inbox import NotificationInboxUseCase
from fieldservice.infrastructure.api.dependencies import get_inbox_uc, get_principal, require_admin
from fieldservice.infrastructure.api.responses import respond
from fieldservice.infrastructure.api.serializers import (
    serialize_notification,
    serialize_notifications,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


class NotificationRequest(BaseModel):
    email: str
    message: str


@router.get("")
async def list_notifications(
    unread: bool = False,
    principal: Principal = Depends(get_principal),
    uc: NotificationInboxUseCase = Depends(get_inbox_uc),
    session: AsyncSession = Depends(get_session),
):
    return await respond(session, await uc.list_notifications(principal, unread), serialize_notifications)


@router.patch("/{notification_id}/read")
async def mark_as_read(
    notification_id: str,
    principal: Principal = Depends(get_principal),
    uc: NotificationInboxUseCase = Depends(get_inbox_uc),
    session: AsyncSession = Depends(get_session),
):
    result = await uc.mark_as_read(principal, notification_id)
    return await respond(session, result, serialize_notification)


@router.post("", status_code=201, dependencies=[Depends(require_admin)])
async def create_notification(
    body: NotificationRequest,
    uc: NotificationInboxUseCase = Depends(get_inbox_uc),
    session: AsyncSession = Depends(get_session),
):
    result = await uc.create_notification(body.email, body.message)
    return await respond(session, result, serialize_notification)
