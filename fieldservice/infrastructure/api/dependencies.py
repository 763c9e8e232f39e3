"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

import logging

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.adapters.geocoder.factory import build_geocoder
from fieldservice.adapters.notifications.http_notification_adapter import HttpNotificationAdapter
from fieldservice.adapters.notifications.logging_notification_adapter import LoggingNotificationAdapter
from fieldservice.adapters.persistence.database import get_session
from fieldservice.adapters.persistence.repositories import (
    SqlEngineerRepository,
    SqlHazardRepository,
    SqlNotificationRepository,
    SqlTicketRepository,
    SqlUserRepository,
)
from fieldservice.application.notifications import NotificationDispatcher
from fieldservice.application.principals import (
    AdminPrincipal,
    EngineerPrincipal,
    Principal,
    UserPrincipal,
    principal_for,
)
from fieldservice.application.use_cases.assign_engineer import AssignEngineerUseCase
from fieldservice.application.use_cases.engineer_admin import EngineerAdminUseCase
from fieldservice.application.use_cases.hazards import HazardUseCase
from fieldservice.application.use_cases.notification_inbox import NotificationInboxUseCase
from fieldservice.application.use_cases.profile import ProfileUseCase
from fieldservice.application.use_cases.raise_ticket import RaiseTicketUseCase
from fieldservice.application.use_cases.ticket_lifecycle import TicketLifecycleUseCase
from fieldservice.application.use_cases.ticket_queries import TicketQueryUseCase
from fieldservice.config import settings
from fieldservice.domain.errors import ValidationError

logger = logging.getLogger(__name__)

# Re-export session dependency
get_db_session = get_session

# Singleton adapters (stateless or with internal caching)
_geocoder_adapter = build_geocoder(settings)

if settings.notification_service_url:
    _notification_sink = HttpNotificationAdapter(
        settings.notification_service_url, timeout=settings.notification_timeout_seconds
    )
else:
    logger.info("NOTIFICATION_SERVICE_URL not set; notifications are only logged")
    _notification_sink = LoggingNotificationAdapter()


# ─── Caller identity ─────────────────────────────────────────────────


def get_principal(
    x_user_email: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Principal:
    """Identity headers are set by the authenticating gateway in front of us."""
    try:
        return principal_for(x_user_role, x_user_email)
    except ValidationError as e:
        raise HTTPException(status_code=401, detail=str(e)) from None


def require_user(principal: Principal = Depends(get_principal)) -> UserPrincipal:
    if not isinstance(principal, UserPrincipal):
        raise HTTPException(status_code=403, detail="Only users can raise tickets")
    return principal


def require_engineer(principal: Principal = Depends(get_principal)) -> EngineerPrincipal:
    if not isinstance(principal, EngineerPrincipal):
        raise HTTPException(status_code=403, detail="Engineer role required")
    return principal


def require_admin(principal: Principal = Depends(get_principal)) -> AdminPrincipal:
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Admin role required")
    return principal


def require_staff(principal: Principal = Depends(get_principal)) -> Principal:
    if isinstance(principal, UserPrincipal):
        raise HTTPException(status_code=403, detail="Engineer or admin role required")
    return principal


# ─── Use cases ───────────────────────────────────────────────────────


def get_notifier(session: AsyncSession = Depends(get_session)) -> NotificationDispatcher:
    """Per-request dispatcher so inbox entries join the request's transaction."""
    return NotificationDispatcher(
        _notification_sink,
        timeout_seconds=settings.notification_timeout_seconds,
        inbox=SqlNotificationRepository(session),
    )


def get_raise_ticket_uc(
    session: AsyncSession = Depends(get_session),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> RaiseTicketUseCase:
    tickets = SqlTicketRepository(session)
    return RaiseTicketUseCase(
        geocoder=_geocoder_adapter,
        ticket_repo=tickets,
        user_repo=SqlUserRepository(session),
        assigner=AssignEngineerUseCase(
            ticket_repo=tickets,
            engineer_repo=SqlEngineerRepository(session),
            local_tz=settings.local_tz,
        ),
        notifier=notifier,
        priority_policy=settings.priority_policy,
        geocoder_timeout_seconds=settings.geocoder_timeout_seconds,
    )


def get_lifecycle_uc(
    session: AsyncSession = Depends(get_session),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> TicketLifecycleUseCase:
    return TicketLifecycleUseCase(
        ticket_repo=SqlTicketRepository(session),
        engineer_repo=SqlEngineerRepository(session),
        notifier=notifier,
    )


def get_ticket_query_uc(session: AsyncSession = Depends(get_session)) -> TicketQueryUseCase:
    return TicketQueryUseCase(ticket_repo=SqlTicketRepository(session))


def get_engineer_admin_uc(
    session: AsyncSession = Depends(get_session),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> EngineerAdminUseCase:
    return EngineerAdminUseCase(
        ticket_repo=SqlTicketRepository(session),
        engineer_repo=SqlEngineerRepository(session),
        user_repo=SqlUserRepository(session),
        notifier=notifier,
        local_tz=settings.local_tz,
    )


def get_hazard_uc(session: AsyncSession = Depends(get_session)) -> HazardUseCase:
    return HazardUseCase(
        geocoder=_geocoder_adapter,
        hazard_repo=SqlHazardRepository(session),
        geocoder_timeout_seconds=settings.geocoder_timeout_seconds,
    )


def get_profile_uc(session: AsyncSession = Depends(get_session)) -> ProfileUseCase:
    return ProfileUseCase(
        user_repo=SqlUserRepository(session),
        engineer_repo=SqlEngineerRepository(session),
        geocoder=_geocoder_adapter,
        geocoder_timeout_seconds=settings.geocoder_timeout_seconds,
    )


def get_inbox_uc(session: AsyncSession = Depends(get_session)) -> NotificationInboxUseCase:
    return NotificationInboxUseCase(notification_repo=SqlNotificationRepository(session))
