"""SQLAlchemy repository implementations."""

from __future__ import annotations

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.adapters.persistence.models import (
    EngineerModel,
    HazardModel,
    NotificationModel,
    TicketModel,
    UserModel,
    ticket_id_seq,
)
from fieldservice.application.ports.engineer_repo import EngineerRepository
from fieldservice.application.ports.hazard_repo import HazardRepository
from fieldservice.application.ports.notification_repo import NotificationRepository
from fieldservice.application.ports.ticket_repo import TicketRepository
from fieldservice.application.ports.user_repo import UserRepository
from fieldservice.domain.entities.engineer import Engineer
from fieldservice.domain.entities.hazard import Hazard
from fieldservice.domain.entities.notification import Notification
from fieldservice.domain.entities.ticket import Ticket
from fieldservice.domain.entities.user import User
from fieldservice.domain.errors import NotFoundError, StaleRecordError
from fieldservice.domain.value_objects.enums import (
    Priority,
    RiskLevel,
    ServiceType,
    Specialization,
    TicketStatus,
)
from fieldservice.domain.value_objects.geo_point import GeoPoint

# ─── Mappers ─────────────────────────────────────────────────────────


def _location(lat: float | None, lon: float | None) -> GeoPoint | None:
    if lat is None or lon is None:
        return None
    return GeoPoint(latitude=lat, longitude=lon)


def _lat(point: GeoPoint | None) -> float | None:
    return point.latitude if point else None


def _lon(point: GeoPoint | None) -> float | None:
    return point.longitude if point else None


def _ticket_to_domain(m: TicketModel) -> Ticket:
    return Ticket(
        id=m.id,
        user_email=m.user_email,
        service_type=ServiceType(m.service_type),
        pincode=m.pincode,
        description=m.description,
        location=_location(m.latitude, m.longitude),
        address=m.address,
        priority=Priority(m.priority),
        status=TicketStatus(m.status),
        accepted=m.accepted,
        engineer_email=m.engineer_email,
        created_at=m.created_at,
        updated_at=m.updated_at,
        version=m.version,
    )


def _ticket_values(ticket: Ticket) -> dict:
    return {
        "user_email": ticket.user_email,
        "service_type": ticket.service_type.value,
        "pincode": ticket.pincode,
        "description": ticket.description,
        "latitude": _lat(ticket.location),
        "longitude": _lon(ticket.location),
        "address": ticket.address,
        "priority": ticket.priority.value,
        "status": ticket.status.value,
        "accepted": ticket.accepted,
        "engineer_email": ticket.engineer_email,
        "created_at": ticket.created_at,
        "updated_at": ticket.updated_at,
    }


def _engineer_to_domain(m: EngineerModel) -> Engineer:
    return Engineer(
        email=m.email,
        name=m.name,
        phone=m.phone,
        specialization=Specialization(m.specialization),
        availability=set(m.availability) if m.availability else set(),
        location=_location(m.latitude, m.longitude),
        address=m.address,
        pincode=m.pincode,
        current_tasks=m.current_tasks,
        assigned_tasks=list(m.assigned_tasks) if m.assigned_tasks else [],
        is_engineer=m.is_engineer,
        version=m.version,
    )


def _engineer_values(engineer: Engineer) -> dict:
    return {
        "name": engineer.name,
        "phone": engineer.phone,
        "specialization": engineer.specialization.value,
        "availability": sorted(engineer.availability),
        "address": engineer.address,
        "pincode": engineer.pincode,
        "latitude": _lat(engineer.location),
        "longitude": _lon(engineer.location),
        "current_tasks": engineer.current_tasks,
        "assigned_tasks": list(engineer.assigned_tasks),
        "is_engineer": engineer.is_engineer,
    }


def _user_to_domain(m: UserModel) -> User:
    return User(email=m.email, name=m.name, phone=m.phone, address=m.address, pincode=m.pincode)


def _notification_to_domain(m: NotificationModel) -> Notification:
    return Notification(
        id=m.id, email=m.email, message=m.message, is_read=m.is_read, created_at=m.created_at
    )


def _hazard_to_domain(m: HazardModel) -> Hazard:
    return Hazard(
        id=m.id,
        hazard_type=m.hazard_type,
        description=m.description,
        risk_level=RiskLevel(m.risk_level),
        pincode=m.pincode,
        location=_location(m.latitude, m.longitude),
        address=m.address,
        created_at=m.created_at,
        updated_at=m.updated_at,
    )


# ─── Repositories ────────────────────────────────────────────────────


class SqlTicketRepository(TicketRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def next_ticket_id(self) -> int:
        return int(await self._s.scalar(select(ticket_id_seq.next_value())))

    async def save(self, ticket: Ticket) -> Ticket:
        m = TicketModel(id=ticket.id, version=ticket.version, **_ticket_values(ticket))
        self._s.add(m)
        await self._s.flush()
        ticket.id = m.id
        return ticket

    async def get_by_id(self, ticket_id: int) -> Ticket | None:
        m = await self._s.get(TicketModel, ticket_id)
        return _ticket_to_domain(m) if m else None

    async def update(self, ticket: Ticket) -> Ticket:
        result = await self._s.execute(
            update(TicketModel)
            .where(TicketModel.id == ticket.id, TicketModel.version == ticket.version)
            .values(version=ticket.version + 1, **_ticket_values(ticket))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise StaleRecordError("Ticket", ticket.id)
        ticket.version += 1
        await self._s.flush()
        return ticket

    async def get_all(self) -> list[Ticket]:
        result = await self._s.execute(select(TicketModel).order_by(TicketModel.id))
        return [_ticket_to_domain(m) for m in result.scalars()]

    async def list_by_user_email(self, email, *, include_deferred=True):
        stmt = select(TicketModel).where(TicketModel.user_email == email)
        if not include_deferred:
            stmt = stmt.where(TicketModel.status != TicketStatus.DEFERRED.value)
        result = await self._s.execute(stmt.order_by(TicketModel.id))
        return [_ticket_to_domain(m) for m in result.scalars()]

    async def list_by_engineer_email(self, email, *, include_deferred=True):
        stmt = select(TicketModel).where(TicketModel.engineer_email == email)
        if not include_deferred:
            stmt = stmt.where(TicketModel.status != TicketStatus.DEFERRED.value)
        result = await self._s.execute(stmt.order_by(TicketModel.id))
        return [_ticket_to_domain(m) for m in result.scalars()]

    async def list_by_status(self, status, *, user_email=None, engineer_email=None):
        stmt = select(TicketModel).where(TicketModel.status == status.value)
        stmt = self._scoped(stmt, user_email, engineer_email)
        result = await self._s.execute(stmt.order_by(TicketModel.id))
        return [_ticket_to_domain(m) for m in result.scalars()]

    async def list_by_priority(self, priority, *, user_email=None, engineer_email=None):
        stmt = select(TicketModel).where(TicketModel.priority == priority.value)
        stmt = self._scoped(stmt, user_email, engineer_email)
        result = await self._s.execute(stmt.order_by(TicketModel.id))
        return [_ticket_to_domain(m) for m in result.scalars()]

    @staticmethod
    def _scoped(stmt, user_email, engineer_email):
        if user_email is not None:
            stmt = stmt.where(TicketModel.user_email == user_email)
        if engineer_email is not None:
            stmt = stmt.where(TicketModel.engineer_email == engineer_email)
        return stmt


class SqlEngineerRepository(EngineerRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, engineer: Engineer) -> Engineer:
        m = EngineerModel(email=engineer.email, version=engineer.version, **_engineer_values(engineer))
        self._s.add(m)
        await self._s.flush()
        return engineer

    async def get_by_email(self, email: str) -> Engineer | None:
        m = await self._s.get(EngineerModel, email)
        return _engineer_to_domain(m) if m else None

    async def list_available(self, weekday, specialization=None):
        stmt = select(EngineerModel).where(
            EngineerModel.is_engineer.is_(True),
            EngineerModel.availability.any(weekday),
        )
        if specialization is not None:
            stmt = stmt.where(EngineerModel.specialization == specialization.value)
        result = await self._s.execute(stmt.order_by(EngineerModel.email))
        return [_engineer_to_domain(m) for m in result.scalars()]

    async def update(self, engineer: Engineer) -> Engineer:
        result = await self._s.execute(
            update(EngineerModel)
            .where(
                EngineerModel.email == engineer.email,
                EngineerModel.version == engineer.version,
            )
            .values(version=engineer.version + 1, **_engineer_values(engineer))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise StaleRecordError("Engineer", engineer.email)
        engineer.version += 1
        await self._s.flush()
        return engineer

    async def get_all(self) -> list[Engineer]:
        result = await self._s.execute(select(EngineerModel).order_by(EngineerModel.email))
        return [_engineer_to_domain(m) for m in result.scalars()]

    async def list_by_approval(self, approved: bool) -> list[Engineer]:
        result = await self._s.execute(
            select(EngineerModel)
            .where(EngineerModel.is_engineer.is_(approved))
            .order_by(EngineerModel.email)
        )
        return [_engineer_to_domain(m) for m in result.scalars()]


class SqlUserRepository(UserRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, user: User) -> User:
        self._s.add(
            UserModel(
                email=user.email, name=user.name, phone=user.phone,
                address=user.address, pincode=user.pincode,
            )
        )
        await self._s.flush()
        return user

    async def get_by_email(self, email: str) -> User | None:
        m = await self._s.get(UserModel, email)
        return _user_to_domain(m) if m else None

    async def update(self, user: User) -> User:
        result = await self._s.execute(
            update(UserModel)
            .where(UserModel.email == user.email)
            .values(name=user.name, phone=user.phone, address=user.address, pincode=user.pincode)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("User not found")
        await self._s.flush()
        return user

    async def get_all(self) -> list[User]:
        result = await self._s.execute(select(UserModel).order_by(UserModel.email))
        return [_user_to_domain(m) for m in result.scalars()]


class SqlHazardRepository(HazardRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, hazard: Hazard) -> Hazard:
        m = HazardModel(
            hazard_type=hazard.hazard_type,
            description=hazard.description,
            risk_level=hazard.risk_level.value,
            pincode=hazard.pincode,
            address=hazard.address,
            latitude=_lat(hazard.location),
            longitude=_lon(hazard.location),
            created_at=hazard.created_at,
            updated_at=hazard.updated_at,
        )
        self._s.add(m)
        await self._s.flush()
        hazard.id = m.id
        return hazard

    async def get_by_id(self, hazard_id: int) -> Hazard | None:
        m = await self._s.get(HazardModel, hazard_id)
        return _hazard_to_domain(m) if m else None

    async def update(self, hazard: Hazard) -> Hazard:
        await self._s.execute(
            update(HazardModel)
            .where(HazardModel.id == hazard.id)
            .values(
                hazard_type=hazard.hazard_type,
                description=hazard.description,
                risk_level=hazard.risk_level.value,
                pincode=hazard.pincode,
                address=hazard.address,
                latitude=_lat(hazard.location),
                longitude=_lon(hazard.location),
                updated_at=hazard.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        await self._s.flush()
        return hazard

    async def delete(self, hazard_id: int) -> bool:
        result = await self._s.execute(delete(HazardModel).where(HazardModel.id == hazard_id))
        await self._s.flush()
        return result.rowcount > 0

    async def get_all(self) -> list[Hazard]:
        result = await self._s.execute(select(HazardModel).order_by(HazardModel.id))
        return [_hazard_to_domain(m) for m in result.scalars()]


class SqlNotificationRepository(NotificationRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, notification: Notification) -> Notification:
        m = NotificationModel(
            email=notification.email,
            message=notification.message,
            is_read=notification.is_read,
            created_at=notification.created_at,
        )
        # Savepoint: a failed inbox write must not poison the request's transaction
        async with self._s.begin_nested():
            self._s.add(m)
        notification.id = m.id
        return notification

    async def get_by_id(self, notification_id: int) -> Notification | None:
        m = await self._s.get(NotificationModel, notification_id)
        return _notification_to_domain(m) if m else None

    async def list_by_email(self, email, *, unread_only=False):
        stmt = select(NotificationModel).where(NotificationModel.email == email)
        if unread_only:
            stmt = stmt.where(NotificationModel.is_read.is_(False))
        result = await self._s.execute(
            stmt.order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
        )
        return [_notification_to_domain(m) for m in result.scalars()]

    async def mark_read(self, notification_id: int) -> bool:
        result = await self._s.execute(
            update(NotificationModel)
            .where(NotificationModel.id == notification_id)
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        await self._s.flush()
        return result.rowcount > 0
