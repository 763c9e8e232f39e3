"""ProfileUseCase — callers read and edit their own user or engineer profile.

An engineer's pincode, availability and specialization are what the
assignment engine ranks on, so engineer edits are validated as strictly as
seeding: a new pincode must geocode, weekdays must be real weekdays, and the
record is saved through the versioned engineer update.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from fieldservice.application.geocoding import required_text, resolve_pincode
from fieldservice.application.ports.engineer_repo import EngineerRepository
from fieldservice.application.ports.geocoder_port import GeocoderPort
from fieldservice.application.ports.user_repo import UserRepository
from fieldservice.application.principals import EngineerPrincipal, Principal, UserPrincipal
from fieldservice.application.results import OperationResult, guarded
from fieldservice.application.use_cases.engineer_admin import parse_weekday
from fieldservice.domain.entities.engineer import Engineer
from fieldservice.domain.entities.user import User
from fieldservice.domain.errors import ConflictError, NotFoundError, ValidationError
from fieldservice.domain.value_objects.enums import Specialization

logger = logging.getLogger(__name__)


@dataclass
class ProfileDraft:
    """Editable profile fields; None means "leave unchanged"."""

    name: str | None = None
    phone: str | None = None
    address: str | None = None
    pincode: str | None = None
    specialization: str | None = None
    availability: list[str] | None = None


def parse_specialization(raw) -> Specialization:
    try:
        return Specialization(str(raw).strip().capitalize())
    except ValueError:
        raise ValidationError(f"Invalid specialization: {raw}") from None


def parse_availability(days: Iterable[str]) -> set[str]:
    parsed = set()
    for day in days:
        name = parse_weekday(day)
        if name is None:
            raise ValidationError(f"Invalid weekday: {day}")
        parsed.add(name)
    return parsed


def _optional_text(value: str) -> str | None:
    return value.strip() or None


class ProfileUseCase:
    def __init__(
        self,
        user_repo: UserRepository,
        engineer_repo: EngineerRepository,
        geocoder: GeocoderPort,
        geocoder_timeout_seconds: float = 10.0,
    ):
        self._users = user_repo
        self._engineers = engineer_repo
        self._geocoder = geocoder
        self._geocoder_timeout = geocoder_timeout_seconds

    async def get_profile(self, principal: Principal) -> OperationResult:
        async def run() -> OperationResult:
            return OperationResult.ok(data=await self._load(principal))

        return await guarded("fetching the profile", run)

    async def update_profile(self, principal: Principal, draft: ProfileDraft) -> OperationResult:
        async def run() -> OperationResult:
            profile = await self._load(principal)
            if isinstance(profile, Engineer):
                await self._update_engineer(profile, draft)
            else:
                await self._update_user(profile, draft)
            logger.info("Profile of %s updated", principal.email)
            return OperationResult.ok("Profile updated successfully", data=profile)

        return await guarded("updating the profile", run)

    async def _load(self, principal: Principal) -> User | Engineer:
        profile = None
        if isinstance(principal, UserPrincipal):
            profile = await self._users.get_by_email(principal.email)
        elif isinstance(principal, EngineerPrincipal):
            profile = await self._engineers.get_by_email(principal.email)
        if profile is None:
            raise NotFoundError("User not found")
        return profile

    async def _update_user(self, user: User, draft: ProfileDraft) -> None:
        if draft.specialization is not None or draft.availability is not None:
            raise ValidationError("Only engineers have a specialization or availability")
        _apply_contact_fields(user, draft)
        if draft.pincode is not None:
            user.pincode = required_text("pincode", draft.pincode)
        await self._users.update(user)

    async def _update_engineer(self, engineer: Engineer, draft: ProfileDraft) -> None:
        _apply_contact_fields(engineer, draft)

        if draft.specialization is not None:
            specialization = parse_specialization(draft.specialization)
            if specialization != engineer.specialization and engineer.assigned_tasks:
                raise ConflictError("Cannot change specialization while tasks are assigned")
            engineer.specialization = specialization

        if draft.availability is not None:
            engineer.availability = parse_availability(draft.availability)

        if draft.pincode is not None:
            pincode = required_text("pincode", draft.pincode)
            if pincode != engineer.pincode or not engineer.has_usable_location():
                resolved = await resolve_pincode(self._geocoder, pincode, self._geocoder_timeout)
                engineer.location = resolved.location
            engineer.pincode = pincode

        await self._engineers.update(engineer)


def _apply_contact_fields(profile: User | Engineer, draft: ProfileDraft) -> None:
    if draft.name is not None:
        profile.name = required_text("name", draft.name)
    if draft.phone is not None:
        profile.phone = _optional_text(draft.phone)
    if draft.address is not None:
        profile.address = _optional_text(draft.address)
