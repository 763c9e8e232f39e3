"""Tests for AssignEngineerUseCase with in-memory fakes."""

from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest
from fakes import BENGALURU, FakeEngineerRepo, FakeTicketRepo, make_engineer, make_ticket

from fieldservice.application.use_cases.assign_engineer import (
    ENGINEER_UPDATE_FAILED,
    NO_ENGINEERS_MESSAGE,
    TICKET_UPDATE_FAILED,
    AssignEngineerUseCase,
)
from fieldservice.domain.value_objects.enums import ServiceType, Specialization
from fieldservice.domain.value_objects.geo_point import GeoPoint

NEAR = GeoPoint(latitude=12.98, longitude=77.59)
FAR = GeoPoint(latitude=13.20, longitude=77.59)


async def _setup(engineers, ticket=None, tz=None):
    ticket = ticket or make_ticket()
    tickets = FakeTicketRepo([ticket])
    repo = FakeEngineerRepo(engineers)
    uc = AssignEngineerUseCase(ticket_repo=tickets, engineer_repo=repo, local_tz=tz)
    return uc, tickets, repo, await tickets.get_by_id(ticket.id)


@pytest.mark.asyncio
async def test_assigns_nearest_engineer():
    uc, tickets, engineers, ticket = await _setup([
        make_engineer("far@x.com", location=FAR),
        make_engineer("near@x.com", location=NEAR, current_tasks=5),
    ])

    outcome = await uc.execute(ticket)

    assert outcome.assigned
    assert outcome.engineer_email == "near@x.com"
    assert outcome.distance_km == pytest.approx(1.11, abs=0.01)

    stored = tickets.tickets[1]
    assert stored.engineer_email == "near@x.com"
    assert stored.accepted is False

    chosen = engineers.engineers["near@x.com"]
    assert chosen.assigned_tasks == [1]
    assert chosen.current_tasks == 6
    assert engineers.engineers["far@x.com"].assigned_tasks == []


@pytest.mark.asyncio
async def test_no_engineers_on_that_day():
    uc, tickets, _, ticket = await _setup([
        make_engineer(location=NEAR, availability=("Tuesday",)),
    ])

    outcome = await uc.execute(ticket)

    assert not outcome.assigned
    assert outcome.message == NO_ENGINEERS_MESSAGE
    assert tickets.tickets[1].engineer_email is None


@pytest.mark.asyncio
async def test_specialization_mismatch_leaves_ticket_unassigned():
    uc, _, _, ticket = await _setup([
        make_engineer(location=NEAR, specialization=Specialization.FAULT),
    ])

    outcome = await uc.execute(ticket)

    assert outcome.message == NO_ENGINEERS_MESSAGE


@pytest.mark.asyncio
async def test_unapproved_engineers_are_never_picked():
    uc, _, _, ticket = await _setup([
        make_engineer("pending@x.com", location=NEAR, is_engineer=False),
        make_engineer("approved@x.com", location=FAR),
    ])

    outcome = await uc.execute(ticket)

    assert outcome.engineer_email == "approved@x.com"


@pytest.mark.asyncio
async def test_only_unlocated_candidates():
    uc, _, _, ticket = await _setup([make_engineer(location=None)])

    outcome = await uc.execute(ticket)

    assert outcome.message == NO_ENGINEERS_MESSAGE


@pytest.mark.asyncio
async def test_fault_ticket_goes_to_fault_engineer():
    ticket = make_ticket(service_type=ServiceType.FAULT)
    uc, _, _, ticket = await _setup([
        make_engineer("installer@x.com", location=NEAR),
        make_engineer("fixer@x.com", location=FAR, specialization=Specialization.FAULT),
    ], ticket=ticket)

    outcome = await uc.execute(ticket)

    assert outcome.engineer_email == "fixer@x.com"


@pytest.mark.asyncio
async def test_weekday_is_taken_in_local_time():
    # Sunday 20:00 UTC is already Monday in India
    ticket = make_ticket(created_at=datetime(2024, 6, 2, 20, 0, tzinfo=timezone.utc))
    uc, _, engineers, ticket = await _setup(
        [make_engineer(location=NEAR, availability=("Monday",))],
        ticket=ticket, tz=ZoneInfo("Asia/Kolkata"),
    )

    outcome = await uc.execute(ticket)

    assert outcome.assigned
    assert engineers.list_available_calls == ["Monday"]


@pytest.mark.asyncio
async def test_ticket_write_failure():
    uc, tickets, engineers, ticket = await _setup([make_engineer(location=NEAR)])
    tickets.fail_updates = True

    outcome = await uc.execute(ticket)

    assert outcome.message == TICKET_UPDATE_FAILED
    assert ticket.engineer_email is None
    assert engineers.engineers["eng@example.com"].current_tasks == 0


@pytest.mark.asyncio
async def test_engineer_write_failure():
    uc, _, engineers, ticket = await _setup([make_engineer(location=NEAR)])
    engineers.fail_updates = True

    outcome = await uc.execute(ticket)

    assert outcome.message == ENGINEER_UPDATE_FAILED
    assert not outcome.assigned
    assert ticket.engineer_email is None


@pytest.mark.asyncio
async def test_ungeocoded_ticket_goes_to_least_loaded():
    ticket = make_ticket(location=None)
    uc, _, _, ticket = await _setup([
        make_engineer("busy@x.com", location=BENGALURU, current_tasks=3),
        make_engineer("idle@x.com", location=FAR, current_tasks=0),
    ], ticket=ticket)

    outcome = await uc.execute(ticket)

    assert outcome.engineer_email == "idle@x.com"
    assert outcome.distance_km is None
