"""Tests for RaiseTicketUseCase: geocode → id → priority → persist → assign → notify."""

from __future__ import annotations

import asyncio

import pytest
from fakes import (
    BENGALURU,
    MONDAY_NOON_UTC,
    FakeEngineerRepo,
    FakeGeocoder,
    FakeNotifier,
    FakeTicketRepo,
    make_engineer,
)

from fieldservice.application.notifications import NotificationDispatcher
from fieldservice.application.results import ErrorCode
from fieldservice.application.use_cases.assign_engineer import AssignEngineerUseCase
from fieldservice.application.use_cases.raise_ticket import RaiseTicketCommand, RaiseTicketUseCase
from fieldservice.domain.policies.priority import PriorityPolicy
from fieldservice.domain.value_objects.enums import Priority, TicketStatus
from fieldservice.domain.value_objects.geo_point import GeoPoint

# ~3 km north of the ticket
NEARBY = GeoPoint(latitude=12.997, longitude=77.59)


def _build(user_repo, engineers=(), geocoder=None, sink=None, policy=None, timeout=1.0):
    tickets = FakeTicketRepo()
    engineer_repo = FakeEngineerRepo(list(engineers))
    sink = sink or FakeNotifier()
    uc = RaiseTicketUseCase(
        geocoder=geocoder or FakeGeocoder({"560001": BENGALURU}),
        ticket_repo=tickets,
        user_repo=user_repo,
        assigner=AssignEngineerUseCase(ticket_repo=tickets, engineer_repo=engineer_repo),
        notifier=NotificationDispatcher(sink, timeout_seconds=1.0),
        priority_policy=policy,
        geocoder_timeout_seconds=timeout,
    )
    return uc, tickets, engineer_repo, sink


def _command(**overrides):
    values = dict(
        user_email="user@example.com",
        service_type="installation",
        pincode="560001",
        description="New fibre line",
        created_at=MONDAY_NOON_UTC,
    )
    values.update(overrides)
    return RaiseTicketCommand(**values)


@pytest.mark.asyncio
async def test_raise_assigns_nearby_engineer(user_repo):
    uc, tickets, engineers, sink = _build(
        user_repo, [make_engineer("near@x.com", location=NEARBY)]
    )

    result = await uc.execute(_command())

    assert result.success
    assert result.message == "Ticket raised successfully"
    ticket = result.data
    assert ticket.engineer_email == "near@x.com"
    assert ticket.accepted is False
    assert ticket.status == TicketStatus.OPEN
    assert ticket.priority == Priority.LOW
    assert ticket.location == BENGALURU
    assert ticket.address == "Area 560001"

    stored = tickets.tickets[ticket.id]
    assert stored.engineer_email == "near@x.com"
    assert engineers.engineers["near@x.com"].assigned_tasks == [ticket.id]

    assert len(sink.sent) == 1
    to, subject, body = sink.sent[0]
    assert to == "user@example.com"
    assert subject == "Ticket Raised Successfully"
    assert "near@x.com" in body


@pytest.mark.asyncio
async def test_rescore_on_assignment(user_repo):
    uc, _, _, _ = _build(
        user_repo, [make_engineer(location=NEARBY)],
        policy=PriorityPolicy(rescore_on_assignment=True),
    )

    result = await uc.execute(_command())

    assert result.data.priority == Priority.HIGH


@pytest.mark.asyncio
async def test_fault_is_high_policy(user_repo):
    uc, _, _, _ = _build(user_repo, policy=PriorityPolicy(fault_is_high=True))

    result = await uc.execute(_command(service_type="fault"))

    assert result.data.priority == Priority.HIGH


@pytest.mark.asyncio
async def test_no_engineer_available(user_repo):
    uc, tickets, _, sink = _build(user_repo)

    result = await uc.execute(_command())

    assert result.success
    assert result.data.engineer_email is None
    assert tickets.tickets[result.data.id].engineer_email is None
    assert "Not Assigned" in sink.sent[0][2]


@pytest.mark.asyncio
async def test_geocoder_timeout_creates_ungeocoded_ticket(user_repo):
    slow = FakeGeocoder({"560001": BENGALURU}, delay=0.5)
    uc, _, _, _ = _build(user_repo, [make_engineer(location=NEARBY)], geocoder=slow, timeout=0.05)

    result = await uc.execute(_command())

    assert result.success
    assert result.data.location is None
    assert result.data.address is None
    # Still assigned, by load
    assert result.data.engineer_email == "eng@example.com"


@pytest.mark.asyncio
async def test_geocoder_error_creates_ungeocoded_ticket(user_repo):
    broken = FakeGeocoder(error=RuntimeError("boom"))
    uc, _, _, _ = _build(user_repo, geocoder=broken)

    result = await uc.execute(_command())

    assert result.success
    assert result.data.location is None


@pytest.mark.asyncio
async def test_unknown_pincode_creates_ungeocoded_ticket(user_repo):
    uc, _, _, _ = _build(user_repo)

    result = await uc.execute(_command(pincode="999999"))

    assert result.success
    assert result.data.location is None


@pytest.mark.asyncio
async def test_unknown_user(user_repo):
    uc, tickets, _, sink = _build(user_repo)

    result = await uc.execute(_command(user_email="ghost@example.com"))

    assert not result.success
    assert result.code == ErrorCode.NOT_FOUND
    assert result.message == "User not found"
    assert tickets.tickets == {}
    assert sink.sent == []


@pytest.mark.parametrize("overrides,message", [
    ({"service_type": "repair"}, "Invalid service type: repair"),
    ({"pincode": "  "}, "Missing pincode"),
    ({"description": ""}, "Missing description"),
])
@pytest.mark.asyncio
async def test_validation(user_repo, overrides, message):
    uc, _, _, _ = _build(user_repo)

    result = await uc.execute(_command(**overrides))

    assert result.code == ErrorCode.VALIDATION
    assert result.message == message


@pytest.mark.asyncio
async def test_notification_failure_does_not_fail_the_raise(user_repo):
    uc, _, _, _ = _build(user_repo, sink=FakeNotifier(fail=True))

    result = await uc.execute(_command())

    assert result.success


@pytest.mark.asyncio
async def test_concurrent_raises_get_distinct_ids(user_repo):
    uc, tickets, _, _ = _build(user_repo)

    results = await asyncio.gather(*(uc.execute(_command()) for _ in range(5)))

    ids = [r.data.id for r in results]
    assert len(set(ids)) == 5
    assert set(tickets.tickets) == set(ids)


@pytest.mark.asyncio
async def test_store_failure_is_reported(user_repo):
    uc, tickets, _, sink = _build(user_repo)
    tickets.fail_updates = True

    result = await uc.execute(_command())

    assert not result.success
    assert result.code == ErrorCode.COLLABORATOR
    assert result.error == "ticket store unavailable"
    assert sink.sent == []
