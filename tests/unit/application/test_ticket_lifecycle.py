"""Tests for TicketLifecycleUseCase: accept, reject, status, reassign."""

from __future__ import annotations

import copy

import pytest
from fakes import FakeEngineerRepo, FakeNotifier, FakeTicketRepo, make_engineer, make_ticket

from fieldservice.application.notifications import NotificationDispatcher
from fieldservice.application.principals import AdminPrincipal, EngineerPrincipal
from fieldservice.application.results import ErrorCode
from fieldservice.application.use_cases.ticket_lifecycle import (
    TicketLifecycleUseCase,
    parse_status,
    parse_ticket_id,
)
from fieldservice.domain.errors import ValidationError
from fieldservice.domain.value_objects.enums import ServiceType, Specialization, TicketStatus

ALICE = "alice@x.com"
BOB = "bob@x.com"


def _build(tickets, engineers, sink=None):
    ticket_repo = FakeTicketRepo(tickets)
    engineer_repo = FakeEngineerRepo(engineers)
    sink = sink or FakeNotifier()
    uc = TicketLifecycleUseCase(
        ticket_repo=ticket_repo,
        engineer_repo=engineer_repo,
        notifier=NotificationDispatcher(sink, timeout_seconds=1.0),
    )
    return uc, ticket_repo, engineer_repo, sink


class RacingTicketRepo(FakeTicketRepo):
    """Another writer bumps the stored version right after every read."""

    async def get_by_id(self, ticket_id):
        ticket = await super().get_by_id(ticket_id)
        if ticket is not None:
            self.tickets[ticket_id].version += 1
        return ticket


# ─── Parsing ─────────────────────────────────────────────────────────


@pytest.mark.parametrize("raw,expected", [(7, 7), ("7", 7), (" 12 ", 12)])
def test_parse_ticket_id(raw, expected):
    assert parse_ticket_id(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "", None, 0, -3, "1.5", True])
def test_parse_ticket_id_rejects(raw):
    with pytest.raises(ValidationError, match="Invalid ticket ID"):
        parse_ticket_id(raw)


def test_parse_status():
    assert parse_status("In-Progress") == TicketStatus.IN_PROGRESS
    with pytest.raises(ValidationError, match="Invalid status: bogus"):
        parse_status("bogus")


# ─── Accept ──────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_accept_tentative_assignment():
    uc, tickets, engineers, _ = _build(
        [make_ticket(engineer_email=ALICE)],
        [make_engineer(ALICE, assigned_tasks=[1])],
    )

    result = await uc.accept_task(ALICE, 1)

    assert result.success
    assert result.message == "Task accepted successfully"
    assert tickets.tickets[1].accepted is True
    assert tickets.tickets[1].engineer_email == ALICE
    assert engineers.engineers[ALICE].assigned_tasks == [1]
    assert engineers.engineers[ALICE].current_tasks == 1


@pytest.mark.asyncio
async def test_accept_is_idempotent():
    uc, tickets, engineers, _ = _build(
        [make_ticket(engineer_email=ALICE)],
        [make_engineer(ALICE, assigned_tasks=[1])],
    )
    await uc.accept_task(ALICE, "1")
    before_ticket = copy.deepcopy(tickets.tickets[1])
    before_engineer = copy.deepcopy(engineers.engineers[ALICE])

    again = await uc.accept_task(ALICE, "1")

    assert not again.success
    assert again.message == "Task already assigned to this engineer"
    assert tickets.tickets[1] == before_ticket
    assert engineers.engineers[ALICE] == before_engineer


@pytest.mark.asyncio
async def test_accept_unassigned_ticket_adds_task():
    uc, tickets, engineers, _ = _build([make_ticket()], [make_engineer(ALICE)])

    result = await uc.accept_task(ALICE, 1)

    assert result.success
    assert engineers.engineers[ALICE].assigned_tasks == [1]
    assert engineers.engineers[ALICE].current_tasks == 1


@pytest.mark.asyncio
async def test_accept_does_not_overwrite_another_engineers_acceptance():
    uc, tickets, engineers, _ = _build(
        [make_ticket(engineer_email=ALICE, accepted=True)],
        [make_engineer(ALICE, assigned_tasks=[1]), make_engineer(BOB)],
    )

    result = await uc.accept_task(BOB, 1)

    assert result.code == ErrorCode.CONFLICT
    assert result.message == "Task already accepted by another engineer"
    assert tickets.tickets[1].engineer_email == ALICE
    assert engineers.engineers[BOB].assigned_tasks == []


@pytest.mark.asyncio
async def test_accept_takes_over_tentative_assignment():
    uc, tickets, engineers, _ = _build(
        [make_ticket(engineer_email=ALICE)],
        [make_engineer(ALICE, assigned_tasks=[1]), make_engineer(BOB)],
    )

    result = await uc.accept_task(BOB, 1)

    assert result.success
    assert tickets.tickets[1].engineer_email == BOB
    assert engineers.engineers[ALICE].assigned_tasks == []
    assert engineers.engineers[ALICE].current_tasks == 0
    assert engineers.engineers[BOB].assigned_tasks == [1]


@pytest.mark.parametrize("engineer,ticket_id,code,message", [
    ("ghost@x.com", 1, ErrorCode.NOT_FOUND, "Engineer not found"),
    ("", 1, ErrorCode.VALIDATION, "Missing engineer email"),
    (ALICE, "abc", ErrorCode.VALIDATION, "Invalid ticket ID"),
    (ALICE, 99, ErrorCode.NOT_FOUND, "Ticket not found"),
])
@pytest.mark.asyncio
async def test_accept_failures(engineer, ticket_id, code, message):
    uc, _, _, _ = _build([make_ticket()], [make_engineer(ALICE)])

    result = await uc.accept_task(engineer, ticket_id)

    assert not result.success
    assert result.code == code
    assert result.message == message


@pytest.mark.asyncio
async def test_concurrent_write_is_a_retryable_conflict():
    ticket_repo = RacingTicketRepo([make_ticket(engineer_email=ALICE)])
    uc = TicketLifecycleUseCase(
        ticket_repo=ticket_repo,
        engineer_repo=FakeEngineerRepo([make_engineer(ALICE, assigned_tasks=[1])]),
        notifier=NotificationDispatcher(FakeNotifier()),
    )

    result = await uc.accept_task(ALICE, 1)

    assert result.code == ErrorCode.CONFLICT
    assert result.retryable is True
    assert ticket_repo.tickets[1].accepted is False


@pytest.mark.asyncio
async def test_unexpected_store_error():
    uc, tickets, _, _ = _build([make_ticket()], [make_engineer(ALICE)])
    tickets.fail_updates = True

    result = await uc.accept_task(ALICE, 1)

    assert result.code == ErrorCode.COLLABORATOR
    assert result.message == "An error occurred while accepting the task"
    assert result.error == "ticket store unavailable"


# ─── Reject ──────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_reject_releases_ticket_and_keeps_status():
    uc, tickets, engineers, _ = _build(
        [make_ticket(engineer_email=ALICE, accepted=True, status=TicketStatus.IN_PROGRESS)],
        [make_engineer(ALICE, assigned_tasks=[1, 2])],
    )

    result = await uc.reject_task(ALICE, 1)

    assert result.success
    assert result.message == "Task rejected successfully"
    stored = tickets.tickets[1]
    assert stored.engineer_email is None
    assert stored.accepted is False
    assert stored.status == TicketStatus.IN_PROGRESS
    assert engineers.engineers[ALICE].assigned_tasks == [2]
    assert engineers.engineers[ALICE].current_tasks == 1


@pytest.mark.asyncio
async def test_reject_not_assigned():
    uc, _, _, _ = _build(
        [make_ticket(engineer_email=BOB)],
        [make_engineer(ALICE), make_engineer(BOB, assigned_tasks=[1])],
    )

    result = await uc.reject_task(ALICE, 1)

    assert result.code == ErrorCode.CONFLICT
    assert result.message == "Task is not assigned to this engineer"


@pytest.mark.asyncio
async def test_reject_then_reassign():
    uc, tickets, engineers, _ = _build(
        [make_ticket(engineer_email=ALICE, accepted=True, status=TicketStatus.DEFERRED)],
        [make_engineer(ALICE, assigned_tasks=[1]), make_engineer(BOB)],
    )

    assert (await uc.reject_task(ALICE, 1)).success
    result = await uc.reassign_ticket(1, BOB)

    assert result.success
    assert result.message == "Ticket reassigned successfully"
    stored = tickets.tickets[1]
    assert stored.engineer_email == BOB
    assert stored.accepted is False
    assert stored.status == TicketStatus.OPEN
    assert engineers.engineers[ALICE].current_tasks == 0
    assert engineers.engineers[BOB].assigned_tasks == [1]
    assert engineers.engineers[BOB].current_tasks == 1


# ─── Reassign ────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_reassign_moves_workload():
    uc, tickets, engineers, _ = _build(
        [make_ticket(engineer_email=ALICE, status=TicketStatus.DEFERRED)],
        [make_engineer(ALICE, assigned_tasks=[1]), make_engineer(BOB, assigned_tasks=[5])],
    )

    result = await uc.reassign_ticket("1", BOB)

    assert result.success
    assert engineers.engineers[ALICE].assigned_tasks == []
    assert engineers.engineers[BOB].assigned_tasks == [5, 1]
    assert tickets.tickets[1].status == TicketStatus.OPEN


@pytest.mark.asyncio
async def test_reassign_specialization_mismatch_mutates_nothing():
    uc, tickets, engineers, _ = _build(
        [make_ticket(service_type=ServiceType.FAULT, engineer_email=ALICE)],
        [
            make_engineer(ALICE, specialization=Specialization.FAULT, assigned_tasks=[1]),
            make_engineer(BOB, specialization=Specialization.INSTALLATION),
        ],
    )
    before_tickets = copy.deepcopy(tickets.tickets)
    before_engineers = copy.deepcopy(engineers.engineers)

    result = await uc.reassign_ticket(1, BOB)

    assert result.code == ErrorCode.CONFLICT
    assert result.message == (
        "Engineer specialization (Installation) does not match ticket service type (fault)"
    )
    assert tickets.tickets == before_tickets
    assert engineers.engineers == before_engineers


@pytest.mark.asyncio
async def test_reassign_to_same_engineer():
    uc, _, engineers, _ = _build(
        [make_ticket(engineer_email=ALICE)],
        [make_engineer(ALICE, assigned_tasks=[1])],
    )

    result = await uc.reassign_ticket(1, ALICE)

    assert result.code == ErrorCode.CONFLICT
    assert result.message == "Cannot reassign ticket to the same engineer who deferred it"
    assert engineers.engineers[ALICE].assigned_tasks == [1]


@pytest.mark.asyncio
async def test_reassign_unknown_engineer():
    uc, _, _, _ = _build([make_ticket()], [])

    result = await uc.reassign_ticket(1, "ghost@x.com")

    assert result.code == ErrorCode.NOT_FOUND


# ─── Status ──────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_completed_notifies_owner_once():
    uc, tickets, _, sink = _build([make_ticket(engineer_email=ALICE, accepted=True)], [])

    result = await uc.update_ticket_status(1, "completed")

    assert result.success
    assert result.message == "Ticket status updated"
    assert tickets.tickets[1].status == TicketStatus.COMPLETED
    assert sink.sent == [
        ("user@example.com", "Ticket resolved", "Your ticket with id 1 has been resolved."),
    ]


@pytest.mark.parametrize("status", ["in-progress", "failed", "deferred", "open"])
@pytest.mark.asyncio
async def test_other_statuses_do_not_notify(status):
    uc, tickets, _, sink = _build([make_ticket()], [])

    result = await uc.update_ticket_status(1, status)

    assert result.success
    assert tickets.tickets[1].status == TicketStatus(status)
    assert sink.sent == []


@pytest.mark.asyncio
async def test_bogus_status_leaves_ticket_unchanged():
    uc, tickets, _, sink = _build([make_ticket()], [])
    before = copy.deepcopy(tickets.tickets[1])

    result = await uc.update_ticket_status(1, "bogus")

    assert result.code == ErrorCode.VALIDATION
    assert result.message == "Invalid status: bogus"
    assert tickets.tickets[1] == before
    assert sink.sent == []


@pytest.mark.asyncio
async def test_status_is_validated_before_ticket_lookup():
    uc, _, _, _ = _build([], [])

    result = await uc.update_ticket_status(99, "bogus")

    assert result.code == ErrorCode.VALIDATION


@pytest.mark.asyncio
async def test_status_of_missing_ticket():
    uc, _, _, _ = _build([], [])

    result = await uc.update_ticket_status(99, "completed")

    assert result.code == ErrorCode.NOT_FOUND
    assert result.message == "Ticket not found"


@pytest.mark.asyncio
async def test_completion_survives_notification_failure():
    uc, tickets, _, _ = _build([make_ticket()], [], sink=FakeNotifier(fail=True))

    result = await uc.update_ticket_status(1, "completed")

    assert result.success
    assert tickets.tickets[1].status == TicketStatus.COMPLETED


@pytest.mark.asyncio
async def test_engineer_cannot_update_status_of_someone_elses_ticket():
    uc, tickets, _, sink = _build([make_ticket(engineer_email=BOB, accepted=True)], [])
    before = copy.deepcopy(tickets.tickets[1])

    result = await uc.update_ticket_status(1, "completed", EngineerPrincipal(ALICE))

    assert result.code == ErrorCode.CONFLICT
    assert result.message == "Task is not assigned to this engineer"
    assert tickets.tickets[1] == before
    assert sink.sent == []


@pytest.mark.asyncio
async def test_assigned_engineer_and_admin_can_update_status():
    uc, tickets, _, _ = _build([make_ticket(engineer_email=ALICE, accepted=True)], [])

    assert (await uc.update_ticket_status(1, "in-progress", EngineerPrincipal(ALICE))).success
    assert tickets.tickets[1].status == TicketStatus.IN_PROGRESS

    assert (await uc.update_ticket_status(1, "failed", AdminPrincipal("root@x.com"))).success
    assert tickets.tickets[1].status == TicketStatus.FAILED
