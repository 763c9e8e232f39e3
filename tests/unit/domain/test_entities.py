"""Tests for domain entities."""

from fakes import make_engineer, make_ticket

from fieldservice.domain.entities.ticket import UNASSIGNED_LABEL
from fieldservice.domain.value_objects.enums import ServiceType, Specialization, TicketStatus


def test_add_task_keeps_count_in_sync():
    e = make_engineer()
    assert e.add_task(7) is True
    assert e.assigned_tasks == [7]
    assert e.current_tasks == 1


def test_add_task_is_idempotent():
    e = make_engineer(assigned_tasks=[7])
    assert e.add_task(7) is False
    assert e.assigned_tasks == [7]
    assert e.current_tasks == 1


def test_remove_task():
    e = make_engineer(assigned_tasks=[7, 8])
    assert e.remove_task(7) is True
    assert e.assigned_tasks == [8]
    assert e.current_tasks == 1


def test_remove_missing_task_changes_nothing():
    e = make_engineer(assigned_tasks=[8])
    assert e.remove_task(7) is False
    assert e.current_tasks == 1


def test_remove_task_floors_count_at_zero():
    e = make_engineer(assigned_tasks=[7])
    e.current_tasks = 0  # drifted record
    e.remove_task(7)
    assert e.current_tasks == 0


def test_engineer_can_handle():
    e = make_engineer(specialization=Specialization.FAULT)
    assert e.can_handle(ServiceType.FAULT)
    assert e.can_handle("fault")
    assert not e.can_handle(ServiceType.INSTALLATION)


def test_ticket_assign_is_tentative():
    t = make_ticket(accepted=True, engineer_email="old@x.com")
    t.assign_to("new@x.com")
    assert t.engineer_email == "new@x.com"
    assert t.accepted is False


def test_ticket_accept_and_release():
    t = make_ticket()
    t.accept_by("eng@x.com")
    assert t.is_accepted_by("eng@x.com")
    assert not t.is_accepted_by("other@x.com")

    t.release()
    assert t.engineer_email is None
    assert t.accepted is False


def test_change_status_touches_updated_at():
    t = make_ticket()
    before = t.updated_at
    t.change_status(TicketStatus.COMPLETED)
    assert t.status == TicketStatus.COMPLETED
    assert t.updated_at >= before


def test_engineer_label():
    assert make_ticket().engineer_label() == UNASSIGNED_LABEL == "Not Assigned"
    assert make_ticket(engineer_email="e@x.com").engineer_label() == "e@x.com"
