"""Pytest configuration and shared fixtures."""

import pytest
from fakes import FakeEngineerRepo, FakeNotifier, FakeTicketRepo, FakeUserRepo

from fieldservice.application.notifications import NotificationDispatcher
from fieldservice.domain.entities.user import User


@pytest.fixture
def user():
    return User(email="user@example.com", name="Asha", pincode="560001")


@pytest.fixture
def user_repo(user):
    return FakeUserRepo([user])


@pytest.fixture
def notifier_sink():
    return FakeNotifier()


@pytest.fixture
def notifier(notifier_sink):
    return NotificationDispatcher(notifier_sink, timeout_seconds=1.0)


@pytest.fixture
def ticket_repo():
    return FakeTicketRepo()


@pytest.fixture
def engineer_repo():
    return FakeEngineerRepo()
