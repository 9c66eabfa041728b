from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from hrms.config import testing as testing_settings
from hrms.container import build_container
from hrms.core.enums import AccountStatus, Role
from hrms.data.context import DataContext
from hrms.main import create_app
from hrms.storage.store import InMemoryStore
from hrms.users.model import SessionUser

# Tuesday, 5 minutes after office start (09:00, 15 min grace).
FIXED_NOW = datetime(2026, 3, 10, 9, 5, 0)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, **parts) -> None:
        self.now = self.now.replace(**parts)

    def advance(self, **delta) -> None:
        self.now = self.now + timedelta(**delta)


def session_user(role: Role, *, user_id: str = "u1", employee_id=None, status=AccountStatus.ACTIVE) -> SessionUser:
    return SessionUser(
        id=user_id,
        email=f"{role.value}@example.com",
        name=f"{role.value.title()} Tester",
        role=role,
        status=status,
        employee_id=employee_id,
    )


@pytest.fixture
def clock():
    return FakeClock(FIXED_NOW)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def ctx(store, clock):
    context = DataContext(store, clock=clock)
    context.load()
    return context


@pytest.fixture
def container(store, clock):
    return build_container(testing_settings, store=store, clock=clock)


@pytest.fixture
def app(store, clock):
    return create_app("hrms.config.testing", store=store, clock=clock)


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, email: str, password: str):
    return client.post("/login", data={"email": email, "password": password})
