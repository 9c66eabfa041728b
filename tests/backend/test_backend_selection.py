from __future__ import annotations

from types import SimpleNamespace

import httpx
import pytest

import hrms.config.testing as testing_settings
from conftest import login
from hrms.backend.local import LocalBackend
from hrms.backend.remote import RemoteBackend
from hrms.container import build_backend
from hrms.main import create_app

OFFICE = {"X-Forwarded-For": "203.0.113.10"}


def _build(container, **settings):
    return build_backend(
        SimpleNamespace(**settings),
        container,
        caller=lambda: None,
        ip=lambda: "127.0.0.1",
        token=lambda: None,
    )


def test_local_backend_is_the_default(container):
    assert isinstance(_build(container), LocalBackend)
    assert isinstance(_build(container, BACKEND="local"), LocalBackend)


def test_remote_backend_from_settings(container):
    backend = _build(container, BACKEND="remote", REMOTE_URL="http://hr-functions.internal:8000")
    assert isinstance(backend, RemoteBackend)
    backend.close()


def test_remote_backend_needs_url(container):
    with pytest.raises(ValueError):
        _build(container, BACKEND="remote", REMOTE_URL="")


def test_unknown_backend_kind(container):
    with pytest.raises(ValueError):
        _build(container, BACKEND="carrier-pigeon")


@pytest.fixture
def front(monkeypatch, store, clock):
    """Pages app calling a separate functions app over HTTP; both share the store."""
    functions_app = create_app("hrms.config.testing", store=store, clock=clock)
    monkeypatch.setattr(testing_settings, "BACKEND", "remote")
    transport = httpx.WSGITransport(app=functions_app, remote_addr="10.0.0.2")
    client = httpx.Client(transport=transport, base_url="http://functions")
    yield create_app("hrms.config.testing", store=store, clock=clock, remote_client=client)
    client.close()


def test_attendance_goes_through_remote_functions(front):
    admin = front.test_client()
    login(admin, "admin@hrms.com", "admin123")
    employee_id = admin.post(
        "/employees",
        json={
            "name": "Ada Lovelace",
            "email": "ada@company.com",
            "phone": "+1-555-0199",
            "department": "Engineering",
            "position": "Analyst",
            "salary": 52000,
        },
    ).get_json()["data"]["id"]

    # The client address is forwarded, not the address of the pages app.
    refused = admin.post("/attendance/check-in", json={"employeeId": employee_id})
    assert refused.status_code == 403
    assert refused.get_json()["ip"] == "127.0.0.1"

    ok = admin.post("/attendance/check-in", json={"employeeId": employee_id}, headers=OFFICE)
    assert ok.status_code == 200
    assert ok.get_json()["message"] == "Checked in at 09:05:00 AM"

    today = admin.get("/attendance").get_json()["data"]["records"]
    assert employee_id in {r["employeeId"] for r in today}


def test_registration_and_approval_through_remote_functions(front):
    newcomer = front.test_client()
    newcomer.post("/signup", data={"name": "Grace Hopper", "email": "grace@company.com", "password": "cobol1"})
    registered = newcomer.post(
        "/employee-register",
        json={
            "name": "Grace Hopper",
            "email": "grace@company.com",
            "phone": "+1-555-0150",
            "department": "Engineering",
            "position": "Compiler Engineer",
        },
    )
    assert registered.status_code == 201
    employee_id = registered.get_json()["data"]["id"]

    admin = front.test_client()
    login(admin, "admin@hrms.com", "admin123")
    approved = admin.post(f"/employees/{employee_id}/approval", json={"action": "approve", "salary": 60000})
    assert approved.status_code == 200
    assert approved.get_json()["data"]["status"] == "active"

    assert newcomer.get("/dashboard").status_code == 200
