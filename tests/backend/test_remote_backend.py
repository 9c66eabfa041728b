from __future__ import annotations

import httpx
import pytest

from hrms.backend.base import RegistrationForm
from hrms.backend.remote import RealtimeSubscription, RemoteBackend, RemoteCache
from hrms.core.enums import ApprovalAction, AttendanceAction
from hrms.core.exceptions import RemoteError, UnauthorizedLocationError

OFFICE_IP = "203.0.113.10"


def _remote(app, remote_addr: str = OFFICE_IP) -> RemoteBackend:
    transport = httpx.WSGITransport(app=app, remote_addr=remote_addr)
    return RemoteBackend(client=httpx.Client(transport=transport, base_url="http://testserver"))


@pytest.fixture
def admin(app):
    backend = _remote(app)
    backend.sign_in("admin@hrms.com", "admin123")
    yield backend
    backend.close()


def test_sign_in_returns_account_and_token(admin):
    assert admin.user["role"] == "admin"
    assert admin.token


def test_bad_credentials_surface_as_401(app):
    backend = _remote(app)
    with pytest.raises(RemoteError) as exc:
        backend.sign_in("admin@hrms.com", "wrong")
    assert exc.value.status == 401
    assert backend.token is None


def test_rows_are_scoped_to_the_caller(admin, app):
    assert len(admin.list_rows("employees")) == 3

    staff_only = _remote(app)
    staff_only.sign_in("employee@hrms.com", "emp123")
    assert [r["id"] for r in staff_only.list_rows("employees")] == ["1"]
    with pytest.raises(RemoteError) as exc:
        staff_only.list_rows("receipt_payments")
    assert exc.value.status == 403


def test_calls_without_token_are_401(app):
    with pytest.raises(RemoteError) as exc:
        _remote(app).list_rows("employees")
    assert exc.value.status == 401


def test_sign_out_revokes_token(admin):
    token = admin.token
    admin.sign_out()
    assert admin.token is None

    stale = RemoteBackend(client=admin._client, token=token)
    with pytest.raises(RemoteError) as exc:
        stale.list_rows("employees")
    assert exc.value.status == 401


def test_attendance_off_network_is_unauthorized_location(app):
    outside = _remote(app, remote_addr="127.0.0.1")
    outside.sign_in("employee@hrms.com", "emp123")

    with pytest.raises(UnauthorizedLocationError) as exc:
        outside.attendance_action(AttendanceAction.CHECKIN, "1")
    assert exc.value.ip == "127.0.0.1"
    assert exc.value.status == 403


def test_signup_register_and_check_in(app, admin):
    newcomer = _remote(app)
    user = newcomer.sign_up("Grace Hopper", "grace@company.com", "cobol1")
    assert user["status"] == "pending"

    registered = newcomer.register_employee(
        RegistrationForm(
            name="Grace Hopper",
            email="grace@company.com",
            phone="+1-555-0150",
            department="Engineering",
            position="Compiler Engineer",
        )
    )
    employee_id = registered.data["id"]

    approved = admin.approve_employee(employee_id, ApprovalAction.APPROVE, 61000)
    assert approved.data["status"] == "active"

    result = admin.attendance_action(AttendanceAction.CHECKIN, employee_id)
    assert result.message == "Checked in at 09:05:00 AM"


def test_realtime_subscription_reloads_changed_tables(admin):
    cache = RemoteCache(admin)
    sub = RealtimeSubscription(admin, cache, ["employees", "leaves"])
    sub.prime()
    assert len(cache.rows("leaves")) == 3
    assert sub.poll() == []

    admin.approve_employee("1", ApprovalAction.APPROVE, 80000)

    assert sub.poll() == ["employees"]
    assert next(r for r in cache.rows("employees") if r["id"] == "1")["salary"] == 80000.0
    assert sub.poll() == []


def test_cors_headers_on_preflight(client):
    resp = client.options("/functions/v1/attendance-action")
    assert resp.status_code == 200
    assert resp.headers["Access-Control-Allow-Origin"] == "*"
    assert "authorization" in resp.headers["Access-Control-Allow-Headers"]
