from __future__ import annotations

import pytest

from conftest import session_user
from hrms.backend.base import RegistrationForm
from hrms.core.enums import AccountStatus, EmployeeStatus, Role
from hrms.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    UnauthorizedLocationError,
    ValidationError,
)

OFFICE_IP = "203.0.113.10"

ADMIN = session_user(Role.ADMIN, user_id="1")
EMPLOYEE = session_user(Role.EMPLOYEE, user_id="3", employee_id="1")


@pytest.fixture
def functions(container):
    return container.functions


def _form(**overrides) -> RegistrationForm:
    fields = dict(
        name="Grace Hopper",
        email="grace@company.com",
        phone="+1-555-0199",
        department="Engineering",
        position="Compiler Engineer",
        emergency_contact_name="Vincent",
    )
    fields.update(overrides)
    return RegistrationForm(**fields)


def test_attendance_refused_off_network_before_anything_else(functions):
    with pytest.raises(UnauthorizedLocationError) as exc:
        functions.attendance_action(caller=None, ip="8.8.8.8", action="checkin", employee_id="1")
    assert exc.value.ip == "8.8.8.8"


def test_attendance_requires_a_caller(functions):
    with pytest.raises(AuthenticationError, match="No authorization header"):
        functions.attendance_action(caller=None, ip=OFFICE_IP, action="checkin", employee_id="1")


def test_employee_acts_only_for_themselves(functions):
    with pytest.raises(AuthorizationError):
        functions.attendance_action(caller=EMPLOYEE, ip=OFFICE_IP, action="checkin", employee_id="2")


def test_pending_caller_is_refused(functions):
    pending = session_user(Role.EMPLOYEE, employee_id="1", status=AccountStatus.PENDING)
    with pytest.raises(AuthorizationError):
        functions.attendance_action(caller=pending, ip=OFFICE_IP, action="checkin", employee_id="1")


def test_unknown_employee_and_action(functions):
    with pytest.raises(NotFoundError):
        functions.attendance_action(caller=ADMIN, ip=OFFICE_IP, action="checkin", employee_id="404")
    with pytest.raises(ValidationError, match="Invalid action"):
        functions.attendance_action(caller=ADMIN, ip=OFFICE_IP, action="lunch", employee_id="1")


def test_check_in_and_out_through_function(functions, container, clock):
    emp = container.registration_service.register(session_user(Role.HR, user_id="2"), _form())
    container.employee_service.set_status(emp.id, EmployeeStatus.ACTIVE)

    result = functions.attendance_action(caller=ADMIN, ip=OFFICE_IP, action="checkin", employee_id=emp.id)
    assert result.message == "Checked in at 09:05:00 AM"
    assert result.data["status"] == "present"

    clock.set(hour=17, minute=35)
    result = functions.attendance_action(caller=ADMIN, ip=OFFICE_IP, action="checkout", employee_id=emp.id)
    assert result.message == "Checked out at 05:35:00 PM. Total hours: 8.50"
    assert result.data["overtime"] == 0.5


def test_seeded_employee_already_checked_in_today(functions):
    with pytest.raises(ValidationError, match="Already checked in today"):
        functions.attendance_action(caller=EMPLOYEE, ip=OFFICE_IP, action="checkin", employee_id="1")


def test_registration_and_approval_flow(functions, container):
    user = container.auth_service.sign_up(name="Grace Hopper", email="grace@company.com", password="cobol1")
    caller = container.auth_service.authenticate("grace@company.com", "cobol1")

    registered = functions.employee_register(caller=caller, form=_form())
    employee_id = registered.data["id"]
    assert registered.data["status"] == "pending"
    assert registered.data["salary"] == 0.0
    assert container.auth_service.get_user(user.id).employee_id == employee_id

    with pytest.raises(ValidationError):
        functions.employee_register(caller=caller, form=_form())

    with pytest.raises(AuthorizationError, match="Only admins and HR can approve employees"):
        functions.employee_approval(caller=EMPLOYEE, employee_id=employee_id, action="approve")

    approved = functions.employee_approval(caller=ADMIN, employee_id=employee_id, action="approve", salary="62000")
    assert approved.data["status"] == "active"
    assert approved.data["salary"] == 62000.0
    assert container.auth_service.get_user(user.id).status == AccountStatus.ACTIVE


def test_rejection_marks_account_rejected(functions, container):
    user = container.auth_service.sign_up(name="Temp", email="temp@company.com", password="temp123")
    caller = container.auth_service.authenticate("temp@company.com", "temp123")
    employee_id = functions.employee_register(caller=caller, form=_form(email="temp@company.com")).data["id"]

    functions.employee_approval(caller=ADMIN, employee_id=employee_id, action="reject")

    assert container.employee_service.require(employee_id).status == EmployeeStatus.REJECTED
    assert container.auth_service.get_user(user.id).status == AccountStatus.REJECTED


def test_approval_input_validation(functions):
    with pytest.raises(ValidationError, match="Invalid action"):
        functions.employee_approval(caller=ADMIN, employee_id="1", action="maybe")
    with pytest.raises(ValidationError):
        functions.employee_approval(caller=ADMIN, employee_id="1", action="approve", salary="-1")
    for salary in ("nan", "inf", "1e400"):
        with pytest.raises(ValidationError):
            functions.employee_approval(caller=ADMIN, employee_id="1", action="approve", salary=salary)
    with pytest.raises(NotFoundError):
        functions.employee_approval(caller=ADMIN, employee_id="404", action="approve")


def test_registration_requires_caller(functions):
    with pytest.raises(AuthenticationError):
        functions.employee_register(caller=None, form=_form())


def test_row_visibility(functions):
    assert len(functions.visible_rows(ADMIN, "employees")) == 3
    assert [r["id"] for r in functions.visible_rows(EMPLOYEE, "employees")] == ["1"]
    assert {r["employeeId"] for r in functions.visible_rows(EMPLOYEE, "attendance")} == {"1"}
    assert [r["id"] for r in functions.visible_rows(EMPLOYEE, "leaves")] == ["1"]

    with pytest.raises(AuthorizationError):
        functions.visible_rows(EMPLOYEE, "receipt_payments")
    with pytest.raises(NotFoundError):
        functions.visible_rows(ADMIN, "salaries")
    with pytest.raises(AuthenticationError):
        functions.visible_rows(None, "employees")


def test_linked_account_cannot_register_again(functions, container):
    caller = container.auth_service.authenticate("employee@hrms.com", "emp123")

    with pytest.raises(ValidationError, match="already registered"):
        functions.employee_register(caller=caller, form=_form(email="employee@hrms.com"))

    user = container.auth_service.get_user(caller.id)
    assert (user.status, user.employee_id) == (AccountStatus.ACTIVE, "1")
    assert len(container.employee_service.pending()) == 0
