from __future__ import annotations

from datetime import date

import pytest

from hrms.core.enums import EmployeeStatus, Role
from hrms.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from hrms.employees.model import EmergencyContact
from hrms.employees.service import EmployeeForm, EmployeeService


@pytest.fixture
def svc(ctx):
    return EmployeeService(ctx)


def _form(**overrides) -> EmployeeForm:
    fields = dict(
        name="Ada Lovelace",
        email="ADA@company.com",
        phone="+1-555-0199",
        department="Engineering",
        position="Analyst",
        salary="52000",
        date_of_joining=date(2026, 3, 1),
        emergency_contact=EmergencyContact("Charles", "+1-555-0100", "Friend"),
    )
    fields.update(overrides)
    return EmployeeForm(**fields)


def test_hr_adds_employee(svc):
    emp = svc.add_employee(current_role=Role.HR, form=_form())

    assert emp.email == "ada@company.com"
    assert emp.salary == 52000.0
    assert emp.status == EmployeeStatus.ACTIVE
    assert svc.require(emp.id) == emp
    assert len(svc.active()) == 4


def test_employee_role_cannot_add(svc):
    with pytest.raises(AuthorizationError):
        svc.add_employee(current_role=Role.EMPLOYEE, form=_form())


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": " "},
        {"email": "ada"},
        {"salary": "lots"},
        {"salary": -1},
        {"salary": "nan"},
        {"salary": "inf"},
        {"department": ""},
    ],
)
def test_form_validation(svc, overrides):
    with pytest.raises(ValidationError):
        svc.add_employee(current_role=Role.ADMIN, form=_form(**overrides))


def test_update_keeps_id_and_link(svc, ctx):
    updated = svc.update_employee(current_role=Role.HR, employee_id="2", form=_form(name="Sarah W."))

    assert updated.id == "2"
    assert updated.name == "Sarah W."
    assert ctx.employees.get("2").name == "Sarah W."


def test_only_admin_deletes(svc):
    with pytest.raises(AuthorizationError):
        svc.delete_employee(current_role=Role.HR, employee_id="2")

    svc.delete_employee(current_role=Role.ADMIN, employee_id="2")
    assert svc.get_by_id("2") is None
    with pytest.raises(NotFoundError):
        svc.delete_employee(current_role=Role.ADMIN, employee_id="2")


def test_search_and_filters(svc):
    assert [e.id for e in svc.search("sarah")] == ["2"]
    assert [e.id for e in svc.search("", department="Finance")] == ["3"]
    assert [e.id for e in svc.search("developer", department="Finance")] == []
    assert svc.departments() == ["Engineering", "Finance", "Marketing"]
    assert [e.id for e in svc.by_department("Engineering")] == ["1"]


def test_set_status_with_salary(svc):
    emp = svc.set_status("3", EmployeeStatus.INACTIVE, salary=60000)

    assert emp.status == EmployeeStatus.INACTIVE
    assert emp.salary == 60000.0
    assert [e.id for e in svc.by_status(EmployeeStatus.INACTIVE)] == ["3"]


@pytest.mark.parametrize("salary", ["nan", float("nan"), "inf", -1])
def test_set_status_rejects_unusable_salary(svc, salary):
    with pytest.raises(ValidationError):
        svc.set_status("3", EmployeeStatus.ACTIVE, salary=salary)
    assert svc.require("3").salary == 58000.0
