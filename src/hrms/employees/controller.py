from __future__ import annotations

from flask import Flask, request

from ..backend.base import HRBackend, RegistrationForm
from ..common.validators import require_number
from ..common.web import date_field, json_response, request_data
from ..container import Container
from ..core.enums import ApprovalAction, EmployeeStatus, Role
from ..core.exceptions import ValidationError
from ..users.guards import current_user, guarded
from .model import EmergencyContact
from .service import EmployeeForm


def _employee_form(data: dict) -> EmployeeForm:
    try:
        status = EmployeeStatus(data.get("status") or EmployeeStatus.ACTIVE.value)
    except ValueError:
        raise ValidationError("Status is not valid")
    contact = data.get("emergencyContact") or {}
    return EmployeeForm(
        name=data.get("name", ""),
        email=data.get("email", ""),
        phone=data.get("phone", ""),
        department=data.get("department", ""),
        position=data.get("position", ""),
        salary=data.get("salary"),
        date_of_joining=date_field(data, "dateOfJoining", "Date of joining", required=False),
        address=data.get("address", ""),
        emergency_contact=EmergencyContact(
            name=contact.get("name", "") or data.get("emergencyContactName", ""),
            phone=contact.get("phone", "") or data.get("emergencyContactPhone", ""),
            relationship=contact.get("relationship", "") or data.get("emergencyContactRelationship", ""),
        ),
        status=status,
    )


def register(app: Flask, container: Container, backend: HRBackend) -> None:
    svc = container.employee_service

    @app.route("/employees", methods=["GET"], endpoint="employees")
    @guarded([Role.ADMIN, Role.HR])
    def employees():
        rows = svc.search(request.args.get("q", ""), department=request.args.get("department") or None)
        return json_response({"employees": rows, "departments": svc.departments()})

    @app.route("/employees", methods=["POST"], endpoint="add_employee")
    @guarded([Role.ADMIN, Role.HR])
    def add_employee():
        emp = svc.add_employee(current_role=current_user().role, form=_employee_form(request_data()))
        return json_response(emp, message="Employee added", status=201)

    @app.route("/employees/pending", endpoint="pending_employees")
    @guarded([Role.ADMIN, Role.HR])
    def pending_employees():
        return json_response(svc.pending())

    @app.route("/employees/<employee_id>", methods=["GET"], endpoint="employee_detail")
    @guarded([Role.ADMIN, Role.HR])
    def employee_detail(employee_id: str):
        return json_response(svc.require(employee_id))

    @app.route("/employees/<employee_id>/edit", methods=["POST", "PUT"], endpoint="edit_employee")
    @guarded([Role.ADMIN, Role.HR])
    def edit_employee(employee_id: str):
        emp = svc.update_employee(
            current_role=current_user().role,
            employee_id=employee_id,
            form=_employee_form(request_data()),
        )
        return json_response(emp, message="Employee updated")

    @app.route("/employees/<employee_id>/delete", methods=["POST", "DELETE"], endpoint="delete_employee")
    @guarded([Role.ADMIN])
    def delete_employee(employee_id: str):
        svc.delete_employee(current_role=current_user().role, employee_id=employee_id)
        return json_response(message="Employee deleted")

    @app.route("/employees/<employee_id>/approval", methods=["POST"], endpoint="employee_approval")
    @guarded([Role.ADMIN, Role.HR])
    def employee_approval(employee_id: str):
        data = request_data()
        try:
            action = ApprovalAction(data.get("action", ""))
        except ValueError:
            raise ValidationError("Invalid action")
        salary = data.get("salary")
        amount = require_number(salary, "Salary", minimum=0) if salary not in (None, "") else None
        result = backend.approve_employee(employee_id, action, amount)
        return json_response(result.data, message=result.message)

    @app.route("/employee-register", methods=["GET", "POST"], endpoint="employee_register")
    @guarded(require_active=False)
    def employee_register():
        if request.method == "GET":
            existing = svc.by_user(current_user().id)
            return json_response(existing, message="Complete your employee profile")

        data = request_data()
        result = backend.register_employee(RegistrationForm.from_payload(data))
        return json_response(result.data, message=result.message, status=201)
