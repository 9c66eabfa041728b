from __future__ import annotations

from flask import Flask

from ..common.web import date_field, json_response, request_data
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..users.guards import current_user, guarded


def register(app: Flask, container: Container) -> None:
    svc = container.leave_service

    @app.route("/leave", methods=["GET"], endpoint="leave")
    @guarded()
    def leave():
        user = current_user()
        if user.role == Role.EMPLOYEE:
            rows = svc.by_employee(user.employee_id) if user.employee_id else []
        else:
            rows = svc.all()
        return json_response({"requests": rows, "counts": svc.status_counts()})

    @app.route("/new-leave-request", methods=["POST"], endpoint="new_leave_request")
    @guarded()
    def new_leave_request():
        user = current_user()
        data = request_data()
        if user.role == Role.EMPLOYEE:
            employee_id = user.employee_id
        else:
            employee_id = data.get("employeeId") or user.employee_id
        if not employee_id:
            raise ValidationError("Employee is required")

        req = svc.submit(
            employee_id=employee_id,
            leave_type=data.get("type", ""),
            start_date=date_field(data, "startDate", "Start date"),
            end_date=date_field(data, "endDate", "End date"),
            reason=data.get("reason", ""),
        )
        return json_response(req, message="Your leave request has been submitted for approval.", status=201)

    @app.route("/leave/<request_id>/approve", methods=["POST"], endpoint="approve_leave")
    @guarded([Role.ADMIN, Role.HR])
    def approve_leave(request_id: str):
        user = current_user()
        req = svc.approve(current_role=user.role, request_id=request_id, approved_by=user.name)
        return json_response(req, message="The leave request has been approved.")

    @app.route("/leave/<request_id>/reject", methods=["POST"], endpoint="reject_leave")
    @guarded([Role.ADMIN, Role.HR])
    def reject_leave(request_id: str):
        req = svc.reject(current_role=current_user().role, request_id=request_id)
        return json_response(req, message="The leave request has been rejected.")
