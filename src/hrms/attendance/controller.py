from __future__ import annotations

from flask import Flask, request

from ..backend.base import HRBackend
from ..common.web import date_field, json_response, request_data
from ..container import Container
from ..core.enums import AttendanceAction, Role
from ..core.exceptions import ValidationError
from ..users.guards import current_user, guarded
from .actions import AttendanceActions
from .network import client_ip


def register(app: Flask, container: Container, backend: HRBackend) -> None:
    svc = container.attendance_service
    # One guard per signed-in user: in-flight lock and location block.
    desks: dict[str, AttendanceActions] = {}

    def _target_employee(data: dict) -> str:
        user = current_user()
        if user.role == Role.EMPLOYEE:
            if not user.employee_id:
                raise ValidationError("Your account is not linked to an employee profile")
            return user.employee_id
        employee_id = str(data.get("employeeId") or user.employee_id or "").strip()
        if not employee_id:
            raise ValidationError("Employee is required")
        return employee_id

    @app.route("/attendance", methods=["GET"], endpoint="attendance")
    @guarded()
    def attendance():
        user = current_user()
        if user.role == Role.EMPLOYEE:
            if not user.employee_id:
                return json_response({"records": [], "today": None, "totalHours": 0.0})
            records = sorted(svc.by_employee(user.employee_id), key=lambda r: r.date, reverse=True)
            return json_response(
                {
                    "records": records,
                    "today": svc.for_employee_on(user.employee_id, svc.current_date()),
                    "totalHours": svc.total_hours(user.employee_id),
                }
            )

        day = date_field(request.args, "date", "Date", required=False) or svc.current_date()
        return json_response({"records": svc.by_date(day), "summary": svc.day_summary(day)})

    def _actions_for(user_id: str) -> AttendanceActions:
        actions = desks.setdefault(user_id, AttendanceActions(backend))
        actions.address_changed(client_ip(request.headers, request.remote_addr))
        return actions

    def _run(action: AttendanceAction):
        employee_id = _target_employee(request_data())
        actions = _actions_for(current_user().id)
        if action == AttendanceAction.CHECKIN:
            result = actions.check_in(employee_id)
        else:
            result = actions.check_out(employee_id)
        return json_response(result.data, message=result.message)

    @app.route("/attendance/check-in", methods=["POST"], endpoint="check_in")
    @guarded()
    def check_in():
        return _run(AttendanceAction.CHECKIN)

    @app.route("/attendance/check-out", methods=["POST"], endpoint="check_out")
    @guarded()
    def check_out():
        return _run(AttendanceAction.CHECKOUT)

    @app.route("/attendance/ip-whitelist", methods=["GET", "POST"], endpoint="ip_whitelist")
    @guarded([Role.ADMIN])
    def ip_whitelist():
        policy = container.network_policy
        if request.method == "POST":
            data = request_data()
            entry = policy.add(data.get("ipAddress", ""), data.get("description", ""))
            return json_response(entry, message="Address added", status=201)
        return json_response(policy.entries())
