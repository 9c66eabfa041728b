from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.codec import to_json
from ..common.web import json_response, request_data
from ..container import Container
from ..core.enums import PayrollStatus, Role
from ..core.exceptions import ValidationError
from ..users.guards import current_user, guarded
from .model import PayrollRunOutcome


def register(app: Flask, container: Container) -> None:
    svc = container.payroll_service

    @app.route("/payroll", methods=["GET"], endpoint="payroll")
    @guarded([Role.ADMIN, Role.HR])
    def payroll():
        month = request.args.get("month")
        year = request.args.get("year")
        if month and year:
            if not year.isdigit():
                raise ValidationError("Year must be a number")
            rows = svc.for_period(month, int(year))
        else:
            rows = svc.all()
        return json_response(
            {
                "records": rows,
                "currentMonth": svc.current_month(),
                "totalNet": svc.total_net(rows),
                "totalPaid": svc.total_paid(),
            }
        )

    @app.route("/payroll/generate", methods=["POST"], endpoint="generate_payroll")
    @guarded([Role.ADMIN, Role.HR])
    def generate_payroll():
        data = request_data()
        result = svc.generate(
            current_role=current_user().role,
            month=data.get("month") or None,
            year=data.get("year") or None,
        )
        status = 201 if result.outcome == PayrollRunOutcome.GENERATED else 200
        body = {
            "outcome": result.outcome.value,
            "message": result.message,
            "data": to_json(list(result.records)),
        }
        return jsonify(body), status

    @app.route("/payroll/<record_id>/status", methods=["POST"], endpoint="payroll_status")
    @guarded([Role.ADMIN])
    def payroll_status(record_id: str):
        try:
            status = PayrollStatus(request_data().get("status", ""))
        except ValueError:
            raise ValidationError("Status is not valid")
        record = svc.advance_status(current_role=current_user().role, record_id=record_id, status=status)
        return json_response(record, message=f"Payroll marked {status.value}")
