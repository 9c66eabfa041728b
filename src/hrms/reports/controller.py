from __future__ import annotations

from flask import Flask, Response, jsonify, request

from ..common.codec import to_json
from ..container import Container
from ..core.enums import Role
from ..users.guards import current_user, guarded


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    @app.route("/dashboard", endpoint="dashboard")
    @guarded()
    def dashboard():
        return jsonify({"user": to_json(current_user()), "stats": reports.dashboard_stats()})

    @app.route("/reports-analytics", endpoint="reports_analytics")
    @guarded([Role.ADMIN, Role.HR])
    def reports_analytics():
        department = request.args.get("department") or None
        return jsonify(
            {
                "departments": reports.departments(),
                "summary": reports.summary(department),
                "departmentPerformance": reports.department_performance(),
                "attendanceTrend": reports.attendance_trend(),
                "leaveDistribution": reports.leave_distribution(),
                "payrollByDepartment": reports.payroll_by_department(),
            }
        )

    @app.route("/reports-analytics/export/<name>", endpoint="export_report")
    @guarded([Role.ADMIN, Role.HR])
    def export_report(name: str):
        filename, csv_text = reports.export_csv(name)
        app.logger.info("report %s exported by %s", name, current_user().email)
        return Response(
            csv_text,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
