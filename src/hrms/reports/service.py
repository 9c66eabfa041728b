"""Analytics over the live collections.

Every figure is computed from the data context on each call, so dashboards
always reflect the latest write. Frames are built with explicit columns so an
empty collection yields zeros instead of a KeyError.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable, Optional

import pandas as pd

from ..common.codec import to_json
from ..common.datetime_utils import month_name, now_local, round_2
from ..core.constants import DEFAULT_TREND_DAYS
from ..core.enums import AttendanceStatus, EmployeeStatus, RequestStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..data.context import DataContext

EMPLOYEE_COLUMNS = ["id", "name", "email", "department", "position", "salary", "status"]
ATTENDANCE_COLUMNS = ["id", "employeeId", "date", "checkIn", "checkOut", "status", "totalHours", "overtime"]
LEAVE_COLUMNS = ["id", "employeeId", "type", "startDate", "endDate", "status", "appliedDate", "approvedBy"]
PAYROLL_COLUMNS = ["id", "employeeId", "month", "year", "basicSalary", "allowances", "deductions", "netSalary", "status"]
REVIEW_COLUMNS = ["id", "employeeId", "rating", "reviewDate"]


def frame(records, columns: list[str]) -> pd.DataFrame:
    return pd.DataFrame([to_json(r) for r in records], columns=columns)


class ReportService:
    def __init__(self, ctx: DataContext, *, clock: Callable[[], datetime] = now_local):
        self._ctx = ctx
        self._clock = clock

    # Frames

    def _employees(self) -> pd.DataFrame:
        return frame(self._ctx.employees.all(), EMPLOYEE_COLUMNS)

    def _attendance(self) -> pd.DataFrame:
        return frame(self._ctx.attendance.all(), ATTENDANCE_COLUMNS)

    def _leaves(self) -> pd.DataFrame:
        return frame(self._ctx.leaves.all(), LEAVE_COLUMNS)

    def _payroll(self) -> pd.DataFrame:
        return frame(self._ctx.payroll.all(), PAYROLL_COLUMNS)

    def _reviews(self) -> pd.DataFrame:
        return frame(self._ctx.performance_reviews.all(), REVIEW_COLUMNS)

    def departments(self) -> list[str]:
        return [str(d) for d in pd.unique(self._employees()["department"]) if d]

    # Reports

    def department_performance(self) -> list[dict]:
        emp = self._employees()
        merged = self._reviews().merge(emp[["id", "department"]], left_on="employeeId", right_on="id", how="inner")
        ratings = merged.groupby("department")["rating"].mean().to_dict()
        headcount = emp.groupby("department", sort=False).size().to_dict()
        return [
            {
                "name": dept,
                "rating": round_2(float(ratings.get(dept, 0.0))),
                "employees": int(headcount.get(dept, 0)),
            }
            for dept in self.departments()
        ]

    def attendance_trend(self, days: int = DEFAULT_TREND_DAYS) -> list[dict]:
        today = self._clock().date()
        att = self._attendance()
        counts = att.groupby(["date", "status"]).size().to_dict()
        out = []
        for i in range(days):
            day = today - timedelta(days=days - 1 - i)
            key = day.isoformat()
            out.append(
                {
                    "date": f"{day.strftime('%b')} {day.day}",
                    "present": int(counts.get((key, AttendanceStatus.PRESENT.value), 0)),
                    "absent": int(counts.get((key, AttendanceStatus.ABSENT.value), 0)),
                    "late": int(counts.get((key, AttendanceStatus.LATE.value), 0)),
                    "halfDay": int(counts.get((key, AttendanceStatus.HALF_DAY.value), 0)),
                }
            )
        return out

    def leave_distribution(self) -> list[dict]:
        counts = self._leaves()["status"].value_counts().to_dict()
        return [
            {"name": status.value.title(), "value": int(counts.get(status.value, 0))}
            for status in (RequestStatus.APPROVED, RequestStatus.PENDING, RequestStatus.REJECTED)
        ]

    def payroll_by_department(self) -> list[dict]:
        emp = self._employees()
        merged = self._payroll().merge(emp[["id", "department"]], left_on="employeeId", right_on="id", how="inner")
        totals = merged.groupby("department")["netSalary"].sum().to_dict()
        return [{"name": dept, "total": round_2(float(totals.get(dept, 0.0)))} for dept in self.departments()]

    def summary(self, department: Optional[str] = None) -> dict:
        """Headline numbers; the employee counts follow the department filter."""
        emp = self._employees()
        if department and department != "all":
            emp = emp[emp["department"] == department]
        pay = self._payroll()
        total_payroll = float(pay["netSalary"].sum()) if len(pay) else 0.0
        reviews = self._ctx.performance_reviews.all()
        goals = [g.completion_percentage for r in reviews for g in r.goals]
        return {
            "totalEmployees": int(len(emp)),
            "activeEmployees": int((emp["status"] == EmployeeStatus.ACTIVE.value).sum()),
            "averageRating": round_2(sum(r.rating for r in reviews) / len(reviews)) if reviews else 0.0,
            "goalCompletion": round_2(sum(goals) / len(goals)) if goals else 0.0,
            "totalPayroll": round_2(total_payroll),
            "averageSalary": round_2(total_payroll / len(pay)) if len(pay) else 0.0,
        }

    def dashboard_stats(self) -> dict:
        now = self._clock()
        emp = self._employees()
        att = self._attendance()
        today = att[att["date"] == now.date().isoformat()]
        attended = int((today["status"] != AttendanceStatus.ABSENT.value).sum())
        pay = self._payroll()
        month_pay = pay[(pay["month"] == month_name(now)) & (pay["year"] == now.year)]
        leaves = self._leaves()
        return {
            "totalEmployees": int(len(emp)),
            "activeEmployees": int((emp["status"] == EmployeeStatus.ACTIVE.value).sum()),
            "presentToday": attended,
            "attendanceRate": round_2(attended * 100 / len(today)) if len(today) else 0.0,
            "pendingLeaves": int((leaves["status"] == RequestStatus.PENDING.value).sum()),
            "monthlyPayroll": round_2(float(month_pay["netSalary"].sum())) if len(month_pay) else 0.0,
        }

    # Export

    def dataset(self, name: str) -> list[dict]:
        builders = {
            "department-performance": self.department_performance,
            "attendance-trend": self.attendance_trend,
            "leave-status": self.leave_distribution,
            "payroll-by-department": self.payroll_by_department,
            "employees": lambda: self._employees().to_dict("records"),
            "attendance": lambda: self._attendance().to_dict("records"),
            "payroll": lambda: self._payroll().to_dict("records"),
        }
        if name not in builders:
            raise NotFoundError(f"Unknown report: {name}")
        return builders[name]()

    def export_csv(self, name: str, rows: Optional[list[dict]] = None) -> tuple[str, str]:
        """Return (filename, csv text). An empty dataset is refused."""
        data = self.dataset(name) if rows is None else rows
        if not data:
            raise ValidationError("No data available to export")
        filename = f"{name}_{self._today().isoformat()}.csv"
        return filename, pd.DataFrame(data).to_csv(index=False)

    def _today(self) -> date:
        return self._clock().date()
