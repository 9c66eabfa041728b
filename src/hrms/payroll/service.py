from __future__ import annotations

import calendar
import dataclasses
import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import month_name, now_local, round_2
from ..core.enums import EmployeeStatus, PayrollStatus, Role
from ..core.exceptions import AuthorizationError, DuplicateActionError, NotFoundError, ValidationError
from ..data.context import DataContext
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollRecord, PayrollRunOutcome, PayrollRunResult

logger = logging.getLogger(__name__)

MONTH_NAMES = tuple(calendar.month_name)[1:]

_STATUS_ORDER = {
    PayrollStatus.DRAFT: 0,
    PayrollStatus.PROCESSED: 1,
    PayrollStatus.PAID: 2,
}


def payroll_id(employee_id: str, month: str, year: int) -> str:
    return f"{employee_id}-{month}-{year}"


class PayrollService:
    def __init__(
        self,
        ctx: DataContext,
        *,
        calculator: Optional[PayrollCalculator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._ctx = ctx
        self._calculator = calculator or StandardPayrollCalculator()
        self._clock = clock
        self._run_lock = threading.Lock()

    # Queries

    def all(self) -> list[PayrollRecord]:
        return self._ctx.payroll.all()

    def by_employee(self, employee_id: str) -> list[PayrollRecord]:
        return [p for p in self.all() if p.employee_id == employee_id]

    def by_status(self, status: PayrollStatus) -> list[PayrollRecord]:
        return [p for p in self.all() if p.status == status]

    def for_period(self, month: str, year: int) -> list[PayrollRecord]:
        return [p for p in self.all() if p.month == month and p.year == int(year)]

    def current_month(self) -> list[PayrollRecord]:
        now = self._clock()
        return self.for_period(month_name(now), now.year)

    def total_paid(self) -> float:
        return round_2(sum(p.net_salary for p in self.by_status(PayrollStatus.PAID)))

    def total_net(self, records: Optional[list[PayrollRecord]] = None) -> float:
        rows = self.all() if records is None else records
        return round_2(sum(p.net_salary for p in rows))

    # Batch

    def _resolve_period(self, month: Optional[str], year: Optional[int]) -> tuple[str, int]:
        now = self._clock()
        month = (month or month_name(now)).strip().title()
        if month not in MONTH_NAMES:
            raise ValidationError("Month is not valid")
        try:
            year = int(year) if year is not None else now.year
        except (TypeError, ValueError):
            raise ValidationError("Year must be a number")
        return month, year

    def generate(
        self,
        *,
        current_role: Role = Role.ADMIN,
        month: Optional[str] = None,
        year: Optional[int] = None,
    ) -> PayrollRunResult:
        """Create one `processed` record per active employee for the period.

        All-or-nothing per month: if any record already exists for the period
        nothing is written. The whole batch goes to the store in one write.
        """
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can generate payroll")

        month, year = self._resolve_period(month, year)
        if not self._run_lock.acquire(blocking=False):
            raise DuplicateActionError("Payroll generation is already running")
        try:
            if self.for_period(month, year):
                return PayrollRunResult(month, year, PayrollRunOutcome.ALREADY_GENERATED)

            active = [e for e in self._ctx.employees.all() if e.status == EmployeeStatus.ACTIVE]
            if not active:
                return PayrollRunResult(month, year, PayrollRunOutcome.NO_ACTIVE_EMPLOYEES)

            records = []
            for emp in active:
                b = self._calculator.breakdown(emp.salary)
                records.append(
                    PayrollRecord(
                        id=payroll_id(emp.id, month, year),
                        employee_id=emp.id,
                        month=month,
                        year=year,
                        basic_salary=b.basic_salary,
                        allowances=b.allowances,
                        deductions=b.deductions,
                        net_salary=b.net_salary,
                        status=PayrollStatus.PROCESSED,
                    )
                )
            self._ctx.payroll.add_many(records)
            logger.info("payroll generated for %s %s: %d record(s)", month, year, len(records))
            return PayrollRunResult(month, year, PayrollRunOutcome.GENERATED, tuple(records))
        finally:
            self._run_lock.release()

    def advance_status(self, *, current_role: Role, record_id: str, status: PayrollStatus) -> PayrollRecord:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can change payroll status")

        record = self._ctx.payroll.get(record_id)
        if not record:
            raise NotFoundError("Payroll record not found")
        if _STATUS_ORDER[status] <= _STATUS_ORDER[record.status]:
            raise ValidationError(f"Cannot move payroll from {record.status.value} to {status.value}")
        return self._ctx.payroll.update(record_id, dataclasses.replace(record, status=status))
