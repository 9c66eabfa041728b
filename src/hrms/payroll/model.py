from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..core.enums import PayrollStatus


@dataclass(frozen=True)
class PayrollRecord:
    id: str
    employee_id: str
    month: str
    year: int
    basic_salary: float
    allowances: float
    deductions: float
    net_salary: float
    status: PayrollStatus


class PayrollRunOutcome(str, Enum):
    GENERATED = "generated"
    ALREADY_GENERATED = "already_generated"
    NO_ACTIVE_EMPLOYEES = "no_active_employees"


@dataclass(frozen=True)
class PayrollRunResult:
    month: str
    year: int
    outcome: PayrollRunOutcome
    records: tuple[PayrollRecord, ...] = ()

    @property
    def message(self) -> str:
        period = f"{self.month} {self.year}"
        if self.outcome == PayrollRunOutcome.ALREADY_GENERATED:
            return f"Payroll for {period} has already been generated."
        if self.outcome == PayrollRunOutcome.NO_ACTIVE_EMPLOYEES:
            return "There are no active employees to process payroll for."
        n = len(self.records)
        return f"Payroll for {n} employee{'s' if n != 1 else ''} has been processed for {period}."
