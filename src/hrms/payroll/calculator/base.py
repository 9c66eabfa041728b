from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class SalaryBreakdown:
    basic_salary: float
    allowances: float
    deductions: float
    net_salary: float


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def breakdown(self, basic_salary: float) -> SalaryBreakdown:
        raise NotImplementedError
