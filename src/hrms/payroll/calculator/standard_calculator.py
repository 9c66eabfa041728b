from __future__ import annotations

from decimal import Decimal

from ...common.datetime_utils import round_half_up
from ...core.constants import ALLOWANCE_RATE, DEDUCTION_RATE
from .base import PayrollCalculator, SalaryBreakdown


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: +10% allowances, -15% deductions, each rounded half up."""

    def __init__(self, allowance_rate: str = ALLOWANCE_RATE, deduction_rate: str = DEDUCTION_RATE):
        self._allowance_rate = Decimal(allowance_rate)
        self._deduction_rate = Decimal(deduction_rate)

    def breakdown(self, basic_salary: float) -> SalaryBreakdown:
        basic = Decimal(str(basic_salary))
        allowances = round_half_up(basic * self._allowance_rate)
        deductions = round_half_up(basic * self._deduction_rate)
        net = basic + allowances - deductions
        return SalaryBreakdown(
            basic_salary=float(basic),
            allowances=float(allowances),
            deductions=float(deductions),
            net_salary=float(net),
        )
