from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one day."""

    id: str
    employee_id: str
    date: date
    check_in: Optional[datetime]
    check_out: Optional[datetime]
    status: AttendanceStatus
    total_hours: float = 0.0
    overtime: float = 0.0

    @property
    def is_open(self) -> bool:
        return self.check_in is not None and self.check_out is None


@dataclass(frozen=True)
class DaySummary:
    day: date
    present: int
    absent: int
    late: int
    half_day: int
    total: int
