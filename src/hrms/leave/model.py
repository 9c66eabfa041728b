from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import LeaveType, RequestStatus


@dataclass(frozen=True)
class LeaveRequest:
    id: str
    employee_id: str
    type: LeaveType
    start_date: date
    end_date: date
    reason: str
    status: RequestStatus
    applied_date: date
    approved_by: Optional[str] = None
    approved_date: Optional[date] = None

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1
