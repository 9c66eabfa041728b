from __future__ import annotations

from datetime import datetime, time
from typing import Optional

from ...core.constants import HALF_DAY_HOURS
from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class HalfDayStrategy(AttendanceStrategy):
    """Short day: closed with fewer than HALF_DAY_HOURS worked."""

    def decide_checkin(self, *, now: datetime, office_start: Optional[time], grace_minutes: int) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_checkout(self, *, total_hours: float, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.HALF_DAY,
            note=f"Worked {total_hours:g}h (< {HALF_DAY_HOURS}h)",
        )
