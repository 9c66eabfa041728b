from __future__ import annotations

from datetime import datetime, time
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in."""

    def decide_checkin(self, *, now: datetime, office_start: Optional[time], grace_minutes: int) -> StatusDecision:
        note = None
        if office_start:
            note = f"Checked in after {office_start.strftime('%H:%M')} (+{grace_minutes} min grace)"
        return StatusDecision(status=AttendanceStatus.LATE, note=note)

    def decide_checkout(self, *, total_hours: float, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)
