from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

from ..core.constants import HALF_DAY_HOURS
from ..core.enums import AttendanceStatus
from .strategies.base import AttendanceStrategy
from .strategies.half_day_strategy import HalfDayStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, now: datetime, office_start: Optional[time], grace_minutes: int) -> AttendanceStrategy:
        if not office_start:
            return PresentStrategy()

        start = datetime.combine(now.date(), office_start)
        if now <= start + timedelta(minutes=grace_minutes):
            return PresentStrategy()
        return LateStrategy()

    def for_checkout(self, *, total_hours: float, current_status: AttendanceStatus) -> AttendanceStrategy:
        if current_status == AttendanceStatus.PRESENT and total_hours < HALF_DAY_HOURS:
            return HalfDayStrategy()
        return PresentStrategy()
