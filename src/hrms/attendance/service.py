from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime, time
from typing import Callable, Optional

from ..common.datetime_utils import hours_between, now_local, round_2
from ..core.constants import DEFAULT_LATE_GRACE_MINUTES, STANDARD_WORK_HOURS
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..data.context import DataContext
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, DaySummary

logger = logging.getLogger(__name__)


def record_id(employee_id: str, day: date) -> str:
    return f"{employee_id}-{day.isoformat()}"


class AttendanceService:
    def __init__(
        self,
        ctx: DataContext,
        *,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
        office_start: Optional[time] = None,
        grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
        clock: Callable[[], datetime] = now_local,
    ):
        self._ctx = ctx
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._office_start = office_start
        self._grace_minutes = int(grace_minutes)
        self._clock = clock

    # Queries

    def current_date(self) -> date:
        return self._clock().date()

    def all(self) -> list[AttendanceRecord]:
        return self._ctx.attendance.all()

    def by_employee(self, employee_id: str) -> list[AttendanceRecord]:
        return [a for a in self.all() if a.employee_id == employee_id]

    def by_date(self, day: date) -> list[AttendanceRecord]:
        return [a for a in self.all() if a.date == day]

    def today(self) -> list[AttendanceRecord]:
        return self.by_date(self.current_date())

    def for_employee_on(self, employee_id: str, day: date) -> Optional[AttendanceRecord]:
        for a in self.all():
            if a.employee_id == employee_id and a.date == day:
                return a
        return None

    def open_record(self, employee_id: str, day: Optional[date] = None) -> Optional[AttendanceRecord]:
        day = day or self.current_date()
        for a in self.all():
            if a.employee_id == employee_id and a.date == day and a.is_open:
                return a
        return None

    def day_summary(self, day: Optional[date] = None) -> DaySummary:
        day = day or self.current_date()
        records = self.by_date(day)
        counts = {s: 0 for s in AttendanceStatus}
        for r in records:
            counts[r.status] += 1
        return DaySummary(
            day=day,
            present=counts[AttendanceStatus.PRESENT],
            absent=counts[AttendanceStatus.ABSENT],
            late=counts[AttendanceStatus.LATE],
            half_day=counts[AttendanceStatus.HALF_DAY],
            total=len(records),
        )

    def total_hours(self, employee_id: str) -> float:
        return round_2(sum(a.total_hours for a in self.by_employee(employee_id)))

    def attendance_rate(self, day: Optional[date] = None) -> float:
        """Percentage of the day's records that count as attended (present/late/half-day)."""
        s = self.day_summary(day)
        if not s.total:
            return 0.0
        return round_2((s.total - s.absent) * 100 / s.total)

    # Actions

    def check_in(self, employee_id: str, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or self._clock()
        today = now.date()

        existing = self.for_employee_on(employee_id, today)
        if existing and existing.check_in is not None:
            raise ValidationError("Already checked in today")

        strategy = self._factory.for_checkin(now=now, office_start=self._office_start, grace_minutes=self._grace_minutes)
        decision = strategy.decide_checkin(now=now, office_start=self._office_start, grace_minutes=self._grace_minutes)

        record = AttendanceRecord(
            id=record_id(employee_id, today),
            employee_id=employee_id,
            date=today,
            check_in=now.replace(microsecond=0),
            check_out=None,
            status=decision.status,
        )
        if existing:
            # An "absent" placeholder for today is replaced by the real check-in.
            record = dataclasses.replace(record, id=existing.id)
            self._ctx.attendance.update(existing.id, record)
        else:
            self._ctx.attendance.add(record)
        logger.info("check-in employee=%s status=%s", employee_id, decision.status.value)
        return record

    def check_out(self, employee_id: str, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or self._clock()
        record = self.open_record(employee_id, now.date())
        if not record:
            raise ValidationError("No active check-in found for today")

        check_out = now.replace(microsecond=0)
        total = hours_between(record.check_in, check_out)
        overtime = round_2(max(0.0, total - STANDARD_WORK_HOURS))

        strategy = self._factory.for_checkout(total_hours=total, current_status=record.status)
        decision = strategy.decide_checkout(total_hours=total, current=record.status)

        updated = dataclasses.replace(
            record,
            check_out=check_out,
            total_hours=total,
            overtime=overtime,
            status=decision.status,
        )
        self._ctx.attendance.update(record.id, updated)
        logger.info("check-out employee=%s hours=%s overtime=%s", employee_id, total, overtime)
        return updated
