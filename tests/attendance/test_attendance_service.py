from __future__ import annotations

from datetime import datetime, time

import pytest

from hrms.attendance.model import AttendanceRecord
from hrms.attendance.service import AttendanceService
from hrms.core.enums import AttendanceStatus
from hrms.core.exceptions import ValidationError


@pytest.fixture
def svc(ctx, clock):
    return AttendanceService(ctx, office_start=time(9, 0), grace_minutes=15, clock=clock)


def test_check_in_within_grace_is_present(svc, clock):
    record = svc.check_in("9")

    assert record.id == "9-2026-03-10"
    assert record.status == AttendanceStatus.PRESENT
    assert record.check_in == clock.now
    assert record.is_open
    assert svc.open_record("9") == record


def test_check_in_after_grace_is_late(svc, clock):
    clock.set(hour=9, minute=40)

    assert svc.check_in("9").status == AttendanceStatus.LATE


def test_second_check_in_same_day_is_refused(svc):
    svc.check_in("9")

    with pytest.raises(ValidationError, match="Already checked in today"):
        svc.check_in("9")


def test_check_in_replaces_absent_placeholder(svc, ctx, clock):
    placeholder = AttendanceRecord(
        id="absent-9",
        employee_id="9",
        date=clock.now.date(),
        check_in=None,
        check_out=None,
        status=AttendanceStatus.ABSENT,
    )
    ctx.attendance.add(placeholder)

    record = svc.check_in("9")

    assert record.id == "absent-9"
    assert record.status == AttendanceStatus.PRESENT
    assert [r.id for r in svc.by_employee("9")] == ["absent-9"]


def test_check_out_records_hours_and_overtime(svc, clock):
    clock.set(hour=9, minute=0)
    svc.check_in("9")
    clock.set(hour=18, minute=30)

    record = svc.check_out("9")

    assert record.check_out == datetime(2026, 3, 10, 18, 30)
    assert record.total_hours == 9.5
    assert record.overtime == 1.5
    assert record.status == AttendanceStatus.PRESENT
    assert svc.open_record("9") is None


def test_short_day_closes_as_half_day(svc, clock):
    clock.set(hour=9, minute=0)
    svc.check_in("9")
    clock.set(hour=11, minute=0)

    record = svc.check_out("9")

    assert record.total_hours == 2.0
    assert record.overtime == 0.0
    assert record.status == AttendanceStatus.HALF_DAY


def test_check_out_without_open_check_in_is_refused(svc):
    with pytest.raises(ValidationError, match="No active check-in found for today"):
        svc.check_out("9")


def test_check_out_twice_is_refused(svc, clock):
    svc.check_in("9")
    clock.advance(hours=8)
    svc.check_out("9")

    with pytest.raises(ValidationError):
        svc.check_out("9")


def test_day_summary_and_rate_for_seeded_day(svc, clock):
    summary = svc.day_summary()

    assert summary.total == 3
    assert summary.present == 3
    assert svc.attendance_rate() == 100.0


def test_day_summary_counts_absences(svc, clock):
    # Six days back employee 1 has the seeded absence.
    day = clock.now.date().replace(day=4)
    summary = svc.day_summary(day)

    assert (summary.present, summary.absent, summary.total) == (2, 1, 3)
    assert svc.attendance_rate(day) == 66.67


def test_total_hours_sums_employee_records(svc):
    # Six seeded days at 8.5h; the seventh is the absence.
    assert svc.total_hours("1") == 51.0
