from __future__ import annotations

from datetime import date

import pytest

from hrms.core.enums import LeaveType, RequestStatus, Role
from hrms.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from hrms.leave.service import LeaveService


@pytest.fixture
def svc(ctx, clock):
    return LeaveService(ctx, clock=clock)


def _submit(svc, **overrides):
    fields = dict(
        employee_id="1",
        leave_type="sick",
        start_date=date(2026, 3, 12),
        end_date=date(2026, 3, 13),
        reason="Flu",
    )
    fields.update(overrides)
    return svc.submit(**fields)


def test_submit_creates_pending_request(svc):
    req = _submit(svc)

    assert req.status == RequestStatus.PENDING
    assert req.type == LeaveType.SICK
    assert req.applied_date == date(2026, 3, 10)
    assert svc.get(req.id) == req
    assert req in svc.by_employee("1")


def test_single_day_leave_is_allowed(svc):
    req = _submit(svc, end_date=date(2026, 3, 12))
    assert req.start_date == req.end_date


def test_end_before_start_is_rejected(svc):
    with pytest.raises(ValidationError, match="End date cannot be before start date."):
        _submit(svc, end_date=date(2026, 3, 11))


def test_unknown_leave_type_is_rejected(svc):
    with pytest.raises(ValidationError, match="Leave type is not valid"):
        _submit(svc, leave_type="sabbatical")


def test_reason_is_required(svc):
    with pytest.raises(ValidationError):
        _submit(svc, reason="  ")


def test_hr_approves_pending_request(svc):
    req = _submit(svc)

    approved = svc.approve(current_role=Role.HR, request_id=req.id, approved_by="HR Manager")

    assert approved.status == RequestStatus.APPROVED
    assert approved.approved_by == "HR Manager"
    assert approved.approved_date == date(2026, 3, 10)
    assert svc.on_leave(date(2026, 3, 13)) == [approved]
    assert svc.on_leave(date(2026, 3, 14)) == []


def test_processed_request_cannot_be_decided_again(svc):
    req = _submit(svc)
    svc.reject(current_role=Role.ADMIN, request_id=req.id)

    with pytest.raises(ValidationError, match="already been processed"):
        svc.approve(current_role=Role.ADMIN, request_id=req.id, approved_by="Admin User")


def test_employee_cannot_review_requests(svc):
    with pytest.raises(AuthorizationError):
        svc.approve(current_role=Role.EMPLOYEE, request_id="2", approved_by="John Doe")


def test_missing_request(svc):
    with pytest.raises(NotFoundError):
        svc.reject(current_role=Role.HR, request_id="missing")


def test_status_counts_cover_every_status(svc):
    assert svc.status_counts() == {"pending": 1, "approved": 1, "rejected": 1}

    svc.approve(current_role=Role.HR, request_id="2", approved_by="HR Manager")

    assert svc.status_counts() == {"pending": 0, "approved": 2, "rejected": 1}
    assert [r.id for r in svc.pending()] == []
