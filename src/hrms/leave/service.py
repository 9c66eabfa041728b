from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..common.ids import new_id
from ..common.validators import require_non_empty
from ..core.enums import LeaveType, RequestStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..data.context import DataContext
from .model import LeaveRequest

logger = logging.getLogger(__name__)


class LeaveService:
    def __init__(self, ctx: DataContext, *, clock: Callable[[], datetime] = now_local):
        self._ctx = ctx
        self._clock = clock

    def all(self) -> list[LeaveRequest]:
        return self._ctx.leaves.all()

    def get(self, request_id: str) -> Optional[LeaveRequest]:
        return self._ctx.leaves.get(request_id)

    def by_employee(self, employee_id: str) -> list[LeaveRequest]:
        return [r for r in self.all() if r.employee_id == employee_id]

    def by_status(self, status: RequestStatus) -> list[LeaveRequest]:
        return [r for r in self.all() if r.status == status]

    def pending(self) -> list[LeaveRequest]:
        return self.by_status(RequestStatus.PENDING)

    def approved(self) -> list[LeaveRequest]:
        return self.by_status(RequestStatus.APPROVED)

    def rejected(self) -> list[LeaveRequest]:
        return self.by_status(RequestStatus.REJECTED)

    def status_counts(self) -> dict[str, int]:
        counts = {s.value: 0 for s in RequestStatus}
        for r in self.all():
            counts[r.status.value] += 1
        return counts

    def on_leave(self, day: date) -> list[LeaveRequest]:
        """Approved requests covering `day`."""
        return [r for r in self.approved() if r.start_date <= day <= r.end_date]

    def submit(
        self,
        *,
        employee_id: str,
        leave_type: str,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> LeaveRequest:
        employee_id = require_non_empty(employee_id, "Employee")
        try:
            kind = LeaveType(leave_type)
        except ValueError:
            raise ValidationError("Leave type is not valid")
        if end_date < start_date:
            raise ValidationError("End date cannot be before start date.")
        reason = require_non_empty(reason, "Reason")

        req = LeaveRequest(
            id=new_id(),
            employee_id=employee_id,
            type=kind,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=RequestStatus.PENDING,
            applied_date=self._clock().date(),
        )
        return self._ctx.leaves.add(req)

    def _pending_or_fail(self, current_role: Role, request_id: str) -> LeaveRequest:
        if current_role not in {Role.ADMIN, Role.HR}:
            raise AuthorizationError("You do not have permission to review leave requests")

        req = self.get(request_id)
        if not req:
            raise NotFoundError("Leave request not found")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("Leave request has already been processed")
        return req

    def approve(self, *, current_role: Role, request_id: str, approved_by: str) -> LeaveRequest:
        req = self._pending_or_fail(current_role, request_id)
        updated = dataclasses.replace(
            req,
            status=RequestStatus.APPROVED,
            approved_by=require_non_empty(approved_by, "Approver"),
            approved_date=self._clock().date(),
        )
        logger.info("leave %s approved by %s", request_id, approved_by)
        return self._ctx.leaves.update(request_id, updated)

    def reject(self, *, current_role: Role, request_id: str) -> LeaveRequest:
        req = self._pending_or_fail(current_role, request_id)
        logger.info("leave %s rejected", request_id)
        return self._ctx.leaves.update(request_id, dataclasses.replace(req, status=RequestStatus.REJECTED))
