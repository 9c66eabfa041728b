"""Server-side callable functions.

These hold the rules the browser must not be trusted with: the office
network check for attendance, the admin/HR gate on approvals and the
authenticated caller on self-registration. They raise domain errors; the
HTTP layer turns them into status codes.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..attendance.network import NetworkPolicy
from ..attendance.service import AttendanceService
from ..common.codec import to_json
from ..common.datetime_utils import now_local
from ..common.validators import require_number
from ..core.enums import AccountStatus, ApprovalAction, AttendanceAction, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..data.context import COLLECTION_NAMES, DataContext
from ..employees.registration import RegistrationService
from ..users.model import SessionUser
from .base import ActionResult, RegistrationForm

logger = logging.getLogger(__name__)

# Tables an employee may read, and the field that ties a row to them.
EMPLOYEE_SCOPED = {
    "employees": "id",
    "attendance": "employeeId",
    "leaves": "employeeId",
    "payroll": "employeeId",
    "performance_reviews": "employeeId",
}


def _require_caller(caller: Optional[SessionUser]) -> SessionUser:
    if caller is None:
        raise AuthenticationError("No authorization header")
    return caller


class BackendFunctions:
    def __init__(
        self,
        ctx: DataContext,
        attendance: AttendanceService,
        network: NetworkPolicy,
        registration: RegistrationService,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._ctx = ctx
        self._attendance = attendance
        self._network = network
        self._registration = registration
        self._clock = clock

    def attendance_action(
        self,
        *,
        caller: Optional[SessionUser],
        ip: str,
        action: str,
        employee_id: str,
    ) -> ActionResult:
        self._network.ensure_allowed(ip)
        caller = _require_caller(caller)
        if caller.status != AccountStatus.ACTIVE:
            raise AuthorizationError("Your account is not active")
        if caller.role == Role.EMPLOYEE and caller.employee_id != employee_id:
            raise AuthorizationError("You can only check in/out for yourself")
        if not self._ctx.employees.get(employee_id or ""):
            raise NotFoundError("Employee not found")

        try:
            kind = AttendanceAction(action)
        except ValueError:
            raise ValidationError("Invalid action")

        now = self._clock()
        if kind == AttendanceAction.CHECKIN:
            record = self._attendance.check_in(employee_id, now=now)
            message = f"Checked in at {now.strftime('%I:%M:%S %p')}"
        else:
            record = self._attendance.check_out(employee_id, now=now)
            message = f"Checked out at {now.strftime('%I:%M:%S %p')}. Total hours: {record.total_hours:.2f}"
        logger.info("attendance-action %s employee=%s ip=%s", kind.value, employee_id, ip)
        return ActionResult(message=message, data=to_json(record))

    def employee_approval(
        self,
        *,
        caller: Optional[SessionUser],
        employee_id: str,
        action: str,
        salary=None,
    ) -> ActionResult:
        caller = _require_caller(caller)
        try:
            decision = ApprovalAction(action)
        except ValueError:
            raise ValidationError("Invalid action")
        amount = None
        if salary not in (None, ""):
            amount = require_number(salary, "Salary", minimum=0)

        emp = self._registration.decide(caller, employee_id, decision, amount)
        return ActionResult(message=f"Employee {emp.status.value}", data=to_json(emp))

    def employee_register(self, *, caller: Optional[SessionUser], form: RegistrationForm) -> ActionResult:
        caller = _require_caller(caller)
        emp = self._registration.register(caller, form)
        return ActionResult(message="Registration submitted for approval", data=to_json(emp))

    def visible_rows(self, caller: Optional[SessionUser], table: str) -> list[dict]:
        """Row-level read access for the REST surface."""
        caller = _require_caller(caller)
        if table not in COLLECTION_NAMES:
            raise NotFoundError(f"Unknown table: {table}")
        rows = to_json(self._ctx.collection(table).all())
        if caller.role in {Role.ADMIN, Role.HR}:
            return rows
        if caller.status != AccountStatus.ACTIVE and table != "employees":
            raise AuthorizationError("Your account is not active")
        field = EMPLOYEE_SCOPED.get(table)
        if field is None:
            raise AuthorizationError("You do not have permission to read this table")
        return [r for r in rows if caller.employee_id and r.get(field) == caller.employee_id]
