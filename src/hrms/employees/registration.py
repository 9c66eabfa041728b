from __future__ import annotations

import logging
from typing import Optional

from ..backend.base import RegistrationForm
from ..common.ids import new_id
from ..common.validators import require_email, require_non_empty
from ..core.enums import AccountStatus, ApprovalAction, EmployeeStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.model import SessionUser
from ..users.service import AuthService
from .model import EmergencyContact, Employee
from .service import EmployeeService

logger = logging.getLogger(__name__)


class RegistrationService:
    """Self-registration and the admin/HR approval workflow."""

    def __init__(self, employees: EmployeeService, auth: AuthService):
        self._employees = employees
        self._auth = auth

    def register(self, caller: Optional[SessionUser], form: RegistrationForm) -> Employee:
        """Create the caller's employee profile in `pending` state."""
        if caller is None:
            raise AuthorizationError("Sign in required")
        linked = caller.employee_id and self._employees.get_by_id(caller.employee_id)
        if linked or self._employees.by_user(caller.id):
            raise ValidationError("An employee profile is already registered for this account")

        emp = Employee(
            id=new_id(),
            name=require_non_empty(form.name, "Name"),
            email=require_email(form.email),
            phone=require_non_empty(form.phone, "Phone"),
            department=require_non_empty(form.department, "Department"),
            position=require_non_empty(form.position, "Position"),
            date_of_joining=None,
            salary=0.0,
            status=EmployeeStatus.PENDING,
            address=(form.address or "").strip(),
            emergency_contact=EmergencyContact(
                name=(form.emergency_contact_name or "").strip(),
                phone=(form.emergency_contact_phone or "").strip(),
                relationship=(form.emergency_contact_relationship or "").strip(),
            ),
            user_id=caller.id,
        )
        self._employees.insert(emp)

        # Grant the employee role; staff accounts keep their own role and status.
        if caller.role == Role.EMPLOYEE:
            self._auth.update_user(caller.id, employee_id=emp.id, status=AccountStatus.PENDING)
        else:
            self._auth.update_user(caller.id, employee_id=emp.id)
        logger.info("employee %s registered, awaiting approval", emp.id)
        return emp

    def decide(
        self,
        caller: Optional[SessionUser],
        employee_id: str,
        action: ApprovalAction,
        salary: Optional[float] = None,
    ) -> Employee:
        if caller is None or caller.role not in {Role.ADMIN, Role.HR}:
            raise AuthorizationError("Unauthorized: Only admins and HR can approve employees")

        if action == ApprovalAction.APPROVE:
            emp = self._employees.set_status(employee_id, EmployeeStatus.ACTIVE, salary=salary or None)
            account_status = AccountStatus.ACTIVE
        else:
            emp = self._employees.set_status(employee_id, EmployeeStatus.REJECTED)
            account_status = AccountStatus.REJECTED

        if emp.user_id:
            self._auth.update_user(emp.user_id, status=account_status)
        logger.info("employee %s %s by %s", employee_id, emp.status.value, caller.email)
        return emp
