from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.ids import new_id
from ..common.validators import require_email, require_non_empty, require_number
from ..core.enums import EmployeeStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..data.context import DataContext
from .model import EmergencyContact, Employee


@dataclass(frozen=True)
class EmployeeForm:
    """Fields accepted from the add/edit employee forms."""

    name: str
    email: str
    phone: str
    department: str
    position: str
    salary: object
    date_of_joining: Optional[date] = None
    address: str = ""
    emergency_contact: EmergencyContact = dataclasses.field(default_factory=EmergencyContact)
    status: EmployeeStatus = EmployeeStatus.ACTIVE


class EmployeeService:
    def __init__(self, ctx: DataContext):
        self._ctx = ctx

    # Queries

    def all(self) -> list[Employee]:
        return self._ctx.employees.all()

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return self._ctx.employees.get(employee_id)

    def require(self, employee_id: str) -> Employee:
        emp = self.get_by_id(employee_id)
        if not emp:
            raise NotFoundError("Employee not found")
        return emp

    def by_department(self, department: str) -> list[Employee]:
        return [e for e in self.all() if e.department == department]

    def by_status(self, status: EmployeeStatus) -> list[Employee]:
        return [e for e in self.all() if e.status == status]

    def active(self) -> list[Employee]:
        return self.by_status(EmployeeStatus.ACTIVE)

    def pending(self) -> list[Employee]:
        return self.by_status(EmployeeStatus.PENDING)

    def departments(self) -> list[str]:
        return sorted({e.department for e in self.all() if e.department})

    def by_user(self, user_id: str) -> Optional[Employee]:
        for e in self.all():
            if e.user_id == user_id:
                return e
        return None

    def search(self, term: str = "", *, department: Optional[str] = None) -> list[Employee]:
        needle = (term or "").strip().lower()
        out = []
        for e in self.all():
            if department and e.department != department:
                continue
            haystack = (e.name, e.email, e.department, e.position)
            if needle and not any(needle in v.lower() for v in haystack):
                continue
            out.append(e)
        return out

    # Mutations

    @staticmethod
    def _clean(form: EmployeeForm) -> dict:
        return {
            "name": require_non_empty(form.name, "Name"),
            "email": require_email(form.email),
            "phone": require_non_empty(form.phone, "Phone"),
            "department": require_non_empty(form.department, "Department"),
            "position": require_non_empty(form.position, "Position"),
            "salary": require_number(form.salary, "Salary", minimum=0),
            "date_of_joining": form.date_of_joining,
            "address": (form.address or "").strip(),
            "emergency_contact": form.emergency_contact,
            "status": form.status,
        }

    def add_employee(self, *, current_role: Role, form: EmployeeForm) -> Employee:
        if current_role not in {Role.ADMIN, Role.HR}:
            raise AuthorizationError("You do not have permission to add employees")

        emp = Employee(id=new_id(), **self._clean(form))
        return self._ctx.employees.add(emp)

    def update_employee(self, *, current_role: Role, employee_id: str, form: EmployeeForm) -> Employee:
        if current_role not in {Role.ADMIN, Role.HR}:
            raise AuthorizationError("You do not have permission to edit employees")

        existing = self.require(employee_id)
        updated = dataclasses.replace(existing, **self._clean(form))
        return self._ctx.employees.update(employee_id, updated)

    def insert(self, emp: Employee) -> Employee:
        """Store an already-validated record (self-registration)."""
        return self._ctx.employees.add(emp)

    def delete_employee(self, *, current_role: Role, employee_id: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can delete employees")

        self.require(employee_id)
        self._ctx.employees.delete(employee_id)

    def set_status(self, employee_id: str, status: EmployeeStatus, *, salary: Optional[float] = None) -> Employee:
        """Status (and optionally salary) change used by the approval workflow."""
        existing = self.require(employee_id)
        changes: dict = {"status": status}
        if salary is not None:
            changes["salary"] = require_number(salary, "Salary", minimum=0)
        return self._ctx.employees.update(employee_id, dataclasses.replace(existing, **changes))
