from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from ..core.enums import ApprovalAction, AttendanceAction


@dataclass(frozen=True)
class ActionResult:
    """Successful function response: a message plus the affected row as JSON."""

    message: str
    data: dict = field(default_factory=dict)


@dataclass(frozen=True)
class RegistrationForm:
    name: str
    email: str
    phone: str
    department: str
    position: str
    address: str = ""
    emergency_contact_name: str = ""
    emergency_contact_phone: str = ""
    emergency_contact_relationship: str = ""

    @classmethod
    def from_payload(cls, data: dict) -> "RegistrationForm":
        return cls(**{f: str(data.get(f) or "") for f in cls.__dataclass_fields__})


class HRBackend(Protocol):
    """What pages need from a backend, local or remote.

    Failures raise `RemoteError` (or a subclass) carrying the HTTP status.
    """

    def attendance_action(self, action: AttendanceAction, employee_id: str) -> ActionResult:
        raise NotImplementedError

    def approve_employee(self, employee_id: str, action: ApprovalAction, salary: Optional[float] = None) -> ActionResult:
        raise NotImplementedError

    def register_employee(self, form: RegistrationForm) -> ActionResult:
        raise NotImplementedError

    def list_rows(self, table: str) -> list[dict[str, Any]]:
        raise NotImplementedError

    def changes_since(self, since: int) -> tuple[int, list[str]]:
        raise NotImplementedError
