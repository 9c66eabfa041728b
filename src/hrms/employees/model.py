from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import EmployeeStatus


@dataclass(frozen=True)
class EmergencyContact:
    name: str = ""
    phone: str = ""
    relationship: str = ""


@dataclass(frozen=True)
class Employee:
    """Domain entity: employee record.

    Note: plain data object, persistence lives in the data context.
    """

    id: str
    name: str
    email: str
    phone: str
    department: str
    position: str
    date_of_joining: Optional[date]
    salary: float
    status: EmployeeStatus
    address: str = ""
    emergency_contact: EmergencyContact = field(default_factory=EmergencyContact)
    user_id: Optional[str] = None
    avatar: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE
