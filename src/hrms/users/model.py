from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AccountStatus, Role


@dataclass(frozen=True)
class User:
    """Domain entity: login account.

    Note: `employee_id` links the account to its employee record once one exists.
    """

    id: str
    email: str
    name: str
    role: Role
    password_hash: str
    status: AccountStatus = AccountStatus.ACTIVE
    employee_id: Optional[str] = None


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login (no password)."""

    id: str
    email: str
    name: str
    role: Role
    status: AccountStatus
    employee_id: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "SessionUser":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            status=user.status,
            employee_id=user.employee_id,
        )


@dataclass(frozen=True)
class SessionToken:
    token: str
    user_id: str
    created_at: datetime
