from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for route and action authorization."""

    ADMIN = "admin"
    HR = "hr"
    EMPLOYEE = "employee"


class AccountStatus(str, Enum):
    """Approval state of a login account."""

    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"
    REJECTED = "rejected"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    HALF_DAY = "half-day"


class AttendanceAction(str, Enum):
    CHECKIN = "checkin"
    CHECKOUT = "checkout"


class LeaveType(str, Enum):
    SICK = "sick"
    VACATION = "vacation"
    PERSONAL = "personal"
    EMERGENCY = "emergency"


class RequestStatus(str, Enum):
    """Approval flow state for leave requests."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class PayrollStatus(str, Enum):
    DRAFT = "draft"
    PROCESSED = "processed"
    PAID = "paid"


class TransactionType(str, Enum):
    RECEIPT = "receipt"
    PAYMENT = "payment"


class GoalStatus(str, Enum):
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
