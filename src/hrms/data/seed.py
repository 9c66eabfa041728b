"""Deterministic sample dataset written the first time a collection is missing."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import period_label
from ..core.enums import (
    AttendanceStatus,
    EmployeeStatus,
    GoalStatus,
    LeaveType,
    PayrollStatus,
    RequestStatus,
    TransactionType,
)
from ..employees.model import EmergencyContact, Employee
from ..leave.model import LeaveRequest
from ..payroll.model import PayrollRecord
from ..receipts.model import ReceiptPaymentRecord
from ..reviews.model import Goal, PerformanceReview

SAMPLE_EMPLOYEE_IDS = ("1", "2", "3")


def sample_employees(now: datetime) -> list[Employee]:
    return [
        Employee(
            id="1",
            name="John Doe",
            email="john.doe@company.com",
            phone="+1-555-0123",
            department="Engineering",
            position="Senior Developer",
            date_of_joining=date(2023, 1, 15),
            salary=75000.0,
            status=EmployeeStatus.ACTIVE,
            address="123 Main St, City, State 12345",
            emergency_contact=EmergencyContact("Jane Doe", "+1-555-0124", "Spouse"),
        ),
        Employee(
            id="2",
            name="Sarah Wilson",
            email="sarah.wilson@company.com",
            phone="+1-555-0125",
            department="Marketing",
            position="Marketing Manager",
            date_of_joining=date(2022, 8, 20),
            salary=65000.0,
            status=EmployeeStatus.ACTIVE,
            address="456 Oak Ave, City, State 12345",
            emergency_contact=EmergencyContact("Mike Wilson", "+1-555-0126", "Spouse"),
        ),
        Employee(
            id="3",
            name="Michael Chen",
            email="michael.chen@company.com",
            phone="+1-555-0127",
            department="Finance",
            position="Financial Analyst",
            date_of_joining=date(2023, 3, 10),
            salary=58000.0,
            status=EmployeeStatus.ACTIVE,
            address="789 Pine St, City, State 12345",
            emergency_contact=EmergencyContact("Lisa Chen", "+1-555-0128", "Sister"),
        ),
    ]


def sample_attendance(now: datetime) -> list[AttendanceRecord]:
    """Last 7 days for each sample employee; one fixed absence per employee."""
    records = []
    today = now.date()
    for i in range(7):
        day = today - timedelta(days=i)
        for employee_id in SAMPLE_EMPLOYEE_IDS:
            if (i + int(employee_id)) % 7 == 0:
                records.append(
                    AttendanceRecord(
                        id=f"{employee_id}-{day.isoformat()}",
                        employee_id=employee_id,
                        date=day,
                        check_in=None,
                        check_out=None,
                        status=AttendanceStatus.ABSENT,
                    )
                )
                continue
            records.append(
                AttendanceRecord(
                    id=f"{employee_id}-{day.isoformat()}",
                    employee_id=employee_id,
                    date=day,
                    check_in=datetime.combine(day, time(9, 0)),
                    check_out=datetime.combine(day, time(17, 30)),
                    status=AttendanceStatus.PRESENT,
                    total_hours=8.5,
                    overtime=0.5,
                )
            )
    return records


def sample_leaves(now: datetime) -> list[LeaveRequest]:
    return [
        LeaveRequest(
            id="1",
            employee_id="1",
            type=LeaveType.VACATION,
            start_date=date(2024, 1, 20),
            end_date=date(2024, 1, 25),
            reason="Family vacation",
            status=RequestStatus.APPROVED,
            applied_date=date(2024, 1, 10),
            approved_by="HR Manager",
            approved_date=date(2024, 1, 12),
        ),
        LeaveRequest(
            id="2",
            employee_id="2",
            type=LeaveType.SICK,
            start_date=date(2024, 1, 15),
            end_date=date(2024, 1, 16),
            reason="Medical appointment",
            status=RequestStatus.PENDING,
            applied_date=date(2024, 1, 14),
        ),
        LeaveRequest(
            id="3",
            employee_id="3",
            type=LeaveType.PERSONAL,
            start_date=date(2024, 1, 30),
            end_date=date(2024, 1, 30),
            reason="Personal matters",
            status=RequestStatus.REJECTED,
            applied_date=date(2024, 1, 25),
        ),
    ]


def sample_payroll(now: datetime) -> list[PayrollRecord]:
    return [
        PayrollRecord(
            id="1",
            employee_id="1",
            month="December",
            year=now.year,
            basic_salary=75000.0,
            allowances=5000.0,
            deductions=8000.0,
            net_salary=72000.0,
            status=PayrollStatus.PAID,
        ),
        PayrollRecord(
            id="2",
            employee_id="2",
            month="December",
            year=now.year,
            basic_salary=65000.0,
            allowances=3000.0,
            deductions=6500.0,
            net_salary=61500.0,
            status=PayrollStatus.PROCESSED,
        ),
    ]


def sample_receipt_payments(now: datetime) -> list[ReceiptPaymentRecord]:
    today = now.date()
    created = now.replace(microsecond=0)
    return [
        ReceiptPaymentRecord(
            id="1",
            type=TransactionType.RECEIPT,
            account_name="Cash Sales",
            amount=991626.61,
            date=today,
            period=period_label(today),
            description="Monthly revenue collection",
            created_by="admin",
            created_at=created,
        ),
        ReceiptPaymentRecord(
            id="2",
            type=TransactionType.PAYMENT,
            account_name="Rent",
            amount=45000.0,
            date=today,
            period=period_label(today),
            description="Office rent payment",
            created_by="admin",
            created_at=created,
        ),
    ]


def sample_performance_reviews(now: datetime) -> list[PerformanceReview]:
    created = now.replace(microsecond=0)
    return [
        PerformanceReview(
            id="1",
            employee_id="1",
            review_period_start=date(now.year, 1, 1),
            review_period_end=date(now.year, 6, 30),
            rating=4,
            goals=(
                Goal("1", "Ship the billing service rewrite", 100, GoalStatus.COMPLETED),
                Goal("2", "Mentor two junior developers", 60, GoalStatus.IN_PROGRESS),
            ),
            feedback="Strong delivery, keep investing in mentoring.",
            reviewed_by="HR Manager",
            review_date=date(now.year, 7, 5),
            created_at=created,
        ),
        PerformanceReview(
            id="2",
            employee_id="2",
            review_period_start=date(now.year, 1, 1),
            review_period_end=date(now.year, 6, 30),
            rating=5,
            goals=(Goal("1", "Launch the spring campaign", 100, GoalStatus.COMPLETED),),
            feedback="Campaign exceeded targets.",
            reviewed_by="HR Manager",
            review_date=date(now.year, 7, 8),
            created_at=created,
        ),
    ]
