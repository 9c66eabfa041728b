"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EMPLOYEES_KEY = "hrms_employees"
ATTENDANCE_KEY = "hrms_attendance"
LEAVES_KEY = "hrms_leaves"
PAYROLL_KEY = "hrms_payroll"
RECEIPT_PAYMENTS_KEY = "hrms_receipt_payments"
PERFORMANCE_REVIEWS_KEY = "hrms_performance_reviews"
USERS_KEY = "hrms_users"
SESSIONS_KEY = "hrms_sessions"
IP_WHITELIST_KEY = "hrms_ip_whitelist"

DATA_CHANGE_EVENT = "hrms-data-change"

STANDARD_WORK_HOURS = 8
HALF_DAY_HOURS = 4
DEFAULT_LATE_GRACE_MINUTES = 15
DEFAULT_SESSION_DAYS = 7
DEFAULT_TREND_DAYS = 7

ALLOWANCE_RATE = "0.10"
DEDUCTION_RATE = "0.15"

COMMON_BANK_ACCOUNTS = (
    "ICB Islamic Bank Ltd.",
    "Exim Bank",
    "Dutch-Bangla Bank",
    "Brac Bank",
    "City Bank",
    "Eastern Bank",
    "Cash",
)
