"""Example: drive the service layer without Flask.

Controllers are thin; the rules live in the services, so the same calls work
from a script, a job or a test.
"""

import importlib

from hrms.config import get_settings_module
from hrms.container import build_container
from hrms.core.enums import Role
from hrms.core.exceptions import ValidationError
from hrms.storage.store import InMemoryStore


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings, store=InMemoryStore())

    try:
        record = container.attendance_service.check_in("2")
        print(f"{record.employee_id} checked in at {record.check_in} -> {record.status.value}")
    except ValidationError as e:
        print(f"check-in refused: {e}")

    result = container.payroll_service.generate(current_role=Role.ADMIN)
    print(result.message)
    for row in result.records:
        print(f"  {row.employee_id}: net {row.net_salary:,.2f}")

    print(container.report_service.dashboard_stats())


if __name__ == "__main__":
    main()
