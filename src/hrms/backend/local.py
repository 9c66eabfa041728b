from __future__ import annotations

from typing import Callable, Optional

from ..core.enums import ApprovalAction, AttendanceAction
from ..data.events import ChangeFeed
from ..users.model import SessionUser
from .base import ActionResult, RegistrationForm
from .functions import BackendFunctions


class LocalBackend:
    """In-process backend: calls the same functions the HTTP surface exposes."""

    def __init__(
        self,
        functions: BackendFunctions,
        feed: ChangeFeed,
        *,
        caller: Callable[[], Optional[SessionUser]],
        ip: Callable[[], str],
    ):
        self._functions = functions
        self._feed = feed
        self._caller = caller
        self._ip = ip

    def attendance_action(self, action: AttendanceAction, employee_id: str) -> ActionResult:
        return self._functions.attendance_action(
            caller=self._caller(),
            ip=self._ip(),
            action=AttendanceAction(action).value,
            employee_id=employee_id,
        )

    def approve_employee(self, employee_id: str, action: ApprovalAction, salary: Optional[float] = None) -> ActionResult:
        return self._functions.employee_approval(
            caller=self._caller(),
            employee_id=employee_id,
            action=ApprovalAction(action).value,
            salary=salary,
        )

    def register_employee(self, form: RegistrationForm) -> ActionResult:
        return self._functions.employee_register(caller=self._caller(), form=form)

    def list_rows(self, table: str) -> list[dict]:
        return self._functions.visible_rows(self._caller(), table)

    def changes_since(self, since: int) -> tuple[int, list[str]]:
        return self._feed.changes_since(since)
