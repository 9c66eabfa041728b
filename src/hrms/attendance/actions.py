from __future__ import annotations

import logging
import threading
from typing import Optional

from ..backend.base import ActionResult, HRBackend
from ..core.enums import AttendanceAction
from ..core.exceptions import DuplicateActionError, RemoteError, UnauthorizedLocationError

logger = logging.getLogger(__name__)


class AttendanceActions:
    """Client-side wrapper around the attendance function.

    - A second call for the same (action, employee) while one is pending is
      refused instead of being sent twice.
    - After an unauthorized-location answer every further attempt is refused
      until `address_changed` reports a different address.
    """

    def __init__(self, backend: HRBackend):
        self._backend = backend
        self._lock = threading.Lock()
        self._in_flight: set[tuple[AttendanceAction, str]] = set()
        self._blocked_ip: Optional[str] = None
        self._blocked = False

    @property
    def blocked(self) -> bool:
        return self._blocked

    @property
    def blocked_ip(self) -> Optional[str]:
        return self._blocked_ip

    def address_changed(self, new_ip: Optional[str]) -> bool:
        """Lift the location block when the caller's address differs. Returns True if lifted."""
        with self._lock:
            if self._blocked and new_ip != self._blocked_ip:
                self._blocked = False
                self._blocked_ip = None
                return True
            return False

    def check_in(self, employee_id: str) -> ActionResult:
        return self._run(AttendanceAction.CHECKIN, employee_id)

    def check_out(self, employee_id: str) -> ActionResult:
        return self._run(AttendanceAction.CHECKOUT, employee_id)

    def _run(self, action: AttendanceAction, employee_id: str) -> ActionResult:
        key = (action, employee_id)
        with self._lock:
            if self._blocked:
                raise UnauthorizedLocationError(self._blocked_ip or "")
            if key in self._in_flight:
                raise DuplicateActionError(f"{action.value} already in progress")
            self._in_flight.add(key)

        try:
            return self._backend.attendance_action(action, employee_id)
        except RemoteError as e:
            if e.status == 403 and e.ip is not None:
                with self._lock:
                    self._blocked = True
                    self._blocked_ip = e.ip
                logger.warning("attendance blocked for address %s", e.ip)
            raise
        finally:
            with self._lock:
                self._in_flight.discard(key)
