"""HTTP client for a hosted HRMS backend.

Speaks the routes served by `hrms.backend.controller`:

    POST /auth/v1/token            {email, password} -> {access_token, user}
    POST /auth/v1/signup           {name, email, password} -> {access_token, user}
    POST /functions/v1/<name>      function call (bearer token)
    GET  /rest/v1/<table>          rows visible to the caller
    GET  /realtime/v1/changes      ?since=N -> {sequence, tables}

Local caches change only after the server has confirmed a write.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Callable, Iterable, Optional

import httpx

from ..core.enums import ApprovalAction, AttendanceAction
from ..core.exceptions import RemoteError, UnauthorizedLocationError
from .base import ActionResult, RegistrationForm

logger = logging.getLogger(__name__)


class RemoteBackend:
    def __init__(
        self,
        base_url: str = "",
        *,
        client: Optional[httpx.Client] = None,
        token: Optional[str] = None,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        forwarded_for: Optional[Callable[[], Optional[str]]] = None,
        timeout: float = 10.0,
    ):
        """`token_provider` and `forwarded_for` let a server act for its current
        request: the caller's session token and client address are sent along
        instead of a signed-in token of this client.
        """
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)
        self._token = token
        self._token_provider = token_provider
        self._forwarded_for = forwarded_for
        self.user: Optional[dict] = None

    @property
    def token(self) -> Optional[str]:
        if self._token is None and self._token_provider is not None:
            return self._token_provider()
        return self._token

    def close(self) -> None:
        self._client.close()

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        token = self.token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if self._forwarded_for is not None:
            ip = self._forwarded_for()
            if ip:
                headers["X-Forwarded-For"] = ip
        return headers

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self._client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise RemoteError(f"Backend unreachable: {e}", status=503) from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400:
            body = body if isinstance(body, dict) else {}
            message = body.get("message") or body.get("error") or response.reason_phrase
            ip = body.get("ip")
            if response.status_code == 403 and ip:
                raise UnauthorizedLocationError(ip, message)
            raise RemoteError(message, status=response.status_code, ip=ip)
        return body

    # Auth

    def _session(self, body: dict) -> dict:
        self._token = body.get("access_token")
        self.user = body.get("user")
        return self.user or {}

    def sign_in(self, email: str, password: str) -> dict:
        return self._session(self._request("POST", "/auth/v1/token", json={"email": email, "password": password}))

    def sign_up(self, name: str, email: str, password: str) -> dict:
        return self._session(
            self._request("POST", "/auth/v1/signup", json={"name": name, "email": email, "password": password})
        )

    def sign_out(self) -> None:
        if self._token:
            self._request("POST", "/auth/v1/logout")
        self._token = None
        self.user = None

    # Functions

    def _invoke(self, name: str, payload: dict) -> ActionResult:
        body = self._request("POST", f"/functions/v1/{name}", json=payload)
        return ActionResult(message=body.get("message", ""), data=body.get("data") or {})

    def attendance_action(self, action: AttendanceAction, employee_id: str) -> ActionResult:
        return self._invoke(
            "attendance-action",
            {"action": AttendanceAction(action).value, "employeeId": employee_id},
        )

    def approve_employee(self, employee_id: str, action: ApprovalAction, salary: Optional[float] = None) -> ActionResult:
        payload: dict = {"employee_id": employee_id, "action": ApprovalAction(action).value}
        if salary is not None:
            payload["salary"] = salary
        return self._invoke("employee-approval", payload)

    def register_employee(self, form: RegistrationForm) -> ActionResult:
        return self._invoke("employee-register", asdict(form))

    # Tables

    def list_rows(self, table: str) -> list[dict]:
        return list(self._request("GET", f"/rest/v1/{table}"))

    def changes_since(self, since: int) -> tuple[int, list[str]]:
        body = self._request("GET", "/realtime/v1/changes", params={"since": int(since)})
        return int(body.get("sequence", 0)), list(body.get("tables", []))


class RemoteCache:
    """Last rows fetched per table."""

    def __init__(self, backend):
        self._backend = backend
        self._tables: dict[str, list[dict]] = {}

    def rows(self, table: str) -> list[dict]:
        return list(self._tables.get(table, []))

    def reload(self, table: str) -> list[dict]:
        rows = self._backend.list_rows(table)
        self._tables[table] = rows
        return rows


class RealtimeSubscription:
    """Polling stand-in for a realtime channel: any change reloads the whole table."""

    def __init__(self, backend, cache: RemoteCache, tables: Iterable[str]):
        self._backend = backend
        self._cache = cache
        self._tables = tuple(tables)
        self._since = 0

    @property
    def since(self) -> int:
        return self._since

    def prime(self) -> None:
        for table in self._tables:
            self._cache.reload(table)
        self._since, _ = self._backend.changes_since(self._since)

    def poll(self) -> list[str]:
        """Reload the subscribed tables changed since the last poll."""
        sequence, changed = self._backend.changes_since(self._since)
        reloaded = [t for t in self._tables if t in changed]
        for table in reloaded:
            self._cache.reload(table)
        self._since = sequence
        return reloaded
