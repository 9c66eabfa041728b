"""Declarative route gates.

Two independent checks compose, evaluated on every request:

- authentication: anonymous -> sign in; rejected -> holding page; pending
  (when the route needs an active account) -> pending-approval page;
- role: a route lists the roles it admits; anyone else is sent to the
  route's fallback page instead of an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Iterable, Optional

from flask import g, redirect, url_for

from ..core.enums import AccountStatus, Role
from ..core.exceptions import AuthorizationError
from .model import SessionUser


@dataclass(frozen=True)
class AccessRule:
    roles: Optional[frozenset] = None
    require_active: bool = True
    fallback: str = "dashboard"


def check_access(user: Optional[SessionUser], rule: AccessRule) -> Optional[str]:
    """Endpoint to redirect to, or None when access is granted."""
    if user is None:
        return "login"
    if user.status == AccountStatus.REJECTED:
        return "account_rejected"
    if rule.require_active and user.status == AccountStatus.PENDING:
        return "pending_approval"
    if rule.roles is not None and user.role not in rule.roles:
        return rule.fallback
    return None


def current_user() -> Optional[SessionUser]:
    auth = g.get("auth")
    return auth.user if auth else None


def guarded(roles: Optional[Iterable[Role]] = None, *, require_active: bool = True, fallback: str = "dashboard"):
    rule = AccessRule(
        roles=frozenset(roles) if roles is not None else None,
        require_active=require_active,
        fallback=fallback,
    )

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            target = check_access(current_user(), rule)
            if target:
                return redirect(url_for(target))
            return view(*args, **kwargs)

        wrapper.access_rule = rule
        return wrapper

    return decorator


def require_role(user: Optional[SessionUser], *roles: Role) -> SessionUser:
    """Action-level gate: active account with one of `roles`."""
    if user is None:
        raise AuthorizationError("Sign in required")
    if user.status != AccountStatus.ACTIVE:
        raise AuthorizationError("Your account is not active")
    if roles and user.role not in roles:
        raise AuthorizationError("You do not have permission to perform this action")
    return user
