from __future__ import annotations

import dataclasses
import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, MutableMapping, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.ids import new_id
from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import AccountStatus, Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .model import SessionToken, SessionUser, User
from .repository import StoreUserRepository

logger = logging.getLogger(__name__)

# (id, email, password, name, role, employee_id)
DEFAULT_USERS = (
    ("1", "admin@hrms.com", "admin123", "Admin User", Role.ADMIN, None),
    ("2", "hr@hrms.com", "hr123", "HR Manager", Role.HR, None),
    ("3", "employee@hrms.com", "emp123", "John Doe", Role.EMPLOYEE, "1"),
)


class AuthService:
    """Use cases: authenticate, sign up, manage session tokens."""

    def __init__(
        self,
        users: StoreUserRepository,
        *,
        session_days: int = DEFAULT_SESSION_DAYS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._users = users
        self._session_days = int(session_days)
        self._clock = clock

    def ensure_default_users(self) -> bool:
        """Write the default accounts once; never overwrites an existing directory."""
        if self._users.has_users():
            return False
        self._users.save_all(
            [
                User(
                    id=uid,
                    email=email,
                    name=name,
                    role=role,
                    password_hash=generate_password_hash(password),
                    status=AccountStatus.ACTIVE,
                    employee_id=employee_id,
                )
                for uid, email, password, name, role, employee_id in DEFAULT_USERS
            ]
        )
        logger.info("seeded %d default user(s)", len(DEFAULT_USERS))
        return True

    def get_user(self, user_id: str) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def authenticate(self, email: str, password: str) -> SessionUser:
        user = self._users.get_by_email(email or "")
        if not user:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")
        return SessionUser.from_user(user)

    def sign_up(self, *, name: str, email: str, password: str) -> User:
        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_min_length(password, "Password", 6)

        if self._users.get_by_email(email):
            raise ValidationError("An account with this email already exists")

        user = User(
            id=new_id(),
            email=email,
            name=name,
            role=Role.EMPLOYEE,
            password_hash=generate_password_hash(password),
            status=AccountStatus.PENDING,
        )
        logger.info("new account %s awaiting approval", email)
        return self._users.save(user)

    def update_user(self, user_id: str, **changes) -> User:
        user = self.get_user(user_id)
        return self._users.save(dataclasses.replace(user, **changes))

    # Session tokens

    def issue_token(self, user: SessionUser) -> str:
        token = secrets.token_urlsafe(32)
        self._users.save_token(SessionToken(token=token, user_id=user.id, created_at=self._clock().replace(microsecond=0)))
        return token

    def resolve_token(self, token: Optional[str]) -> SessionUser:
        """Current account behind a token; role and status are re-read every time."""
        if not token:
            raise AuthenticationError("Not signed in")
        stored = self._users.get_token(token)
        if not stored:
            raise AuthenticationError("Session has ended, please sign in again")
        if self._clock() - stored.created_at > timedelta(days=self._session_days):
            self._users.delete_token(token)
            raise AuthenticationError("Session has expired, please sign in again")
        user = self._users.get_by_id(stored.user_id)
        if not user:
            raise AuthenticationError("Account no longer exists")
        return SessionUser.from_user(user)

    def revoke_token(self, token: Optional[str]) -> bool:
        if not token:
            return False
        return self._users.delete_token(token)


class AuthContext:
    """Per-request auth state: anonymous -> authenticated(role, status).

    Bound to the Flask session; only the token and user id live there, the
    account itself is re-read from the directory on `restore()`.
    """

    def __init__(self, auth: AuthService, session: MutableMapping):
        self._auth = auth
        self._session = session
        self._user: Optional[SessionUser] = None

    @property
    def user(self) -> Optional[SessionUser]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def token(self) -> Optional[str]:
        return self._session.get("token")

    def login(self, email: str, password: str, *, remember: bool = False) -> bool:
        try:
            user = self._auth.authenticate(email, password)
        except AuthenticationError:
            return False
        self.start(user, remember=remember)
        return True

    def start(self, user: SessionUser, *, remember: bool = False) -> None:
        token = self._auth.issue_token(user)
        self._session.clear()
        self._session["user_id"] = user.id
        self._session["token"] = token
        if hasattr(self._session, "permanent"):
            self._session.permanent = bool(remember)
        self._user = user

    def logout(self) -> None:
        self._auth.revoke_token(self.token)
        self._session.clear()
        self._user = None

    def restore(self) -> Optional[SessionUser]:
        token = self.token
        if not token:
            self._user = None
            return None
        try:
            self._user = self._auth.resolve_token(token)
        except AuthenticationError:
            self._session.clear()
            self._user = None
        return self._user
