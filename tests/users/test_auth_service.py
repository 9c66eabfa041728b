from __future__ import annotations

import pytest

from hrms.core.enums import AccountStatus, Role
from hrms.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from hrms.storage.store import InMemoryStore
from hrms.users.repository import StoreUserRepository
from hrms.users.model import SessionUser
from hrms.users.service import AuthContext, AuthService


@pytest.fixture
def repo():
    return StoreUserRepository(InMemoryStore())


@pytest.fixture
def auth(repo, clock):
    service = AuthService(repo, session_days=7, clock=clock)
    service.ensure_default_users()
    return service


def test_default_users_are_written_once(auth, repo):
    assert [u.email for u in repo.list_all()] == ["admin@hrms.com", "hr@hrms.com", "employee@hrms.com"]
    assert repo.get_by_email("employee@hrms.com").employee_id == "1"

    auth.sign_up(name="New Person", email="new@company.com", password="secret1")
    assert auth.ensure_default_users() is False
    assert len(repo.list_all()) == 4


@pytest.mark.parametrize(
    "email, password, role",
    [
        ("admin@hrms.com", "admin123", Role.ADMIN),
        ("HR@hrms.com", "hr123", Role.HR),
        ("employee@hrms.com", "emp123", Role.EMPLOYEE),
    ],
)
def test_authenticate_default_users(auth, email, password, role):
    user = auth.authenticate(email, password)
    assert user.role == role
    assert user.status == AccountStatus.ACTIVE


def test_authenticate_rejects_bad_credentials(auth):
    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        auth.authenticate("admin@hrms.com", "wrong")
    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        auth.authenticate("nobody@hrms.com", "admin123")


def test_passwords_are_stored_hashed(repo, auth):
    assert "admin123" not in repo.get_by_email("admin@hrms.com").password_hash


def test_sign_up_creates_pending_employee_account(auth):
    user = auth.sign_up(name="Grace Hopper", email="Grace@Company.com", password="cobol1")

    assert user.email == "grace@company.com"
    assert user.role == Role.EMPLOYEE
    assert user.status == AccountStatus.PENDING
    assert auth.authenticate("grace@company.com", "cobol1").id == user.id


def test_sign_up_validation(auth):
    with pytest.raises(ValidationError):
        auth.sign_up(name="Short", email="short@company.com", password="12345")
    with pytest.raises(ValidationError, match="already exists"):
        auth.sign_up(name="Dup", email="ADMIN@hrms.com", password="123456")
    with pytest.raises(ValidationError):
        auth.sign_up(name="Bad", email="not-an-email", password="123456")


def test_update_user(auth):
    updated = auth.update_user("3", status=AccountStatus.REJECTED)
    assert updated.status == AccountStatus.REJECTED
    with pytest.raises(NotFoundError):
        auth.update_user("404", status=AccountStatus.ACTIVE)


def test_token_round_trip_rereads_account(auth):
    token = auth.issue_token(auth.authenticate("employee@hrms.com", "emp123"))
    auth.update_user("3", status=AccountStatus.REJECTED)

    assert auth.resolve_token(token).status == AccountStatus.REJECTED

    assert auth.revoke_token(token) is True
    with pytest.raises(AuthenticationError):
        auth.resolve_token(token)


def test_token_expires_after_session_days(auth, clock):
    token = auth.issue_token(auth.authenticate("hr@hrms.com", "hr123"))
    clock.advance(days=7, seconds=1)

    with pytest.raises(AuthenticationError, match="expired"):
        auth.resolve_token(token)


def test_auth_context_login_logout_restore(auth):
    session = {"stale": True}
    ctx = AuthContext(auth, session)

    assert ctx.login("admin@hrms.com", "wrong") is False
    assert ctx.login("admin@hrms.com", "admin123") is True
    assert "stale" not in session
    assert session["user_id"] == "1"

    restored = AuthContext(auth, session)
    assert restored.restore().email == "admin@hrms.com"

    ctx.logout()
    assert session == {}
    assert AuthContext(auth, session).restore() is None


def test_restore_clears_session_with_revoked_token(auth):
    session = {}
    AuthContext(auth, session).login("hr@hrms.com", "hr123")
    auth.revoke_token(session["token"])

    assert AuthContext(auth, session).restore() is None
    assert session == {}


def test_start_opens_session_for_new_account(auth):
    user = auth.sign_up(name="Grace Hopper", email="grace@company.com", password="cobol1")
    session = {}

    AuthContext(auth, session).start(SessionUser.from_user(user))

    restored = AuthContext(auth, session).restore()
    assert restored.id == user.id
    assert restored.status == AccountStatus.PENDING
