import pytest

from conftest import session_user
from hrms.core.enums import AccountStatus, Role
from hrms.core.exceptions import AuthorizationError
from hrms.users.guards import AccessRule, check_access, require_role

STAFF = AccessRule(roles=frozenset({Role.ADMIN, Role.HR}))


def test_anonymous_goes_to_login():
    assert check_access(None, AccessRule()) == "login"


def test_rejected_account_goes_to_rejected_page_even_on_open_routes():
    user = session_user(Role.EMPLOYEE, status=AccountStatus.REJECTED)
    assert check_access(user, AccessRule(require_active=False)) == "account_rejected"


def test_pending_account_waits_for_approval():
    user = session_user(Role.EMPLOYEE, status=AccountStatus.PENDING)

    assert check_access(user, AccessRule()) == "pending_approval"
    assert check_access(user, AccessRule(require_active=False)) is None


def test_wrong_role_goes_to_fallback():
    user = session_user(Role.EMPLOYEE)

    assert check_access(user, STAFF) == "dashboard"
    assert check_access(user, AccessRule(roles=frozenset({Role.ADMIN}), fallback="attendance")) == "attendance"


@pytest.mark.parametrize("role", [Role.ADMIN, Role.HR])
def test_staff_roles_pass(role):
    assert check_access(session_user(role), STAFF) is None


def test_require_role():
    assert require_role(session_user(Role.ADMIN), Role.ADMIN).role == Role.ADMIN
    with pytest.raises(AuthorizationError):
        require_role(None, Role.ADMIN)
    with pytest.raises(AuthorizationError):
        require_role(session_user(Role.HR, status=AccountStatus.PENDING), Role.HR)
    with pytest.raises(AuthorizationError):
        require_role(session_user(Role.HR), Role.ADMIN)
