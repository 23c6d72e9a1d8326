import pytest

from conftest import make_caller

from app.core.permissions import (
    DEFAULT_POLICIES,
    AuthorizationPolicy,
    LoanOperation,
    Role,
    policies_from_settings,
)
from app.core.settings import Settings
from app.services import authz
from app.services.loan_errors import LoanAuthorizationError


@pytest.mark.parametrize(
    "operation, allowed",
    [
        (LoanOperation.CREATE, {Role.USER}),
        (LoanOperation.REVIEW, {Role.OFFICER}),
        (LoanOperation.DECIDE, {Role.MANAGER}),
        (LoanOperation.LIST, {Role.OFFICER, Role.MANAGER}),
    ],
)
def test_default_policies(operation, allowed):
    policy = DEFAULT_POLICIES[operation]
    for role in Role:
        assert authz.check_permission(policy, make_caller(role)) is (role in allowed)
    assert policy.allow_same_user is False


def test_same_user_rule_only_applies_when_enabled():
    caller = make_caller(Role.USER, "user1")
    closed = AuthorizationPolicy(allowed_roles=frozenset({Role.MANAGER}))
    owner_ok = AuthorizationPolicy(allowed_roles=frozenset({Role.MANAGER}), allow_same_user=True)

    assert authz.check_permission(closed, caller, resource_owner_id="user1") is False
    assert authz.check_permission(owner_ok, caller, resource_owner_id="user1") is True
    assert authz.check_permission(owner_ok, caller, resource_owner_id="user2") is False
    assert authz.check_permission(owner_ok, caller) is False


def test_ensure_permitted_raises_without_side_effects():
    caller = make_caller(Role.USER, "user1")
    with pytest.raises(LoanAuthorizationError) as exc_info:
        authz.ensure_permitted(LoanOperation.DECIDE, DEFAULT_POLICIES[LoanOperation.DECIDE], caller)
    assert exc_info.value.code == "forbidden"
    assert exc_info.value.details == {"action": "loan.decide", "role": "user"}


def test_ensure_permitted_allows_matching_role():
    caller = make_caller(Role.MANAGER)
    assert authz.ensure_permitted(LoanOperation.LIST, DEFAULT_POLICIES[LoanOperation.LIST], caller) is None


def test_admin_is_not_granted_by_default():
    policies = policies_from_settings(Settings())
    admin = make_caller(Role.ADMIN)
    assert not any(authz.check_permission(policy, admin) for policy in policies.values())


def test_admin_bypass_grants_every_operation():
    policies = policies_from_settings(Settings(ADMIN_BYPASS=True))
    admin = make_caller(Role.ADMIN)
    assert all(authz.check_permission(policy, admin) for policy in policies.values())
    # Other roles keep their original scope.
    assert not authz.check_permission(policies[LoanOperation.DECIDE], make_caller(Role.OFFICER))


def test_role_overrides_from_settings():
    config = Settings(LOAN_REVIEW_ROLES="officer, manager")
    policies = policies_from_settings(config)
    assert policies[LoanOperation.REVIEW].allowed_roles == frozenset({Role.OFFICER, Role.MANAGER})


def test_unknown_role_in_settings_is_rejected():
    with pytest.raises(ValueError, match="Unknown role: auditor"):
        policies_from_settings(Settings(LOAN_LIST_ROLES="officer,auditor"))
