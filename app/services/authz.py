from __future__ import annotations

import logging

from app.core.logging import get_audit_logger
from app.core.permissions import AdminOperation, AuthorizationPolicy, LoanOperation
from app.models.caller import CallerIdentity
from app.services.loan_errors import LoanAuthorizationError

logger = logging.getLogger(__name__)


def check_permission(
    policy: AuthorizationPolicy,
    caller: CallerIdentity,
    resource_owner_id: str | None = None,
) -> bool:
    """Permit when the caller's role is allowed, or when the policy admits the owner."""
    if caller.role in policy.allowed_roles:
        return True
    if policy.allow_same_user and resource_owner_id is not None:
        return resource_owner_id == caller.id
    return False


def ensure_permitted(
    operation: LoanOperation | AdminOperation,
    policy: AuthorizationPolicy,
    caller: CallerIdentity,
    resource_owner_id: str | None = None,
) -> None:
    if check_permission(policy, caller, resource_owner_id):
        return
    get_audit_logger().warning(
        "Authorization denied",
        extra={
            "action": operation.value,
            "actor_id": caller.id,
            "actor_role": caller.role.value,
        },
    )
    raise LoanAuthorizationError(
        "Insufficient permissions",
        details={"action": operation.value, "role": caller.role.value},
    )
