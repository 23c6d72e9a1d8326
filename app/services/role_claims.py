from __future__ import annotations

from dataclasses import dataclass

from app.core.logging import get_audit_logger
from app.core.permissions import ADMIN_POLICIES, AdminOperation, Role
from app.core.security import create_access_token
from app.models.caller import CallerIdentity
from app.services import authz
from app.services.loan_errors import LoanValidationError


@dataclass(frozen=True, slots=True)
class RoleGrant:
    user_id: str
    role: Role
    access_token: str


def assign_role(caller: CallerIdentity, user_id: str, role: Role | str) -> RoleGrant:
    """Issue an access token carrying ``role`` for ``user_id``.

    Tokens are the only place a role lives, so assigning a role means minting
    a token for it. Only admins may do this.
    """
    authz.ensure_permitted(
        AdminOperation.ASSIGN_ROLE, ADMIN_POLICIES[AdminOperation.ASSIGN_ROLE], caller
    )
    subject = user_id.strip()
    if not subject:
        raise LoanValidationError("User id is required", details={"field": "user_id"})
    try:
        granted = Role(role)
    except ValueError as exc:
        raise LoanValidationError(f"Unknown role: {role}", details={"field": "role"}) from exc
    token = create_access_token(subject, granted.value)
    get_audit_logger().info(
        "admin.role_assigned",
        extra={
            "action": AdminOperation.ASSIGN_ROLE.value,
            "actor_id": caller.id,
            "actor_role": caller.role.value,
            "resource_type": "user",
            "resource_id": subject,
            "granted_role": granted.value,
        },
    )
    return RoleGrant(user_id=subject, role=granted, access_token=token)
