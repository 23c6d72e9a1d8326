from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping

from app.core.settings import Settings


class Role(str, Enum):
    USER = "user"
    OFFICER = "officer"
    MANAGER = "manager"
    ADMIN = "admin"

    @classmethod
    def list_all(cls) -> list[str]:
        return [role.value for role in cls]

    @classmethod
    def normalize(cls, values: Iterable[str | Role]) -> frozenset[Role]:
        """Return the set of valid roles, raising on unknown names."""
        roles: set[Role] = set()
        for value in values:
            try:
                roles.add(cls(value))
            except ValueError as exc:
                raise ValueError(f"Unknown role: {value}") from exc
        return frozenset(roles)


class LoanOperation(str, Enum):
    CREATE = "loan.create"
    REVIEW = "loan.review"
    DECIDE = "loan.decide"
    LIST = "loan.list"


class AdminOperation(str, Enum):
    ASSIGN_ROLE = "admin.assign_role"


@dataclass(frozen=True, slots=True)
class AuthorizationPolicy:
    allowed_roles: frozenset[Role] = field(default_factory=frozenset)
    allow_same_user: bool = False


DEFAULT_POLICIES: Mapping[LoanOperation, AuthorizationPolicy] = {
    LoanOperation.CREATE: AuthorizationPolicy(allowed_roles=frozenset({Role.USER})),
    LoanOperation.REVIEW: AuthorizationPolicy(allowed_roles=frozenset({Role.OFFICER})),
    LoanOperation.DECIDE: AuthorizationPolicy(allowed_roles=frozenset({Role.MANAGER})),
    LoanOperation.LIST: AuthorizationPolicy(
        allowed_roles=frozenset({Role.OFFICER, Role.MANAGER})
    ),
}

# Role assignment is the one capability reserved for admins.
ADMIN_POLICIES: Mapping[AdminOperation, AuthorizationPolicy] = {
    AdminOperation.ASSIGN_ROLE: AuthorizationPolicy(allowed_roles=frozenset({Role.ADMIN})),
}


def policies_from_settings(config: Settings) -> dict[LoanOperation, AuthorizationPolicy]:
    """Build the per-operation policy table from configuration.

    With ``admin_bypass`` enabled the admin role is added to every policy;
    otherwise admin is a recognized role that no operation grants.
    """
    configured = {
        LoanOperation.CREATE: config.loan_create_roles,
        LoanOperation.REVIEW: config.loan_review_roles,
        LoanOperation.DECIDE: config.loan_decide_roles,
        LoanOperation.LIST: config.loan_list_roles,
    }
    policies: dict[LoanOperation, AuthorizationPolicy] = {}
    for operation, role_names in configured.items():
        roles = Role.normalize(role_names)
        if config.admin_bypass:
            roles = roles | {Role.ADMIN}
        policies[operation] = AuthorizationPolicy(
            allowed_roles=roles,
            allow_same_user=DEFAULT_POLICIES[operation].allow_same_user,
        )
    return policies
