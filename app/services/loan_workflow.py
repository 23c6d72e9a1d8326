from __future__ import annotations

import math
from numbers import Real
from typing import Any, Mapping

from app.core.logging import get_audit_logger
from app.core.permissions import (
    DEFAULT_POLICIES,
    AuthorizationPolicy,
    LoanOperation,
    policies_from_settings,
)
from app.core.settings import Settings
from app.models.caller import CallerIdentity
from app.models.loan import Loan
from app.schemas.loan import LoanStatus
from app.services import authz
from app.services.loan_errors import LoanValidationError
from app.services.loan_query import LoanQueryResult, filter_loans
from app.services.loan_repository import LoanRepository
from app.services.loan_state_machine import (
    LoanTransition,
    apply_transition,
    create_loan,
    decision_transition,
)


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def validate_new_loan(amount: Any, purpose: Any) -> tuple[int | float, str]:
    missing = [
        name for name, value in (("amount", amount), ("purpose", purpose)) if _is_missing(value)
    ]
    if missing:
        raise LoanValidationError("Amount and purpose are required", details={"fields": missing})
    if (
        isinstance(amount, bool)
        or not isinstance(amount, Real)
        or (isinstance(amount, float) and not math.isfinite(amount))
        or amount <= 0
    ):
        raise LoanValidationError("Amount must be a positive number", details={"field": "amount"})
    if not isinstance(purpose, str) or not purpose.strip():
        raise LoanValidationError("Purpose must be a non-empty string", details={"field": "purpose"})
    return amount, purpose


class LoanWorkflowService:
    """Entry point for the four loan operations.

    Every operation is authorized against its declared policy before the
    repository is touched, so a denied call never has a side effect.
    """

    def __init__(
        self,
        repository: LoanRepository | None = None,
        policies: Mapping[LoanOperation, AuthorizationPolicy] | None = None,
    ) -> None:
        self.repository = repository if repository is not None else LoanRepository()
        self.policies: dict[LoanOperation, AuthorizationPolicy] = dict(policies or DEFAULT_POLICIES)

    @classmethod
    def from_settings(
        cls, config: Settings, repository: LoanRepository | None = None
    ) -> "LoanWorkflowService":
        return cls(repository=repository, policies=policies_from_settings(config))

    def _authorize(
        self, operation: LoanOperation, caller: CallerIdentity, owner_id: str | None = None
    ) -> None:
        authz.ensure_permitted(operation, self.policies[operation], caller, owner_id)

    def create_loan(self, caller: CallerIdentity, *, amount: Any, purpose: Any) -> Loan:
        self._authorize(LoanOperation.CREATE, caller)
        amount, purpose = validate_new_loan(amount, purpose)
        loan = create_loan(self.repository, user_id=caller.id, amount=amount, purpose=purpose)
        _record_loan_event("loan.created", caller, loan)
        return loan

    def review_loan(self, caller: CallerIdentity, loan_id: str, *, notes: str | None = None) -> Loan:
        # Notes are echoed by the transport only; they are not part of the record.
        self._authorize(LoanOperation.REVIEW, caller)
        loan = apply_transition(self.repository, loan_id, LoanTransition.REVIEW, actor_id=caller.id)
        _record_loan_event("loan.reviewed", caller, loan, has_notes=bool(notes))
        return loan

    def decide_loan(self, caller: CallerIdentity, loan_id: str, *, approved: bool) -> Loan:
        self._authorize(LoanOperation.DECIDE, caller)
        transition = decision_transition(approved)
        loan = apply_transition(self.repository, loan_id, transition, actor_id=caller.id)
        _record_loan_event(f"loan.{loan.status.value}", caller, loan)
        return loan

    def list_loans(
        self,
        caller: CallerIdentity,
        *,
        status: LoanStatus | str | None = None,
        user_id: str | None = None,
    ) -> LoanQueryResult:
        self._authorize(LoanOperation.LIST, caller)
        return filter_loans(self.repository.snapshot(), status=status, user_id=user_id)


def _record_loan_event(action: str, caller: CallerIdentity, loan: Loan, **extra: Any) -> None:
    get_audit_logger().info(
        action,
        extra={
            "action": action,
            "actor_id": caller.id,
            "actor_role": caller.role.value,
            "resource_type": "loan",
            "resource_id": loan.id,
            "new_status": loan.status.value,
            **extra,
        },
    )
