from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum

from app.models.loan import Loan
from app.schemas.loan import LoanStatus
from app.services.loan_errors import InvalidLoanTransitionError
from app.services.loan_repository import LoanRepository


class LoanTransition(str, Enum):
    REVIEW = "review"
    APPROVE = "approve"
    REJECT = "reject"


@dataclass(frozen=True, slots=True)
class TransitionRule:
    source: LoanStatus
    target: LoanStatus
    actor_field: str
    rejection_message: str


_DECISION_REJECTION = "Loan must be under review to approve/reject"

TRANSITION_RULES: dict[LoanTransition, TransitionRule] = {
    LoanTransition.REVIEW: TransitionRule(
        source=LoanStatus.PENDING,
        target=LoanStatus.UNDER_REVIEW,
        actor_field="reviewed_by",
        rejection_message="Loan cannot be reviewed",
    ),
    LoanTransition.APPROVE: TransitionRule(
        source=LoanStatus.UNDER_REVIEW,
        target=LoanStatus.APPROVED,
        actor_field="approved_by",
        rejection_message=_DECISION_REJECTION,
    ),
    LoanTransition.REJECT: TransitionRule(
        source=LoanStatus.UNDER_REVIEW,
        target=LoanStatus.REJECTED,
        actor_field="approved_by",
        rejection_message=_DECISION_REJECTION,
    ),
}


def decision_transition(approved: bool) -> LoanTransition:
    return LoanTransition.APPROVE if approved else LoanTransition.REJECT


def create_loan(
    repository: LoanRepository,
    *,
    user_id: str,
    amount: int | float,
    purpose: str,
    now: datetime | None = None,
) -> Loan:
    loan = Loan(
        user_id=user_id,
        amount=amount,
        purpose=purpose,
        created_at=now or datetime.now(timezone.utc),
        status=LoanStatus.PENDING,
    )
    return repository.insert(loan)


def apply_transition(
    repository: LoanRepository,
    loan_id: str,
    transition: LoanTransition,
    *,
    actor_id: str,
) -> Loan:
    """Move a loan along ``transition`` and return a copy of the updated record.

    Raises ``LoanNotFoundError`` for unknown ids and ``InvalidLoanTransitionError``
    when the loan is not in the rule's source state.
    """
    rule = TRANSITION_RULES[transition]
    with repository.checkout(loan_id) as loan:
        if loan.status != rule.source:
            raise InvalidLoanTransitionError(
                f"{rule.rejection_message}. Current status: {loan.status.value}",
                loan_id=loan_id,
                current_status=loan.status,
            )
        if getattr(loan, rule.actor_field) is not None:
            raise RuntimeError(f"{rule.actor_field} already set on loan {loan_id}")
        loan.status = rule.target
        setattr(loan, rule.actor_field, actor_id)
        return replace(loan)
