from __future__ import annotations

from typing import Any

from app.schemas.loan import LoanStatus


class LoanWorkflowError(ValueError):
    """Expected, caller-recoverable outcome of a loan workflow operation."""

    code = "loan_workflow_error"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class LoanValidationError(LoanWorkflowError):
    code = "validation_error"


class LoanNotFoundError(LoanWorkflowError):
    code = "loan_not_found"

    def __init__(self, loan_id: str) -> None:
        super().__init__("Loan not found", details={"loan_id": loan_id})
        self.loan_id = loan_id


class InvalidLoanTransitionError(LoanWorkflowError):
    code = "invalid_transition"

    def __init__(self, message: str, *, loan_id: str, current_status: LoanStatus) -> None:
        super().__init__(
            message,
            details={"loan_id": loan_id, "current_status": current_status.value},
        )
        self.loan_id = loan_id
        self.current_status = current_status


class LoanAuthorizationError(LoanWorkflowError):
    code = "forbidden"
