from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query, status

from app.api import deps
from app.models.caller import CallerIdentity
from app.schemas.loan import (
    LoanCreateRequest,
    LoanDecisionRequest,
    LoanDTO,
    LoanListResponse,
    LoanMutationResponse,
    LoanReviewRequest,
    LoanReviewResponse,
    LoanStatus,
)
from app.services.loan_workflow import LoanWorkflowService

router = APIRouter(prefix="/loans", tags=["loans"])

_ERROR_RESPONSES = {
    400: {"description": "Invalid input or illegal status transition"},
    401: {"description": "Missing or invalid bearer token"},
    403: {"description": "Caller role not permitted"},
}


@router.post(
    "",
    response_model=LoanMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new loan application",
    responses=_ERROR_RESPONSES,
)
async def create_loan(
    payload: LoanCreateRequest,
    caller: CallerIdentity = Depends(deps.require_authenticated_caller),
    service: LoanWorkflowService = Depends(deps.get_loan_service),
) -> LoanMutationResponse:
    loan = service.create_loan(caller, amount=payload.amount, purpose=payload.purpose)
    return LoanMutationResponse(
        message="Loan application created successfully",
        loan=LoanDTO.model_validate(loan),
    )


@router.put(
    "/{loan_id}/review",
    response_model=LoanReviewResponse,
    summary="Move a pending loan to under review",
    responses={**_ERROR_RESPONSES, 404: {"description": "Loan not found"}},
)
async def review_loan(
    loan_id: str,
    payload: LoanReviewRequest | None = None,
    caller: CallerIdentity = Depends(deps.require_authenticated_caller),
    service: LoanWorkflowService = Depends(deps.get_loan_service),
) -> LoanReviewResponse:
    notes = payload.notes if payload is not None else None
    loan = service.review_loan(caller, loan_id, notes=notes)
    return LoanReviewResponse(
        message="Loan marked as under review",
        loan=LoanDTO.model_validate(loan),
        notes=notes,
    )


@router.put(
    "/{loan_id}/approve",
    response_model=LoanMutationResponse,
    summary="Approve or reject a loan under review",
    responses={**_ERROR_RESPONSES, 404: {"description": "Loan not found"}},
)
async def decide_loan(
    loan_id: str,
    payload: LoanDecisionRequest,
    caller: CallerIdentity = Depends(deps.require_authenticated_caller),
    service: LoanWorkflowService = Depends(deps.get_loan_service),
) -> LoanMutationResponse:
    loan = service.decide_loan(caller, loan_id, approved=payload.approved)
    outcome = "approved" if payload.approved else "rejected"
    return LoanMutationResponse(
        message=f"Loan {outcome} successfully",
        loan=LoanDTO.model_validate(loan),
    )


@router.get(
    "",
    response_model=LoanListResponse,
    summary="List loan applications",
    responses={401: _ERROR_RESPONSES[401], 403: _ERROR_RESPONSES[403]},
)
async def list_loans(
    # A blank filter means no filter, the same as omitting it.
    status_filter: LoanStatus | Literal[""] | None = Query(default=None, alias="status"),
    user_id: str | None = Query(default=None, alias="userId"),
    caller: CallerIdentity = Depends(deps.require_authenticated_caller),
    service: LoanWorkflowService = Depends(deps.get_loan_service),
) -> LoanListResponse:
    result = service.list_loans(caller, status=status_filter or None, user_id=user_id or None)
    return LoanListResponse(
        count=result.count,
        loans=[LoanDTO.model_validate(loan) for loan in result.loans],
    )
