from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool
from pydantic.alias_generators import to_camel


class LoanStatus(str, Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self in {LoanStatus.APPROVED, LoanStatus.REJECTED}


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LoanCreateRequest(_CamelModel):
    # Checked by the workflow so that missing and non-numeric amounts share its messages.
    amount: Any = Field(default=None, examples=[50000])
    purpose: Any = Field(default=None, examples=["Home renovation"])


class LoanReviewRequest(_CamelModel):
    notes: str | None = Field(
        default=None,
        examples=["Documents verified, customer has excellent credit history."],
    )


class LoanDecisionRequest(_CamelModel):
    approved: StrictBool


class LoanDTO(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    user_id: str
    amount: int | float
    purpose: str
    status: LoanStatus
    created_at: datetime
    reviewed_by: str | None = None
    approved_by: str | None = None


class LoanMutationResponse(_CamelModel):
    message: str
    loan: LoanDTO


class LoanReviewResponse(LoanMutationResponse):
    notes: str | None = None


class LoanListResponse(_CamelModel):
    count: int
    loans: list[LoanDTO]
