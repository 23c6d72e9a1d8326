from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.schemas.loan import LoanStatus


@dataclass(slots=True)
class Loan:
    user_id: str
    amount: float
    purpose: str
    created_at: datetime
    status: LoanStatus = LoanStatus.PENDING
    id: str | None = None
    reviewed_by: str | None = None
    approved_by: str | None = None
