from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from app.models.loan import Loan
from app.schemas.loan import LoanStatus


@dataclass(frozen=True, slots=True)
class LoanQueryResult:
    loans: tuple[Loan, ...]

    @property
    def count(self) -> int:
        return len(self.loans)


def filter_loans(
    loans: Iterable[Loan],
    *,
    status: LoanStatus | str | None = None,
    user_id: str | None = None,
) -> LoanQueryResult:
    """Keep loans matching every supplied predicate, in their original order."""
    wanted_status = LoanStatus(status) if status is not None else None
    matched = tuple(
        loan
        for loan in loans
        if (wanted_status is None or loan.status == wanted_status)
        and (user_id is None or loan.user_id == user_id)
    )
    return LoanQueryResult(loans=matched)
