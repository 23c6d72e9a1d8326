from __future__ import annotations

import itertools
import threading
from contextlib import contextmanager
from dataclasses import replace
from typing import Iterator

from app.models.loan import Loan
from app.services.loan_errors import LoanNotFoundError

LOAN_ID_PREFIX = "loan_"


class LoanRepository:
    """In-memory, insertion-ordered store of loan records.

    A single lock guards the collection. ``insert`` and ``checkout`` hold it for
    the whole read-modify-write; readers only ever receive copies.
    """

    def __init__(self) -> None:
        self._loans: dict[str, Loan] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def insert(self, loan: Loan) -> Loan:
        with self._lock:
            if loan.id is not None:
                raise RuntimeError(f"Loan already stored with id {loan.id}")
            loan_id = f"{LOAN_ID_PREFIX}{next(self._ids)}"
            stored = replace(loan, id=loan_id)
            self._loans[loan_id] = stored
            return replace(stored)

    def find_by_id(self, loan_id: str) -> Loan:
        with self._lock:
            loan = self._loans.get(loan_id)
            if loan is None:
                raise LoanNotFoundError(loan_id)
            return replace(loan)

    @contextmanager
    def checkout(self, loan_id: str) -> Iterator[Loan]:
        """Yield the live record for ``loan_id`` while holding the collection lock."""
        with self._lock:
            loan = self._loans.get(loan_id)
            if loan is None:
                raise LoanNotFoundError(loan_id)
            yield loan

    def snapshot(self) -> list[Loan]:
        with self._lock:
            return [replace(loan) for loan in self._loans.values()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._loans)
