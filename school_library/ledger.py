from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Optional

from .book import normalize_code
from .loan import Loan

logger = logging.getLogger(__name__)


class LoanLedger:
    """Append-only history of loans.

    Records are never removed; returning a loan only flips its returned flag.
    Ids come from ``next_id()`` and are never reused.
    """

    def __init__(self) -> None:
        self._loans: Dict[int, Loan] = {}
        self._next_id = 1

    def next_id(self) -> int:
        return self._next_id

    def append(self, loan: Loan) -> None:
        if loan.loan_id in self._loans:
            raise ValueError(f"Loan with id {loan.loan_id} already exists.")
        self._loans[loan.loan_id] = loan
        self._next_id = max(self._next_id, loan.loan_id + 1)
        logger.debug(f"Appended loan {loan.loan_id}")

    def loan_by_id(self, loan_id: int, outstanding_only: bool = False) -> Optional[Loan]:
        loan = self._loans.get(loan_id)
        if loan is None or (outstanding_only and loan.returned):
            return None
        return loan

    def list_loans(self) -> List[Loan]:
        return sorted(self._loans.values(), key=lambda l: l.loan_id)

    def outstanding_loans(self, student_id: Optional[int] = None) -> List[Loan]:
        return [
            l
            for l in self.list_loans()
            if l.outstanding and (student_id is None or l.student_id == student_id)
        ]

    def outstanding_for_book(self, code: str) -> Optional[Loan]:
        code = normalize_code(code)
        return next((l for l in self.outstanding_loans() if l.book_code == code), None)

    def overdue_loans(self, as_of: datetime) -> List[Loan]:
        return [l for l in self.outstanding_loans() if l.is_overdue(as_of)]

    def __len__(self) -> int:
        return len(self._loans)
