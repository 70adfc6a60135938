from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional


LOAN_PERIOD_DAYS = 7


@dataclass
class Loan:
    loan_id: int
    student_id: int
    book_code: str
    loaned_at: datetime
    due_at: datetime
    returned: bool = False
    returned_at: Optional[datetime] = None

    @classmethod
    def open(cls, loan_id: int, student_id: int, book_code: str, when: datetime) -> "Loan":
        """Create an outstanding loan due ``LOAN_PERIOD_DAYS`` after ``when``."""
        return cls(
            loan_id=loan_id,
            student_id=student_id,
            book_code=book_code,
            loaned_at=when,
            due_at=when + timedelta(days=LOAN_PERIOD_DAYS),
        )

    @property
    def outstanding(self) -> bool:
        return not self.returned

    @property
    def status(self) -> str:
        return "Returned" if self.returned else "Outstanding"

    def is_overdue(self, as_of: datetime) -> bool:
        return self.outstanding and as_of.date() > self.due_at.date()

    def mark_returned(self, when: datetime) -> None:
        # closed loans are history and never reopen
        if self.returned:
            raise ValueError(f"Loan {self.loan_id} was already returned.")
        self.returned = True
        self.returned_at = when

    def to_dict(self) -> dict:
        return {
            "id": self.loan_id,
            "student_id": self.student_id,
            "book_code": self.book_code,
            "loaned_at": self.loaned_at.isoformat(),
            "due_at": self.due_at.isoformat(),
            "returned": self.returned,
            "returned_at": self.returned_at.isoformat() if self.returned_at else None,
        }
