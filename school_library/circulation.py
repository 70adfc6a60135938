"""Loan issue and return, the only operations that mutate the stores.

Both operations come in two phases. ``check_loan``/``preview_return`` read
state and describe what would happen; ``commit_loan``/``commit_return``
apply it. A caller that wants a confirmation step asks between the two, so
declining never leaves anything half done.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional, Tuple

from .book import Book
from .catalog import Catalog
from .eligibility import EligibilityDecision, FailureReason, can_borrow
from .errors import EligibilityError, NotFoundError
from .fines import compute_fine, days_late
from .ledger import LoanLedger
from .loan import Loan
from .roster import Roster
from .student import Student

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class LoanDecision:
    student: Student
    book: Book
    limit: int
    eligibility: EligibilityDecision

    @property
    def approved(self) -> bool:
        return self.eligibility.approved

    @property
    def reasons(self) -> Tuple[FailureReason, ...]:
        return self.eligibility.reasons


@dataclass(frozen=True)
class ReturnQuote:
    loan: Loan
    student: Student
    book: Book
    returned_at: datetime
    days_late: int
    fine: Decimal


@dataclass(frozen=True)
class ReturnReceipt:
    loan: Loan
    student: Student
    book: Book
    days_late: int
    fine_charged: Decimal


class CirculationService:
    def __init__(
        self,
        catalog: Catalog,
        roster: Roster,
        ledger: LoanLedger,
        clock: Optional[Clock] = None,
        currency: str = "$",
    ) -> None:
        self.catalog = catalog
        self.roster = roster
        self.ledger = ledger
        self.clock: Clock = clock or datetime.now
        self.currency = currency

    # ------------------------- Issue ------------------------- #
    def check_loan(self, student_id: int, book_code: str) -> LoanDecision:
        """Run the eligibility checklist for a loan request without changing anything."""
        student = self._require_student(student_id)
        book = self.catalog.find_book(book_code)
        if book is None:
            raise NotFoundError("book", book_code)
        limit = self.roster.borrow_limit(student.grade)
        return LoanDecision(
            student=student,
            book=book,
            limit=limit,
            eligibility=can_borrow(student, book, limit, self.currency),
        )

    def commit_loan(self, decision: LoanDecision) -> Loan:
        """Issue the loan described by ``decision``.

        Eligibility is evaluated again against current state, so a stale
        decision cannot push a student past their limit or lend a book twice.
        """
        current = can_borrow(decision.student, decision.book, decision.limit, self.currency)
        if not current.approved:
            logger.warning(
                f"Loan rejected for student {decision.student.student_id}, "
                f"book {decision.book.code}: {[r.value for r in current.reasons]}"
            )
            raise EligibilityError(current.reasons)

        loan = Loan.open(
            loan_id=self.ledger.next_id(),
            student_id=decision.student.student_id,
            book_code=decision.book.code,
            when=self.clock(),
        )
        self.ledger.append(loan)
        decision.student.loan_count += 1
        decision.book.available = False
        logger.info(
            f"Loan {loan.loan_id} issued: student={loan.student_id} book={loan.book_code} "
            f"due={loan.due_at.date().isoformat()}"
        )
        return loan

    def issue_loan(self, student_id: int, book_code: str) -> Loan:
        return self.commit_loan(self.check_loan(student_id, book_code))

    # ------------------------- Return ------------------------- #
    def preview_return(self, loan_id: int) -> ReturnQuote:
        """Work out the fine a return right now would cost, without recording it."""
        loan = self.ledger.loan_by_id(loan_id, outstanding_only=True)
        if loan is None:
            raise NotFoundError("outstanding loan", loan_id)
        student = self._require_student(loan.student_id)
        book = self.catalog.find_book(loan.book_code)
        if book is None:
            raise NotFoundError("book", loan.book_code)
        now = self.clock()
        return ReturnQuote(
            loan=loan,
            student=student,
            book=book,
            returned_at=now,
            days_late=days_late(loan.due_at, now),
            fine=compute_fine(loan.due_at, now),
        )

    def commit_return(self, quote: ReturnQuote) -> ReturnReceipt:
        loan = quote.loan
        if self.ledger.loan_by_id(loan.loan_id, outstanding_only=True) is None:
            raise NotFoundError("outstanding loan", loan.loan_id)

        fine = compute_fine(loan.due_at, quote.returned_at)
        loan.mark_returned(quote.returned_at)
        quote.book.available = True
        quote.student.loan_count -= 1
        # no automatic deactivation: a balance only blocks new loans
        quote.student.fine_balance += fine
        if fine > 0:
            logger.info(
                f"Loan {loan.loan_id} returned {quote.days_late} day(s) late; "
                f"fine {fine} charged to student {quote.student.student_id}"
            )
        else:
            logger.info(f"Loan {loan.loan_id} returned on time")
        return ReturnReceipt(
            loan=loan,
            student=quote.student,
            book=quote.book,
            days_late=days_late(loan.due_at, quote.returned_at),
            fine_charged=fine,
        )

    def return_loan(self, loan_id: int) -> ReturnReceipt:
        return self.commit_return(self.preview_return(loan_id))

    # ------------------------- Helpers ------------------------- #
    def _require_student(self, student_id: int) -> Student:
        student = self.roster.find_student(student_id)
        if student is None:
            raise NotFoundError("student", student_id)
        return student
