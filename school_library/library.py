from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .book import Book
from .catalog import Catalog
from .circulation import CirculationService, Clock, ReturnReceipt
from .eligibility import FailureReason, first_blocking_reason
from .errors import NotFoundError
from .ledger import LoanLedger
from .loan import Loan
from .roster import Roster
from .student import Student

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoanLine:
    """A loan joined with the names the console shows next to it."""

    loan: Loan
    student_name: str
    book_title: str

    @property
    def status(self) -> str:
        return self.loan.status


@dataclass(frozen=True)
class StudentReport:
    student: Student
    limit: int
    blocking_reason: Optional[FailureReason]
    active_loans: List[LoanLine]

    @property
    def capacity(self) -> int:
        return self.limit - self.student.loan_count

    @property
    def can_borrow(self) -> bool:
        return self.blocking_reason is None

    @property
    def fine_status(self) -> str:
        return "Owes fines" if self.student.has_fines else "Clear"


@dataclass(frozen=True)
class BookReport:
    book: Book
    current_loan: Optional[Loan]
    borrower: Optional[Student]


class Library:
    """Wires the three stores to the circulation service and answers queries."""

    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        roster: Optional[Roster] = None,
        ledger: Optional[LoanLedger] = None,
        clock: Optional[Clock] = None,
        currency: str = "$",
    ) -> None:
        self.catalog = catalog if catalog is not None else Catalog()
        self.roster = roster if roster is not None else Roster()
        self.ledger = ledger if ledger is not None else LoanLedger()
        self.circulation = CirculationService(
            self.catalog, self.roster, self.ledger, clock=clock, currency=currency
        )

    @property
    def clock(self) -> Clock:
        return self.circulation.clock

    # ------------------------- Core operations ------------------------- #
    def issue_loan(self, student_id: int, book_code: str) -> Loan:
        return self.circulation.issue_loan(student_id, book_code)

    def return_loan(self, loan_id: int) -> ReturnReceipt:
        return self.circulation.return_loan(loan_id)

    # ------------------------- Queries ------------------------- #
    def find_student(self, student_id: int) -> Optional[Student]:
        return self.roster.find_student(student_id)

    def find_book(self, code: str) -> Optional[Book]:
        return self.catalog.find_book(code)

    def list_students(self) -> List[Student]:
        return self.roster.list_students()

    def list_books(self) -> List[Book]:
        return self.catalog.list_books()

    def list_available(self) -> List[Book]:
        return self.catalog.list_available()

    def outstanding_loans(self, student_id: Optional[int] = None) -> List[Loan]:
        return self.ledger.outstanding_loans(student_id)

    def overdue_loans(self, as_of: Optional[datetime] = None) -> List[LoanLine]:
        as_of = as_of or self.clock()
        return [self._line(l) for l in self.ledger.overdue_loans(as_of)]

    def loan_history(self) -> List[LoanLine]:
        return [self._line(l) for l in self.ledger.list_loans()]

    def outstanding_lines(self) -> List[LoanLine]:
        return [self._line(l) for l in self.ledger.outstanding_loans()]

    # ------------------------- Reports ------------------------- #
    def student_report(self, student_id: int) -> StudentReport:
        student = self.roster.find_student(student_id)
        if student is None:
            raise NotFoundError("student", student_id)
        limit = self.roster.borrow_limit(student.grade)
        return StudentReport(
            student=student,
            limit=limit,
            blocking_reason=first_blocking_reason(student, limit),
            active_loans=[self._line(l) for l in self.ledger.outstanding_loans(student_id)],
        )

    def book_report(self, code: str) -> BookReport:
        book = self.catalog.find_book(code)
        if book is None:
            raise NotFoundError("book", code)
        loan = None if book.available else self.ledger.outstanding_for_book(book.code)
        borrower = self.roster.find_student(loan.student_id) if loan else None
        return BookReport(book=book, current_loan=loan, borrower=borrower)

    def get_statistics(self) -> Dict[str, Any]:
        students = self.roster.list_students()
        return {
            "total_students": len(students),
            "total_books": len(self.catalog),
            "available_books": len(self.catalog.list_available()),
            "total_loans": len(self.ledger),
            "outstanding_loans": len(self.ledger.outstanding_loans()),
            "total_fines": sum((s.fine_balance for s in students), Decimal("0.00")),
        }

    def audit(self) -> List[str]:
        """Describe every place where the stores disagree with each other."""
        problems: List[str] = []
        outstanding = self.ledger.outstanding_loans()

        for student in self.roster.list_students():
            held = sum(1 for l in outstanding if l.student_id == student.student_id)
            if held != student.loan_count:
                problems.append(
                    f"Student {student.student_id} has loan count {student.loan_count} "
                    f"but {held} outstanding loan(s)."
                )

        for book in self.catalog.list_books():
            held = sum(1 for l in outstanding if l.book_code == book.code)
            if held > 1:
                problems.append(f"Book {book.code} is on {held} outstanding loans.")
            elif book.available and held == 1:
                problems.append(f"Book {book.code} is marked available but is on loan.")
            elif not book.available and held == 0:
                problems.append(f"Book {book.code} is marked on loan but has no outstanding loan.")

        for loan in self.ledger.list_loans():
            if self.roster.find_student(loan.student_id) is None:
                problems.append(f"Loan {loan.loan_id} references unknown student {loan.student_id}.")
            if self.catalog.find_book(loan.book_code) is None:
                problems.append(f"Loan {loan.loan_id} references unknown book {loan.book_code}.")

        if problems:
            logger.warning(f"Audit found {len(problems)} inconsistency(ies)")
        return problems

    # ------------------------- Utilities ------------------------- #
    def _line(self, loan: Loan) -> LoanLine:
        student = self.roster.find_student(loan.student_id)
        book = self.catalog.find_book(loan.book_code)
        return LoanLine(
            loan=loan,
            student_name=student.name if student else f"#{loan.student_id}",
            book_title=book.title if book else loan.book_code,
        )
