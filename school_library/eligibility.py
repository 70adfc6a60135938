"""Borrowing eligibility checks.

Every condition is evaluated and reported, passing or failing, so the
librarian sees the whole checklist before confirming or cancelling a loan.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .book import Book
from .student import Student


class FailureReason(Enum):
    INACTIVE = "inactive"
    FINES = "fines"
    LIMIT = "limit"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class CheckResult:
    reason: FailureReason
    passed: bool
    detail: str


@dataclass(frozen=True)
class EligibilityDecision:
    checks: Tuple[CheckResult, ...]

    @property
    def approved(self) -> bool:
        return all(c.passed for c in self.checks)

    @property
    def reasons(self) -> Tuple[FailureReason, ...]:
        return tuple(c.reason for c in self.checks if not c.passed)


def _check_active(student: Student) -> CheckResult:
    if student.active:
        return CheckResult(FailureReason.INACTIVE, True, "Student account is active.")
    return CheckResult(FailureReason.INACTIVE, False, "Student account is INACTIVE.")


def _check_fines(student: Student, currency: str) -> CheckResult:
    if student.fine_balance == 0:
        return CheckResult(FailureReason.FINES, True, "Student has no outstanding fines.")
    return CheckResult(
        FailureReason.FINES,
        False,
        f"Student has outstanding fines: {currency}{student.fine_balance:.2f}.",
    )


def _check_limit(student: Student, limit: int) -> CheckResult:
    if student.loan_count < limit:
        return CheckResult(
            FailureReason.LIMIT,
            True,
            f"Student can take more books ({student.loan_count}/{limit}).",
        )
    return CheckResult(
        FailureReason.LIMIT,
        False,
        f"Student has reached the book limit ({limit}).",
    )


def _check_book(book: Book) -> CheckResult:
    if book.available:
        return CheckResult(FailureReason.UNAVAILABLE, True, "Book is available.")
    return CheckResult(FailureReason.UNAVAILABLE, False, f"Book {book.code} is not available.")


def student_checks(student: Student, limit: int, currency: str = "$") -> Tuple[CheckResult, ...]:
    """The three conditions that depend on the student alone."""
    return (
        _check_active(student),
        _check_fines(student, currency),
        _check_limit(student, limit),
    )


def can_borrow(student: Student, book: Book, limit: int, currency: str = "$") -> EligibilityDecision:
    """Decide whether ``student`` may take ``book`` given their borrow ``limit``."""
    return EligibilityDecision(checks=student_checks(student, limit, currency) + (_check_book(book),))


def first_blocking_reason(student: Student, limit: int) -> Optional[FailureReason]:
    """First failing student-side condition, in checklist order, or None."""
    for check in student_checks(student, limit):
        if not check.passed:
            return check.reason
    return None
