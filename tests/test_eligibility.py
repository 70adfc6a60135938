from decimal import Decimal

import pytest

from school_library.book import Book
from school_library.eligibility import FailureReason, can_borrow, first_blocking_reason
from school_library.roster import borrow_limit
from school_library.student import Student


def make_student(**overrides):
    data = {"student_id": 1, "name": "Ana García", "grade": 9}
    data.update(overrides)
    return Student(**data)


@pytest.fixture
def book():
    return Book("L001", "Cien años de soledad", "ficcion")


@pytest.mark.parametrize("grade,limit", [(6, 4), (7, 3), (8, 2), (9, 2), (5, 0), (10, 0), (0, 0), (-1, 0)])
def test_borrow_limit_table(grade, limit):
    assert borrow_limit(grade) == limit


def test_all_conditions_met(book):
    decision = can_borrow(make_student(), book, borrow_limit(9))
    assert decision.approved
    assert decision.reasons == ()
    assert len(decision.checks) == 4
    assert all(c.passed for c in decision.checks)


def test_inactive_student(book):
    decision = can_borrow(make_student(active=False), book, 2)
    assert not decision.approved
    assert set(decision.reasons) == {FailureReason.INACTIVE}


def test_any_positive_fine_blocks(book):
    decision = can_borrow(make_student(fine_balance=Decimal("0.01")), book, 2)
    assert not decision.approved
    assert set(decision.reasons) == {FailureReason.FINES}


def test_at_borrow_limit(book):
    decision = can_borrow(make_student(loan_count=2), book, 2)
    assert set(decision.reasons) == {FailureReason.LIMIT}


def test_grade_without_borrowing_rights(book):
    decision = can_borrow(make_student(grade=5), book, borrow_limit(5))
    assert decision.reasons == (FailureReason.LIMIT,)


def test_unavailable_book():
    taken = Book("L002", "El principito", "ficcion", available=False)
    decision = can_borrow(make_student(), taken, 2)
    assert decision.reasons == (FailureReason.UNAVAILABLE,)


def test_every_failing_condition_is_reported_in_order():
    student = make_student(active=False, fine_balance="50.00", loan_count=2, grade=8)
    taken = Book("L002", "El principito", "ficcion", available=False)
    decision = can_borrow(student, taken, 2)
    assert decision.reasons == (
        FailureReason.INACTIVE,
        FailureReason.FINES,
        FailureReason.LIMIT,
        FailureReason.UNAVAILABLE,
    )


def test_checklist_includes_passing_conditions(book):
    decision = can_borrow(make_student(fine_balance="15.00", loan_count=1, grade=7), book, 3)
    details = [(c.reason, c.passed) for c in decision.checks]
    assert details == [
        (FailureReason.INACTIVE, True),
        (FailureReason.FINES, False),
        (FailureReason.LIMIT, True),
        (FailureReason.UNAVAILABLE, True),
    ]
    assert "$15.00" in decision.checks[1].detail
    assert "(1/3)" in decision.checks[2].detail


def test_first_blocking_reason_order():
    assert first_blocking_reason(make_student(), 2) is None
    assert first_blocking_reason(make_student(active=False, fine_balance="1.00"), 2) == FailureReason.INACTIVE
    assert first_blocking_reason(make_student(fine_balance="1.00", loan_count=2), 2) == FailureReason.FINES
    assert first_blocking_reason(make_student(loan_count=2), 2) == FailureReason.LIMIT
