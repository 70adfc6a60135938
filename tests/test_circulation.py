from datetime import timedelta
from decimal import Decimal

import pytest

from school_library.book import Book
from school_library.eligibility import FailureReason
from school_library.errors import EligibilityError, NotFoundError
from school_library.student import Student


@pytest.fixture
def stocked(catalog, roster):
    roster.add(Student(1, "Ana García", 9))
    roster.add(Student(2, "Carlos Ruiz", 7, fine_balance="15.00"))
    roster.add(Student(4, "José Martínez", 8, active=False))
    for code, title in (("L001", "Cien años de soledad"), ("L003", "Química básica"), ("L005", "Don Quijote")):
        catalog.add(Book(code, title, "ficcion"))


def assert_consistent(catalog, roster, ledger):
    outstanding = ledger.outstanding_loans()
    for student in roster.list_students():
        assert student.loan_count == len(ledger.outstanding_loans(student.student_id))
    for book in catalog.list_books():
        held = [l for l in outstanding if l.book_code == book.code]
        assert (not book.available) == (len(held) == 1)
        assert len(held) <= 1


def test_issue_loan(service, catalog, roster, ledger, clock, stocked):
    loan = service.issue_loan(1, "l001")

    assert loan.loan_id == 1
    assert loan.book_code == "L001"
    assert loan.loaned_at == clock.now
    assert loan.due_at == clock.now + timedelta(days=7)
    assert catalog.find_book("L001").available is False
    assert roster.find_student(1).loan_count == 1
    assert ledger.outstanding_loans(1) == [loan]
    assert_consistent(catalog, roster, ledger)


def test_return_ten_days_late(service, catalog, roster, ledger, clock, stocked):
    loan = service.issue_loan(1, "L001")
    clock.advance(days=7 + 10)

    receipt = service.return_loan(loan.loan_id)

    assert receipt.fine_charged == Decimal("20.00")
    assert receipt.days_late == 10
    assert roster.find_student(1).fine_balance == Decimal("20.00")
    assert roster.find_student(1).loan_count == 0
    assert catalog.find_book("L001").available is True
    assert loan.returned is True
    assert loan.returned_at == clock.now
    assert_consistent(catalog, roster, ledger)


def test_on_time_return_adds_nothing(service, roster, clock, stocked):
    loan = service.issue_loan(1, "L001")
    clock.advance(days=7, hours=12)
    receipt = service.return_loan(loan.loan_id)
    assert receipt.fine_charged == Decimal("0.00")
    assert roster.find_student(1).fine_balance == Decimal("0.00")


def test_fines_accumulate_without_deactivating(service, roster, clock, stocked):
    first = service.issue_loan(1, "L001")
    second = service.issue_loan(1, "L003")
    clock.advance(days=9)
    service.return_loan(first.loan_id)
    service.return_loan(second.loan_id)

    ana = roster.find_student(1)
    assert ana.fine_balance == Decimal("8.00")
    assert ana.active is True
    # the balance alone now blocks new loans
    assert service.check_loan(1, "L005").reasons == (FailureReason.FINES,)


def test_second_return_is_not_found(service, stocked):
    loan = service.issue_loan(1, "L001")
    service.return_loan(loan.loan_id)
    with pytest.raises(NotFoundError):
        service.return_loan(loan.loan_id)


def test_unknown_ids(service, stocked):
    with pytest.raises(NotFoundError, match="Student 99 not found"):
        service.issue_loan(99, "L001")
    with pytest.raises(NotFoundError, match="Book L999 not found"):
        service.issue_loan(1, "L999")
    with pytest.raises(NotFoundError) as excinfo:
        service.return_loan(42)
    assert excinfo.value.kind == "outstanding loan"
    assert isinstance(excinfo.value, LookupError)


def test_rejected_loan_mutates_nothing(service, catalog, roster, ledger, stocked):
    with pytest.raises(EligibilityError) as excinfo:
        service.issue_loan(2, "L001")
    assert excinfo.value.reasons == (FailureReason.FINES,)
    assert len(ledger) == 0
    assert roster.find_student(2).loan_count == 0
    assert catalog.find_book("L001").available is True


def test_check_loan_reports_rejection_without_raising(service, stocked):
    decision = service.check_loan(4, "L001")
    assert decision.approved is False
    assert decision.reasons == (FailureReason.INACTIVE,)
    assert decision.limit == 2


def test_borrow_limit_is_enforced(service, stocked):
    service.issue_loan(1, "L001")
    service.issue_loan(1, "L003")
    with pytest.raises(EligibilityError) as excinfo:
        service.issue_loan(1, "L005")
    assert excinfo.value.reasons == (FailureReason.LIMIT,)


def test_book_cannot_be_lent_twice(service, roster, stocked):
    roster.add(Student(3, "María López", 9))
    service.issue_loan(1, "L001")
    decision = service.check_loan(3, "L001")
    assert decision.reasons == (FailureReason.UNAVAILABLE,)


def test_stale_decision_is_rechecked_on_commit(service, roster, ledger, stocked):
    roster.add(Student(3, "María López", 9))
    for_ana = service.check_loan(1, "L001")
    for_maria = service.check_loan(3, "L001")
    assert for_ana.approved and for_maria.approved

    service.commit_loan(for_ana)
    with pytest.raises(EligibilityError) as excinfo:
        service.commit_loan(for_maria)
    assert excinfo.value.reasons == (FailureReason.UNAVAILABLE,)
    assert len(ledger) == 1


def test_declined_confirmation_is_a_no_op(service, catalog, roster, ledger, stocked):
    service.check_loan(1, "L001")
    assert len(ledger) == 0
    assert catalog.find_book("L001").available is True
    assert roster.find_student(1).loan_count == 0


def test_preview_return_does_not_mutate(service, roster, clock, stocked):
    loan = service.issue_loan(1, "L001")
    clock.advance(days=12)
    quote = service.preview_return(loan.loan_id)
    assert quote.days_late == 5
    assert quote.fine == Decimal("10.00")
    assert loan.outstanding
    assert roster.find_student(1).fine_balance == Decimal("0.00")

    receipt = service.commit_return(quote)
    assert receipt.fine_charged == Decimal("10.00")
    with pytest.raises(NotFoundError):
        service.commit_return(quote)


def test_loan_ids_are_never_reused(service, clock, stocked):
    first = service.issue_loan(1, "L001")
    service.return_loan(first.loan_id)
    second = service.issue_loan(1, "L001")
    assert second.loan_id == first.loan_id + 1


def test_invariants_hold_through_a_session(service, catalog, roster, ledger, clock, stocked):
    roster.add(Student(3, "María López", 9))
    assert_consistent(catalog, roster, ledger)
    a = service.issue_loan(1, "L001")
    assert_consistent(catalog, roster, ledger)
    b = service.issue_loan(3, "L003")
    assert_consistent(catalog, roster, ledger)
    clock.advance(days=3)
    service.return_loan(a.loan_id)
    assert_consistent(catalog, roster, ledger)
    service.issue_loan(3, "L001")
    assert_consistent(catalog, roster, ledger)
    clock.advance(days=20)
    service.return_loan(b.loan_id)
    assert_consistent(catalog, roster, ledger)
