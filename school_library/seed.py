from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from .book import Book
from .circulation import Clock
from .library import Library
from .loan import Loan
from .student import Student

logger = logging.getLogger(__name__)

STUDENTS = [
    {"id": 1, "name": "Ana García", "grade": 9, "fines": "0.00", "active": True},
    {"id": 2, "name": "Carlos Ruiz", "grade": 7, "fines": "15.00", "active": True},
    {"id": 3, "name": "María López", "grade": 9, "fines": "0.00", "active": True},
    {"id": 4, "name": "José Martínez", "grade": 8, "fines": "50.00", "active": False},
]

BOOKS = [
    {"code": "L001", "title": "Cien años de soledad", "category": "ficcion"},
    {"code": "L002", "title": "El principito", "category": "ficcion"},
    {"code": "L003", "title": "Química básica", "category": "academico"},
    {"code": "L004", "title": "Historia de El Salvador", "category": "academico"},
    {"code": "L005", "title": "Don Quijote", "category": "ficcion"},
]

LOANS = [
    {"id": 1, "student_id": 2, "book_code": "L002", "loaned_at": datetime(2025, 10, 3)},
]


def restore_loan(library: Library, loan: Loan) -> None:
    """Load an existing loan record and bring counters and availability in line with it."""
    student = library.find_student(loan.student_id)
    book = library.find_book(loan.book_code)
    if student is None or book is None:
        raise ValueError(f"Loan {loan.loan_id} references an unknown student or book.")
    library.ledger.append(loan)
    if loan.outstanding:
        if not book.available:
            raise ValueError(f"Book {book.code} is already on loan.")
        student.loan_count += 1
        book.available = False


def seed_demo_data(library: Library) -> None:
    for row in STUDENTS:
        library.roster.add(
            Student(
                student_id=row["id"],
                name=row["name"],
                grade=row["grade"],
                active=row["active"],
                fine_balance=row["fines"],
            )
        )
    for row in BOOKS:
        library.catalog.add(Book.from_dict(row))
    for row in LOANS:
        restore_loan(
            library,
            Loan.open(
                loan_id=row["id"],
                student_id=row["student_id"],
                book_code=row["book_code"],
                when=row["loaned_at"],
            ),
        )
    logger.info(
        f"Seeded {len(library.roster)} students, {len(library.catalog)} books, "
        f"{len(library.ledger)} loans"
    )


def build_demo_library(clock: Optional[Clock] = None, currency: str = "$") -> Library:
    library = Library(clock=clock, currency=currency)
    seed_demo_data(library)
    return library
