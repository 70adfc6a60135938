"""School Library - circulation core and console front end.

Modules:
- Data models (book.py, student.py, loan.py)
- In-memory stores (catalog.py, roster.py, ledger.py)
- Business rules (eligibility.py, fines.py)
- Loan issue and return (circulation.py)
- Facade and reports (library.py)
- Demo data (seed.py)
- CLI interface (main.py, ui_helpers.py)
"""

from .book import Book
from .catalog import Catalog
from .circulation import CirculationService, LoanDecision, ReturnQuote, ReturnReceipt
from .eligibility import EligibilityDecision, FailureReason, can_borrow
from .errors import CirculationError, EligibilityError, NotFoundError
from .fines import DAILY_FINE, compute_fine, days_late
from .ledger import LoanLedger
from .library import BookReport, Library, LoanLine, StudentReport
from .loan import LOAN_PERIOD_DAYS, Loan
from .roster import Roster, borrow_limit
from .seed import build_demo_library, seed_demo_data
from .student import Student

__all__ = [
    "Book",
    "Student",
    "Loan",
    "LOAN_PERIOD_DAYS",
    "Catalog",
    "Roster",
    "borrow_limit",
    "LoanLedger",
    "FailureReason",
    "EligibilityDecision",
    "can_borrow",
    "DAILY_FINE",
    "compute_fine",
    "days_late",
    "CirculationService",
    "LoanDecision",
    "ReturnQuote",
    "ReturnReceipt",
    "Library",
    "LoanLine",
    "StudentReport",
    "BookReport",
    "build_demo_library",
    "seed_demo_data",
    "CirculationError",
    "NotFoundError",
    "EligibilityError",
]
