from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Coerce ints, floats and strings to a two-place Decimal."""
    return Decimal(str(value)).quantize(Decimal("0.01"))


@dataclass
class Student:
    """A student registered with the library.

    ``loan_count`` and ``fine_balance`` are maintained by the circulation
    service; nothing else writes them once the student is registered.
    """

    student_id: int
    name: str
    grade: int
    active: bool = True
    fine_balance: Decimal = ZERO
    loan_count: int = 0

    def __post_init__(self) -> None:
        self.name = self.name.strip()
        self.fine_balance = to_money(self.fine_balance)
        if self.fine_balance < 0:
            raise ValueError(f"Fine balance cannot be negative: {self.fine_balance}")
        if self.loan_count < 0:
            raise ValueError(f"Loan count cannot be negative: {self.loan_count}")

    @property
    def has_fines(self) -> bool:
        return self.fine_balance > 0

    @property
    def status(self) -> str:
        return "Active" if self.active else "Inactive"

    def to_dict(self) -> dict:
        return {
            "id": self.student_id,
            "name": self.name,
            "grade": self.grade,
            "active": self.active,
            "fine_balance": str(self.fine_balance),
            "loan_count": self.loan_count,
        }
