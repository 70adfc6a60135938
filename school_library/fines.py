from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Union

DAILY_FINE = Decimal("2.00")

DateLike = Union[date, datetime]


def _calendar_day(value: DateLike) -> date:
    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        return value.date()
    return value


def days_late(due: DateLike, returned: DateLike) -> int:
    """Whole calendar days between the due date and the return, never negative."""
    delta = (_calendar_day(returned) - _calendar_day(due)).days
    return max(delta, 0)


def compute_fine(due: DateLike, returned: DateLike) -> Decimal:
    """Overdue penalty for a return on ``returned`` of a loan due on ``due``.

    Time of day is ignored on both sides. Early and on-time returns cost nothing.
    """
    late = days_late(due, returned)
    if late <= 0:
        return Decimal("0.00")
    return (DAILY_FINE * late).quantize(Decimal("0.01"))
