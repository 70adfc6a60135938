from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from school_library.fines import DAILY_FINE, compute_fine, days_late

DUE = datetime(2025, 10, 10, 9, 0)


def test_same_day_is_free():
    assert compute_fine(DUE, DUE) == Decimal("0.00")


def test_early_return_never_negative():
    assert compute_fine(DUE, DUE - timedelta(days=1)) == Decimal("0.00")
    assert compute_fine(DUE, DUE - timedelta(days=30)) == Decimal("0.00")
    assert days_late(DUE, DUE - timedelta(days=3)) == 0


@pytest.mark.parametrize("late,expected", [(1, "2.00"), (5, "10.00"), (10, "20.00")])
def test_fine_per_day_late(late, expected):
    assert compute_fine(DUE, DUE + timedelta(days=late)) == Decimal(expected)


def test_time_of_day_is_ignored():
    # Late in the evening of the due day is still on time
    assert compute_fine(DUE, datetime(2025, 10, 10, 23, 59)) == Decimal("0.00")
    # Just after midnight counts as a full day late
    assert compute_fine(DUE, datetime(2025, 10, 11, 0, 1)) == DAILY_FINE
    assert days_late(datetime(2025, 10, 10, 23, 0), datetime(2025, 10, 11, 1, 0)) == 1


def test_accepts_plain_dates():
    assert compute_fine(date(2025, 10, 10), date(2025, 10, 13)) == Decimal("6.00")
    assert compute_fine(date(2025, 10, 10), datetime(2025, 10, 12, 8, 0)) == Decimal("4.00")


def test_fine_is_two_place_decimal():
    fine = compute_fine(DUE, DUE + timedelta(days=3))
    assert isinstance(fine, Decimal)
    assert fine.as_tuple().exponent == -2
