from datetime import datetime, timedelta

import pytest

from school_library.catalog import Catalog
from school_library.circulation import CirculationService
from school_library.ledger import LoanLedger
from school_library.roster import Roster
from school_library.seed import build_demo_library


class FakeClock:
    """Callable clock that only moves when a test moves it."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: int = 0, hours: int = 0) -> None:
        self.now = self.now + timedelta(days=days, hours=hours)


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 10, 15, 10, 30))


@pytest.fixture
def catalog():
    return Catalog()


@pytest.fixture
def roster():
    return Roster()


@pytest.fixture
def ledger():
    return LoanLedger()


@pytest.fixture
def service(catalog, roster, ledger, clock):
    return CirculationService(catalog, roster, ledger, clock=clock)


@pytest.fixture
def lib(clock):
    # Fresh seeded library per test so mutations never leak between tests
    return build_demo_library(clock=clock)
