"""Exceptions raised by the circulation core."""

from __future__ import annotations

from typing import Iterable, Tuple


class CirculationError(Exception):
    """Base class for every circulation failure reported to the caller."""


class NotFoundError(CirculationError, LookupError):
    """A student id, book code or outstanding loan id does not exist."""

    def __init__(self, kind: str, key) -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"{kind.capitalize()} {key} not found.")


class EligibilityError(CirculationError, ValueError):
    """A loan was committed although one or more eligibility checks failed."""

    def __init__(self, reasons: Iterable) -> None:
        self.reasons: Tuple = tuple(reasons)
        labels = ", ".join(r.value for r in self.reasons) or "unknown"
        super().__init__(f"Loan rejected: {labels}.")
