from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .book import Book, normalize_code

logger = logging.getLogger(__name__)


class Catalog:
    """In-memory registry of books keyed by code."""

    def __init__(self) -> None:
        # dicts keep insertion order, which is the registration order listings use
        self._books: Dict[str, Book] = {}

    def add(self, book: Book) -> None:
        """Register a book. Codes are unique regardless of case."""
        if book.code in self._books:
            raise ValueError(f"Book with code {book.code} already exists.")
        self._books[book.code] = book
        logger.debug(f"Registered book {book.code}")

    def find_book(self, code: str) -> Optional[Book]:
        return self._books.get(normalize_code(code))

    def list_books(self) -> List[Book]:
        return list(self._books.values())

    def list_available(self) -> List[Book]:
        return [b for b in self._books.values() if b.available]

    def __len__(self) -> int:
        return len(self._books)
