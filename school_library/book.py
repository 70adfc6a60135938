from __future__ import annotations


class Book:
    """A single title on the shelf, identified by its catalog code."""

    def __init__(self, code: str, title: str, category: str, available: bool = True) -> None:
        self.code = normalize_code(code)
        self.title = title.strip()
        self.category = category.strip()
        self.available = available

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.code}: {self.title} [{self.category}]"

    def __repr__(self) -> str:  # pragma: no cover
        return f"Book(code={self.code!r}, title={self.title!r}, available={self.available!r})"

    @property
    def status(self) -> str:
        return "Available" if self.available else "On loan"

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "title": self.title,
            "category": self.category,
            "available": self.available,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        return Book(
            code=data["code"],
            title=data["title"],
            category=data.get("category", ""),
            available=bool(data.get("available", True)),
        )


def normalize_code(raw: str) -> str:
    """Catalog codes are matched case-insensitively and stored upper-case."""
    if raw is None:
        return ""
    return raw.strip().upper()
