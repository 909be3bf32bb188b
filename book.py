from __future__ import annotations

from datetime import datetime


class Book:
    """Represents a single book in the catalogue."""

    def __init__(self, id: int, title: str, author: str, genre: str, year: int, rating: float,
                 borrow_count: int = 0, available: bool = True,
                 borrowed_by: str | None = None, due_date: datetime | None = None) -> None:
        self.id = id
        self.title = title
        self.author = author
        self.genre = genre
        self.year = year
        self.rating = rating
        self.borrow_count = borrow_count
        self.available = available
        # Borrower name is a copy, not a link to the User record
        self.borrowed_by = borrowed_by
        self.due_date = due_date

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} ({self.year})"

    def __repr__(self) -> str:  # pragma: no cover
        return f"Book(id={self.id!r}, title={self.title!r})"

    def mark_borrowed(self, user_name: str, due_date: datetime) -> None:
        self.available = False
        self.borrowed_by = user_name
        self.due_date = due_date
        self.borrow_count += 1

    def mark_returned(self) -> None:
        self.available = True
        self.borrowed_by = None
        self.due_date = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "genre": self.genre,
            "year": self.year,
            "rating": self.rating,
            "borrow_count": self.borrow_count,
            "available": self.available,
            "borrowed_by": self.borrowed_by,
            "due_date": self.due_date.isoformat() if self.due_date else None,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        due = data.get("due_date")
        if isinstance(due, str):
            due = datetime.fromisoformat(due)

        return Book(
            id=data["id"],
            title=data["title"],
            author=data["author"],
            genre=data["genre"],
            year=data["year"],
            rating=data["rating"],
            borrow_count=data.get("borrow_count", 0),
            available=data.get("available", True),
            borrowed_by=data.get("borrowed_by"),
            due_date=due,
        )
