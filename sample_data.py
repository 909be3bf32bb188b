"""Sample catalogue used by the CLI and by tests."""

from datetime import datetime, timedelta
from typing import Callable, Optional

from library import Library

SAMPLE_BOOKS = [
    {"title": "The Hobbit", "author": "J.R.R. Tolkien", "genre": "Fantasy", "year": 1937, "rating": 4.8},
    {"title": "1984", "author": "George Orwell", "genre": "Dystopian", "year": 1949, "rating": 4.7},
    {"title": "Pride and Prejudice", "author": "Jane Austen", "genre": "Classic", "year": 1813, "rating": 4.5},
    {"title": "The Great Gatsby", "author": "F. Scott Fitzgerald", "genre": "Classic", "year": 1925, "rating": 4.3},
    {"title": "Harry Potter", "author": "J.K. Rowling", "genre": "Fantasy", "year": 1997, "rating": 4.9},
    {"title": "Dune", "author": "Frank Herbert", "genre": "Sci-Fi", "year": 1965, "rating": 4.6},
    {"title": "The Catcher in the Rye", "author": "J.D. Salinger", "genre": "Classic", "year": 1951, "rating": 4.0},
    {"title": "The Martian", "author": "Andy Weir", "genre": "Sci-Fi", "year": 2011, "rating": 4.8},
    {"title": "The Alchemist", "author": "Paulo Coelho", "genre": "Adventure", "year": 1988, "rating": 4.4},
    {"title": "The Da Vinci Code", "author": "Dan Brown", "genre": "Mystery", "year": 2003, "rating": 4.2},
    {"title": "The Silent Patient", "author": "Alex Michaelides", "genre": "Thriller", "year": 2019, "rating": 4.1},
]

SAMPLE_LOANS = [("Julie", 5), ("Sandro", 3), ("Mathilda", 1), ("Tako", 2)]

# Julie's loan of "Harry Potter" is pushed this many days past its due date
OVERDUE_USER = "Julie"
OVERDUE_BOOK_ID = 5
OVERDUE_DAYS = 15


def backdate_loan(library: Library, user_name: str, book_id: int, days_overdue: int) -> None:
    """Move an active loan's due date ``days_overdue`` days before now.

    Both the loan and the book's copy of the due date are updated so they
    stay consistent.
    """
    user = library.get_user(user_name)
    loan = user.find_active_loan(book_id) if user else None
    if loan is None:
        raise LookupError(f"{user_name} has no active loan of book {book_id}")
    due = library.clock() - timedelta(days=days_overdue)
    loan.due_date = due
    library.get_book(book_id).due_date = due


def build_sample_library(clock: Optional[Callable[[], datetime]] = None) -> Library:
    library = Library(clock=clock)
    for data in SAMPLE_BOOKS:
        library.add_book(**data)
    for user_name, book_id in SAMPLE_LOANS:
        library.borrow_book(user_name, book_id)
    backdate_loan(library, OVERDUE_USER, OVERDUE_BOOK_ID, OVERDUE_DAYS)
    return library
