import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from book import Book
from config import settings
from outcome import Outcome, Reason
from search import InvalidSearchParameter, SearchCriterion, criterion_for
from user import Loan, User

logger = logging.getLogger(__name__)

DATE_FORMAT = "%a %b %d %Y"
_ONE_DAY = timedelta(days=1)


def format_date(value: datetime) -> str:
    """Render a date the way loan messages show it, e.g. 'Mon Nov 02 2026'."""
    return value.strftime(DATE_FORMAT)


def days_past(now: datetime, due: datetime) -> int:
    """Whole days (rounded up) that ``now`` lies beyond ``due``; 0 if not past."""
    if now <= due:
        return 0
    return math.ceil((now - due) / _ONE_DAY)


@dataclass
class OverdueLoan:
    user_name: str
    book_id: int
    days_overdue: int
    book_title: Optional[str]

    def to_dict(self) -> dict:
        return {
            "user_name": self.user_name,
            "book_id": self.book_id,
            "days_overdue": self.days_overdue,
            "book_title": self.book_title,
        }


@dataclass
class BorrowedEntry:
    title: Optional[str]
    due_date: str
    overdue: bool
    days_overdue: int

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "due_date": self.due_date,
            "overdue": self.overdue,
            "days_overdue": self.days_overdue,
        }


@dataclass
class UserSummary:
    user: str
    currently_borrowed: List[BorrowedEntry] = field(default_factory=list)
    penalty_points: int = 0

    def to_dict(self) -> dict:
        return {
            "user": self.user,
            "currently_borrowed": [entry.to_dict() for entry in self.currently_borrowed],
            "penalty_points": self.penalty_points,
        }


class Library:
    """Manages the book catalogue, its borrowers and their loans in memory.

    Expected failures (unknown ids, books in the wrong state, the wrong
    borrower) come back as failed ``Outcome`` values and leave the catalogue
    untouched; every operation checks its preconditions before mutating.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None,
                 loan_days: Optional[int] = None,
                 recommendation_limit: Optional[int] = None) -> None:
        self.clock: Callable[[], datetime] = clock or datetime.now
        self.loan_days = settings.loan_days if loan_days is None else loan_days
        self.recommendation_limit = (
            settings.recommendation_limit if recommendation_limit is None else recommendation_limit
        )
        self.books: List[Book] = []
        self.users: List[User] = []
        self._next_book_id = 1

    # ------------------------- Lookups ------------------------- #
    def get_book(self, book_id: int) -> Optional[Book]:
        for book in self.books:
            if book.id == book_id:
                return book
        return None

    def list_books(self) -> List[Book]:
        return list(self.books)

    def get_user(self, name: str) -> Optional[User]:
        for user in self.users:
            if user.name == name:
                return user
        return None

    def get_or_create_user(self, name: str) -> Tuple[User, bool]:
        """Return ``(user, created)``, registering a new user if ``name`` is unknown."""
        user = self.get_user(name)
        if user is not None:
            return user, False
        user = User(name=name)
        self.users.append(user)
        logger.info("Registered new user %s", name)
        return user, True

    def list_users(self) -> List[User]:
        return list(self.users)

    # ------------------------- Core operations ------------------------- #
    def add_book(self, title: str, author: str, genre: str, year: int, rating: float) -> Book:
        """Add a book under the next free id. Ids are never reused."""
        book = Book(id=self._next_book_id, title=title, author=author,
                    genre=genre, year=year, rating=rating)
        self._next_book_id += 1
        self.books.append(book)
        logger.info("Added book %d: %s", book.id, book.title)
        return book

    def borrow_book(self, user_name: str, book_id: int) -> Outcome:
        book = self.get_book(book_id)
        if book is None:
            logger.warning("Borrow rejected: book %s not found", book_id)
            return Outcome.failure(Reason.NOT_FOUND, f"Book {book_id} not found")
        if not book.available:
            logger.warning("Borrow rejected: book %d is out with %s", book.id, book.borrowed_by)
            return Outcome.failure(Reason.INVALID_STATE, f'Book "{book.title}" is not available')

        user, _ = self.get_or_create_user(user_name)

        borrow_date = self.clock()
        due_date = borrow_date + timedelta(days=self.loan_days)

        book.mark_borrowed(user_name, due_date)
        user.current_borrowed.append(Loan(book_id=book.id, borrow_date=borrow_date, due_date=due_date))

        logger.info("%s borrowed book %d, due %s", user_name, book.id, due_date.isoformat())
        return Outcome.success(f'"{book.title}" borrowed by {user_name}. Due: {format_date(due_date)}')

    def return_book(self, user_name: str, book_id: int) -> Outcome:
        book = self.get_book(book_id)
        if book is None:
            return Outcome.failure(Reason.NOT_FOUND, f"Book {book_id} not found")
        if book.available:
            return Outcome.failure(Reason.INVALID_STATE, f'Book "{book.title}" is not borrowed')
        if book.borrowed_by != user_name:
            logger.warning("Return rejected: book %d is out with %s, not %s",
                           book.id, book.borrowed_by, user_name)
            return Outcome.failure(Reason.MISMATCH, f'"{book.title}" not borrowed by {user_name}')

        user = self.get_user(user_name)
        loan = user.find_active_loan(book_id) if user else None
        if loan is None:
            logger.warning("Return rejected: no active loan of book %d for %s", book.id, user_name)
            return Outcome.failure(Reason.NOT_FOUND, "Borrow record not found")

        return_date = self.clock()
        # Lateness counts from the due date, not the borrow date
        days_late = days_past(return_date, loan.due_date)

        book.mark_returned()
        user.current_borrowed.remove(loan)
        loan.return_date = return_date
        user.borrow_history.append(loan)

        if days_late > 0:
            user.penalty_points += days_late
            logger.info("%s returned book %d %d days late (penalty total %d)",
                        user_name, book.id, days_late, user.penalty_points)
            return Outcome.success(
                f'"{book.title}" returned {days_late} days late. '
                f"{days_late} penalty points added. Total: {user.penalty_points}"
            )
        logger.info("%s returned book %d on time", user_name, book.id)
        return Outcome.success(f'Thank you for returning "{book.title}" on time')

    def remove_book(self, book_id: int) -> Outcome:
        book = self.get_book(book_id)
        if book is None:
            return Outcome.failure(Reason.NOT_FOUND, "Book not found")
        if not book.available:
            return Outcome.failure(Reason.INVALID_STATE, "Cannot remove borrowed book")

        self.books.remove(book)
        logger.info("Removed book %d: %s", book.id, book.title)
        return Outcome.success(f'Removed: "{book.title}" by {book.author}')

    # ------------------------- Queries ------------------------- #
    def search_books(self, criterion: SearchCriterion) -> List[Book]:
        return [book for book in self.books if criterion.matches(book)]

    def search_books_by(self, field_name: str, value: Any) -> Union[List[Book], Outcome]:
        """Search by a named field: author, genre, rating, year-before or year-after.

        An unsupported field yields a failed Outcome rather than an empty list.
        """
        try:
            criterion = criterion_for(field_name, value)
        except InvalidSearchParameter as e:
            logger.warning("Search rejected: %s", e)
            return Outcome.failure(Reason.INVALID_PARAMETER, "Invalid search parameter")
        return self.search_books(criterion)

    def get_top_rated_books(self, limit: int) -> List[Book]:
        return sorted(self.books, key=lambda b: (-b.rating, b.title))[:limit]

    def get_most_popular_books(self, limit: int) -> List[Book]:
        return sorted(self.books, key=lambda b: (-b.borrow_count, b.title))[:limit]

    def check_overdue_users(self) -> List[OverdueLoan]:
        now = self.clock()
        overdue: List[OverdueLoan] = []
        for user in self.users:
            for loan in user.current_borrowed:
                if now > loan.due_date:
                    book = self.get_book(loan.book_id)
                    overdue.append(OverdueLoan(
                        user_name=user.name,
                        book_id=loan.book_id,
                        days_overdue=days_past(now, loan.due_date),
                        book_title=book.title if book else None,
                    ))
        return overdue

    def favorite_genres(self, user: User) -> List[str]:
        """Genres of every book the user has borrowed, most frequent first.

        Loans of books no longer in the catalogue are not counted.  Equal
        counts keep the order in which the genres were first seen.
        """
        counts: Counter = Counter()
        for loan in user.all_loans():
            book = self.get_book(loan.book_id)
            if book is not None:
                counts[book.genre] += 1
        return [genre for genre, _ in counts.most_common()]

    def recommend_books(self, user_name: str) -> Union[List[Book], Outcome]:
        user = self.get_user(user_name)
        if user is None:
            return Outcome.failure(Reason.NOT_FOUND, "User not found")

        borrowed_ids = user.borrowed_book_ids()
        rank: Dict[str, int] = {genre: i for i, genre in enumerate(self.favorite_genres(user))}

        candidates = [b for b in self.books if b.id not in borrowed_ids and b.genre in rank]
        candidates.sort(key=lambda b: (-b.rating, rank[b.genre]))
        return candidates[:self.recommendation_limit]

    def print_user_summary(self, user_name: str) -> Union[UserSummary, Outcome]:
        user = self.get_user(user_name)
        if user is None:
            return Outcome.failure(Reason.NOT_FOUND, "User not found")

        now = self.clock()
        entries = []
        for loan in user.current_borrowed:
            book = self.get_book(loan.book_id)
            overdue = now > loan.due_date
            entries.append(BorrowedEntry(
                title=book.title if book else None,
                due_date=format_date(loan.due_date),
                overdue=overdue,
                days_overdue=days_past(now, loan.due_date) if overdue else 0,
            ))
        return UserSummary(user=user_name, currently_borrowed=entries, penalty_points=user.penalty_points)

    def get_statistics(self) -> Dict[str, Any]:
        """Get library statistics."""
        available = sum(1 for b in self.books if b.available)
        return {
            "total_books": len(self.books),
            "unique_authors": len({b.author for b in self.books}),
            "available_books": available,
            "borrowed_books": len(self.books) - available,
            "total_users": len(self.users),
            "total_penalty_points": sum(u.penalty_points for u in self.users),
        }
