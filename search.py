"""Search criteria for ``Library.search_books``.

Each supported search field has its own criterion type carrying a value of
the right type.  ``criterion_for`` builds one from a field name such as
``"year-after"`` and rejects unknown fields up front.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict

from book import Book


class InvalidSearchParameter(ValueError):
    pass


class SearchCriterion:
    field_name: str = ""

    def matches(self, book: Book) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class AuthorContains(SearchCriterion):
    text: str
    field_name = "author"

    def matches(self, book: Book) -> bool:
        return self.text.lower() in book.author.lower()


@dataclass(frozen=True)
class GenreContains(SearchCriterion):
    text: str
    field_name = "genre"

    def matches(self, book: Book) -> bool:
        return self.text.lower() in book.genre.lower()


@dataclass(frozen=True)
class MinimumRating(SearchCriterion):
    rating: float
    field_name = "rating"

    def matches(self, book: Book) -> bool:
        return book.rating >= self.rating


@dataclass(frozen=True)
class YearAtMost(SearchCriterion):
    # "year-before" is inclusive: the book's year may equal the threshold
    year: float
    field_name = "year-before"

    def matches(self, book: Book) -> bool:
        return book.year <= self.year


@dataclass(frozen=True)
class YearAtLeast(SearchCriterion):
    year: float
    field_name = "year-after"

    def matches(self, book: Book) -> bool:
        return book.year >= self.year


def _number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise InvalidSearchParameter(f"Expected a number, got {value!r}") from e


def _year(value: Any) -> float:
    number = _number(value)
    return int(number) if number.is_integer() else number


_BUILDERS: Dict[str, Callable[[Any], SearchCriterion]] = {
    "author": lambda v: AuthorContains(str(v)),
    "genre": lambda v: GenreContains(str(v)),
    "rating": lambda v: MinimumRating(_number(v)),
    "year-before": lambda v: YearAtMost(_year(v)),
    "year-after": lambda v: YearAtLeast(_year(v)),
}

SEARCH_FIELDS = tuple(_BUILDERS)


def criterion_for(field: str, value: Any) -> SearchCriterion:
    """Build the criterion for a search field name.

    Raises InvalidSearchParameter for unsupported fields or for numeric
    fields given a value that is not a number.
    """
    builder = _BUILDERS.get(field)
    if builder is None:
        raise InvalidSearchParameter(f"Unsupported search field: {field!r}")
    return builder(value)
