import logging
from datetime import datetime
from typing import Optional

import typer
from rich.console import Console

from config import settings
from library import Library
from outcome import Outcome
from sample_data import build_sample_library
from search import SEARCH_FIELDS
from ui_helpers import (
    set_output_mode,
    print_book_list,
    print_outcome,
    print_overdue_result,
    print_stats_result,
    print_summary_result,
)

APP_NAME = settings.app_name

console = Console()


class LibraryManager:
    """Holds the seeded catalogue for one CLI process.

    The clock is frozen when the catalogue is built so that every report in
    the same invocation is computed against the same instant.
    """
    _instance: Optional[Library] = None

    @classmethod
    def get_instance(cls) -> Library:
        if cls._instance is None:
            started = datetime.now()
            cls._instance = build_sample_library(clock=lambda: started)
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None


def _exit_on_failure(result) -> None:
    if isinstance(result, Outcome) and not result.ok:
        raise typer.Exit(code=1)


# --- Typer CLI application ---
app = typer.Typer(help=f"{APP_NAME} (sample catalogue)")

@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Global CLI options (output mode, logging)."""
    logging.basicConfig(level=settings.log_level, format="%(levelname)s: %(name)s: %(message)s", force=True)
    if output:
        set_output_mode(output)

@app.command("list")
def cli_list():
    """List every book in the catalogue."""
    print_book_list(LibraryManager.get_instance().list_books(), title="Catalogue")

@app.command("stats")
def cli_stats():
    """Show catalogue statistics."""
    print_stats_result(LibraryManager.get_instance().get_statistics())

@app.command("search")
def cli_search(
    field: str = typer.Argument(..., help=f"Search field: {', '.join(SEARCH_FIELDS)}"),
    value: str = typer.Argument(..., help="Text to match or numeric threshold"),
):
    """Search books by author, genre, minimum rating or year bound."""
    result = LibraryManager.get_instance().search_books_by(field, value)
    if isinstance(result, Outcome):
        print_outcome(result)
        _exit_on_failure(result)
        return
    print_book_list(result, title=f"Search: {field} {value}")

@app.command("top-rated")
def cli_top_rated(limit: int = typer.Option(settings.default_report_limit, "--limit", "-l", help="Maximum results")):
    """Highest rated books, ties by title."""
    print_book_list(LibraryManager.get_instance().get_top_rated_books(limit), title="Top rated")

@app.command("popular")
def cli_popular(limit: int = typer.Option(settings.default_report_limit, "--limit", "-l", help="Maximum results")):
    """Most borrowed books, ties by title."""
    print_book_list(LibraryManager.get_instance().get_most_popular_books(limit), title="Most popular")

@app.command("overdue")
def cli_overdue():
    """List every active loan past its due date."""
    print_overdue_result(LibraryManager.get_instance().check_overdue_users())

@app.command("recommend")
def cli_recommend(user: str = typer.Argument(..., help="Borrower name")):
    """Recommend unread books from the user's favourite genres."""
    result = LibraryManager.get_instance().recommend_books(user)
    if isinstance(result, Outcome):
        print_outcome(result)
        _exit_on_failure(result)
        return
    print_book_list(result, title=f"Recommended for {user}")

@app.command("summary")
def cli_summary(user: str = typer.Argument(..., help="Borrower name")):
    """Show a user's current loans and penalty points."""
    result = LibraryManager.get_instance().print_user_summary(user)
    if isinstance(result, Outcome):
        print_outcome(result)
        _exit_on_failure(result)
        return
    print_summary_result(result)

@app.command("borrow")
def cli_borrow(user: str, book_id: int):
    """Borrow a book for a user."""
    outcome = LibraryManager.get_instance().borrow_book(user, book_id)
    print_outcome(outcome)
    _exit_on_failure(outcome)

@app.command("return")
def cli_return(user: str, book_id: int):
    """Return a borrowed book, applying late penalties."""
    outcome = LibraryManager.get_instance().return_book(user, book_id)
    print_outcome(outcome)
    _exit_on_failure(outcome)

@app.command("remove")
def cli_remove(book_id: int):
    """Remove an available book from the catalogue."""
    outcome = LibraryManager.get_instance().remove_book(book_id)
    print_outcome(outcome)
    _exit_on_failure(outcome)

@app.command("demo")
def cli_demo():
    """Walk through the sample catalogue: add, report, recommend, return."""
    lib = LibraryManager.get_instance()

    book = lib.add_book("Brave New World", "Aldous Huxley", "Dystopian", 1932, 4.4)
    console.rule("Added")
    print_book_list([book])

    console.rule("Overdue loans")
    print_overdue_result(lib.check_overdue_users())

    console.rule("Top rated")
    print_book_list(lib.get_top_rated_books(settings.default_report_limit), title="Top rated")

    console.rule("Recommendations for Tako")
    print_book_list(lib.recommend_books("Tako"), title="Recommended for Tako")

    console.rule("Late return")
    print_outcome(lib.return_book("Julie", 5))

    console.rule("Summary for Julie")
    print_summary_result(lib.print_user_summary("Julie"))

if __name__ == "__main__":
    app()
