import os
import json
from typing import List, Any, Dict
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False))

def print_book_list(books: List[Any], title: str = "Books") -> None:
    """Print books in the current output mode.
    - plain: 'ID - Title by Author (Genre, Year) rating R, borrowed N times' lines
    - json: JSON array of book dicts
    - rich: Rich table
    """
    mode = get_output_mode()

    if not books:
        print("No books found.")
        return

    if mode == "json":
        _print_json([b.to_dict() for b in books])
    elif mode == "rich":
        table = Table(title=f"📚 {title}", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Genre")
        table.add_column("Year", justify="right")
        table.add_column("Rating", justify="right")
        table.add_column("Borrowed", justify="right")
        table.add_column("Status")
        for b in books:
            status = "[green]available[/]" if b.available else f"[yellow]with {escape(b.borrowed_by)}[/]"
            table.add_row(str(b.id), escape(b.title), escape(b.author), escape(b.genre), str(b.year),
                          f"{b.rating:.1f}", str(b.borrow_count), status)
        _console.print(table)
    else:
        for b in books:
            print(f"{b.id} - {b.title} by {b.author} ({b.genre}, {b.year}) "
                  f"rating {b.rating}, borrowed {b.borrow_count} times")

def print_overdue_result(records: List[Any]) -> None:
    mode = get_output_mode()

    if not records:
        print("No overdue loans.")
        return

    if mode == "json":
        _print_json([r.to_dict() for r in records])
    elif mode == "rich":
        table = Table(title="⏰ Overdue loans", header_style="bold red")
        table.add_column("User")
        table.add_column("Book ID", justify="right")
        table.add_column("Title")
        table.add_column("Days overdue", justify="right")
        for r in records:
            table.add_row(escape(r.user_name), str(r.book_id), escape(r.book_title or "-"), str(r.days_overdue))
        _console.print(table)
    else:
        for r in records:
            print(f"{r.user_name} - book {r.book_id} ({r.book_title or 'removed'}) "
                  f"{r.days_overdue} days overdue")

def print_summary_result(summary: Any) -> None:
    mode = get_output_mode()

    if mode == "json":
        _print_json(summary.to_dict())
        return

    if mode == "rich":
        lines = [f"[bold]Penalty points:[/] {summary.penalty_points}"]
        for entry in summary.currently_borrowed:
            flag = f"[red]{entry.days_overdue} days overdue[/]" if entry.overdue else "[green]on loan[/]"
            lines.append(f"• {escape(entry.title or 'removed')} (due {entry.due_date}) {flag}")
        _console.print(Panel.fit("\n".join(lines), title=f"👤 {escape(summary.user)}", border_style="blue"))
        return

    print(f"User: {summary.user}")
    print(f"Penalty points: {summary.penalty_points}")
    if not summary.currently_borrowed:
        print("No books currently borrowed.")
    for entry in summary.currently_borrowed:
        suffix = f" - OVERDUE by {entry.days_overdue} days" if entry.overdue else ""
        print(f"- {entry.title or 'removed'} (due {entry.due_date}){suffix}")

def print_stats_result(stats: Dict[str, Any]) -> None:
    """Print statistics in the current output mode.
    - plain: one 'Label: value' line per metric
    - json: JSON object
    - rich: Panel with the main metrics
    """
    mode = get_output_mode()

    if not stats:
        print("No statistics available.")
        return

    labels = {
        "total_books": "Total Books",
        "unique_authors": "Unique Authors",
        "available_books": "Available Books",
        "borrowed_books": "Borrowed Books",
        "total_users": "Users",
        "total_penalty_points": "Penalty Points",
    }

    if mode == "json":
        _print_json(stats)
    elif mode == "rich":
        content = "\n".join(f"[bold]{label}:[/] {stats.get(key, 0)}" for key, label in labels.items())
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        for key, label in labels.items():
            print(f"{label}: {stats.get(key, 0)}")

def print_outcome(outcome: Any) -> None:
    mode = get_output_mode()

    if mode == "json":
        _print_json(outcome.to_dict())
    elif mode == "rich":
        style = "green" if outcome.ok else "red"
        _console.print(f"[{style}]{escape(outcome.message)}[/]")
    else:
        print(outcome.message)
