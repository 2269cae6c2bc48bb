import os
import json
from typing import List, Any, Optional
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "BOOKS_CLI_OUTPUT"

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def _created_label(book: Any) -> str:
    return getattr(book, "formatted_created_at", None) or getattr(book, "created_at", "") or ""


def print_list_result(books: List[Any], total: Optional[int] = None) -> None:
    """Print a book list in the current output mode.
    - plain: 'id - Title by Author (created)' lines, or 'Keine Bücher gefunden.'
    - json: JSON array of the records
    - rich: Rich table
    When ``total`` is given, a 'x von y Büchern' line follows.
    """
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
        return

    if not books:
        print("Keine Bücher gefunden.")
    elif mode == "rich":
        table = Table(title="📚 Bücher", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Titel", style="white")
        table.add_column("Autor", style="white")
        table.add_column("Erstellt", style="green")
        table.add_column("Von", style="dim")
        for b in books:
            table.add_row(str(b.id), b.title, b.author, _created_label(b), b.created_by)
        _console.print(table)
    else:
        for b in books:
            print(f"{b.id} - {b.title} by {b.author} ({_created_label(b)})")

    if total is not None:
        print_filter_stats(len(books), total)


def print_filter_stats(filtered: int, total: int) -> None:
    if get_output_mode() == "rich":
        _console.print(f"[dim]📊 {filtered} von {total} Büchern[/]")
    else:
        print(f"{filtered} von {total} Büchern")


def print_book_detail(book: Any) -> None:
    mode = get_output_mode()
    if mode == "json":
        print(json.dumps(book.to_dict(), ensure_ascii=False))
    elif mode == "rich":
        _console.print(Panel.fit(
            f"[bold]Titel:[/] {book.title}\n"
            f"[bold]Autor:[/] {book.author}\n"
            f"[bold]Erstellt:[/] {_created_label(book)}\n"
            f"[bold]Erstellt von:[/] {book.created_by}",
            title=f"📖 Buch #{book.id}",
            border_style="green",
        ))
    else:
        print(f"ID: {book.id}")
        print(f"Titel: {book.title}")
        print(f"Autor: {book.author}")
        print(f"Erstellt: {_created_label(book)}")
        print(f"Erstellt von: {book.created_by}")
