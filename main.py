import logging
import subprocess
import sys
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt

from config import settings
from controller import BooksController
from date_format import format_date_user_friendly
from http_client import ApiError, BooksApiClient
from utils.ui_helpers import set_output_mode, print_list_result, print_book_detail
from utils.validators import DateValidator

APP_NAME = "Bücherverwaltung CLI"

console = Console()
logger = logging.getLogger(__name__)


def _notify(message: str) -> None:
    console.print(f"[cyan]ℹ️  {escape(message)}[/]")


def build_controller() -> BooksController:
    """Create the controller used by the CLI commands and the menu."""
    return BooksController(BooksApiClient(), notify=_notify)


def _load_or_exit(controller: BooksController) -> None:
    if not controller.load_books():
        raise typer.Exit(code=1)


# --- Typer CLI application ---
app = typer.Typer(help=APP_NAME)


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Global options for the CLI (e.g. output mode)."""
    logging.basicConfig(level=logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO))
    if output:
        set_output_mode(output)


@app.command("list")
def cli_list(
    start: Optional[str] = typer.Option(None, "--from", help="Start date, dd.MM.yy or dd.MM.yyyy"),
    end: Optional[str] = typer.Option(None, "--to", help="End date, dd.MM.yy or dd.MM.yyyy"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Substring of the title"),
):
    """List all books, optionally filtered on the client side."""
    controller = build_controller()
    _load_or_exit(controller)
    state = controller.state
    state.filter_state.start_date = start
    state.filter_state.end_date = end
    state.filter_state.search_text = search or ""
    state.apply_filter()
    print_list_result(state.filtered_books, total=state.filter_state.total_count)


@app.command("search")
def cli_search(
    query: str = typer.Argument("", help="Substring of the title"),
    date_from: Optional[str] = typer.Option(None, "--from", help="Earliest creation day, YYYY-MM-DD"),
    date_to: Optional[str] = typer.Option(None, "--to", help="Latest creation day, YYYY-MM-DD"),
):
    """Search books on the server (title substring and creation-day range)."""
    for label, value in (("--from", date_from), ("--to", date_to)):
        if value and not DateValidator.is_iso_day(value):
            print(f"Ungültiges Datum für {label}: {value} (erwartet YYYY-MM-DD)")
            raise typer.Exit(code=2)

    try:
        with BooksApiClient() as api:
            books = api.list_books(q=query or None, date_from=date_from, date_to=date_to)
    except ApiError as e:
        print(f"Suche fehlgeschlagen: {e}")
        raise typer.Exit(code=1)

    for book in books:
        book.formatted_created_at = format_date_user_friendly(book.created_at)
    print_list_result(books)


@app.command("show")
def cli_show(book_id: int):
    """Show a single book."""
    try:
        with BooksApiClient() as api:
            book = api.get_book(book_id)
    except ApiError as e:
        print(f"Fehler: {e}")
        raise typer.Exit(code=1)
    if not book:
        print(f"Buch {book_id} nicht gefunden.")
        raise typer.Exit(code=1)
    book.formatted_created_at = format_date_user_friendly(book.created_at)
    print_book_detail(book)


@app.command("add")
def cli_add(
    title: str,
    author: str,
    created_by: Optional[str] = typer.Option(None, "--created-by", help="Creator name (default: Unknown)"),
):
    """Create a new book."""
    controller = build_controller()
    controller.open_create_dialog()
    controller.new_book.update({"title": title, "author": author, "createdBy": created_by or ""})
    if not controller.create_book():
        raise typer.Exit(code=1)


@app.command("edit")
def cli_edit(
    book_id: int,
    title: Optional[str] = typer.Option(None, "--title", "-t"),
    author: Optional[str] = typer.Option(None, "--author", "-a"),
    created_by: Optional[str] = typer.Option(None, "--created-by"),
):
    """Change title, author or creator of a book."""
    controller = build_controller()
    _load_or_exit(controller)
    book = controller.find_book(book_id)
    if not book:
        print(f"Buch {book_id} nicht gefunden.")
        raise typer.Exit(code=1)
    controller.open_edit_dialog(book)
    draft = controller.edit_book
    if title is not None:
        draft.title = title
    if author is not None:
        draft.author = author
    if created_by is not None:
        draft.created_by = created_by
    if not controller.save_draft():
        raise typer.Exit(code=1)


@app.command("remove")
def cli_remove(book_id: int, yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation")):
    """Delete a book."""
    controller = build_controller()
    _load_or_exit(controller)
    book = controller.find_book(book_id)
    if not book:
        print(f"Buch {book_id} nicht gefunden.")
        raise typer.Exit(code=1)
    confirm = None if yes else (lambda question: typer.confirm(question, default=False))
    if not controller.delete_book(book, confirm=confirm):
        raise typer.Exit(code=1)


@app.command("serve")
def cli_serve(
    host: Optional[str] = typer.Option(None, "--host"),
    port: Optional[int] = typer.Option(None, "--port"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
):
    """Start the REST API with uvicorn."""
    host = host or settings.api_host
    port = int(port or settings.api_port)
    print(f"API wird auf http://{host}:{port}/api/books gestartet")
    args = [sys.executable, "-m", "uvicorn", "api:app", "--host", host, "--port", str(port)]
    if reload:
        args.append("--reload")
    try:
        subprocess.run(args, check=False)
    except FileNotFoundError:
        console.print("[bold red]Fehler:[/] `uvicorn` wurde nicht gefunden.")
        raise typer.Exit(code=1)


# --- Interactive menu ---
def _prompt_book_id(controller: BooksController):
    raw = Prompt.ask("🔍 Buch-ID").strip()
    if not raw.isdigit():
        console.print("[yellow]Bitte eine numerische ID eingeben.[/]")
        return None
    book = controller.find_book(int(raw))
    if not book:
        console.print(f"[yellow]⚠️ Buch [bold]{raw}[/] nicht gefunden.[/]")
    return book


def _show_books(controller: BooksController) -> None:
    state = controller.state
    print_list_result(state.filtered_books, total=state.filter_state.total_count)


def _create_interactive(controller: BooksController) -> None:
    controller.open_create_dialog()
    controller.new_book["title"] = Prompt.ask("Titel")
    controller.new_book["author"] = Prompt.ask("Autor")
    controller.new_book["createdBy"] = Prompt.ask("Erstellt von", default="")
    if not controller.create_book():
        # The dialog stays open after a failure; give the user a second chance
        if Confirm.ask("Erneut versuchen?", default=False):
            controller.create_book()
        controller.cancel_create()


def _edit_interactive(controller: BooksController) -> None:
    book = _prompt_book_id(controller)
    if not book:
        return
    controller.open_edit_dialog(book)
    draft = controller.edit_book
    draft.title = Prompt.ask("Titel", default=draft.title)
    draft.author = Prompt.ask("Autor", default=draft.author)
    draft.created_by = Prompt.ask("Erstellt von", default=draft.created_by)
    if not controller.save_draft():
        controller.cancel_draft()


def _delete_interactive(controller: BooksController) -> None:
    book = _prompt_book_id(controller)
    if not book:
        return
    console.print(Panel(
        f"[bold]Titel:[/] {escape(book.title)}\n"
        f"[bold]Autor:[/] {escape(book.author)}",
        title="📚 Zu löschendes Buch",
        border_style="yellow",
    ))
    controller.delete_book(book, confirm=lambda question: Confirm.ask(question, default=False))


def run_menu() -> None:
    """Interactive menu: one controller for the whole session."""
    controller = build_controller()
    controller.load_books()

    menu_items = [
        ("1", "Bücher anzeigen", "📚"),
        ("2", "Startdatum setzen", "📅"),
        ("3", "Enddatum setzen", "📅"),
        ("4", "Titel suchen", "🔎"),
        ("5", "Filter zurücksetzen", "♻️"),
        ("6", "Neues Buch", "➕"),
        ("7", "Buch bearbeiten", "✏️"),
        ("8", "Buch löschen", "🗑️"),
        ("9", "Neu laden", "🔄"),
        ("0", "Beenden", "🚪"),
    ]
    choices = [key for key, _, _ in menu_items]

    while True:
        lines = "\n".join(f"[bold]{key}[/] {icon} {label}" for key, label, icon in menu_items)
        console.print(Panel.fit(lines, title=f"📖 {APP_NAME}", border_style="blue"))
        choice = Prompt.ask("Bitte wählen", choices=choices, default="1")

        if choice == "1":
            _show_books(controller)
        elif choice == "2":
            controller.set_start_date(Prompt.ask("Startdatum (dd.MM.yyyy, leer = entfernen)", default="") or None)
            _show_books(controller)
        elif choice == "3":
            controller.set_end_date(Prompt.ask("Enddatum (dd.MM.yyyy, leer = entfernen)", default="") or None)
            _show_books(controller)
        elif choice == "4":
            controller.search(Prompt.ask("Suchtext", default=""))
            _show_books(controller)
        elif choice == "5":
            controller.reset_filter()
            _show_books(controller)
        elif choice == "6":
            _create_interactive(controller)
        elif choice == "7":
            _edit_interactive(controller)
        elif choice == "8":
            _delete_interactive(controller)
        elif choice == "9":
            controller.load_books()
            _show_books(controller)
        elif choice == "0":
            console.print("[green]Auf Wiedersehen![/]")
            break
        print()


if __name__ == "__main__":
    if len(sys.argv) > 1:
        app()
    else:
        run_menu()
