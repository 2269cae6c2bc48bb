import logging
from datetime import date
from typing import Callable, Dict, Optional

from book import Book
from book_filter import BookListState, DateInput
from config import settings
from date_format import format_date_user_friendly
from http_client import ApiError, BooksApiClient

logger = logging.getLogger(__name__)

# Notification texts shown to the user (fixed locale)
MSG_LOAD_FAILED = "Fehler beim Laden der Bücher"
MSG_CREATED = "Buch erfolgreich angelegt"
MSG_CREATE_FAILED = "Fehler beim Anlegen des Buches"
MSG_UPDATED = "Buch erfolgreich aktualisiert"
MSG_UPDATE_FAILED = "Fehler beim Aktualisieren des Buches"
MSG_DELETED = "Buch erfolgreich gelöscht"
MSG_DELETE_FAILED = "Fehler beim Löschen des Buches"
MSG_FILTER_RESET = "Alle Filter wurden zurückgesetzt"
MSG_START_REMOVED = "Startdatum-Filter entfernt"
MSG_END_REMOVED = "Enddatum-Filter entfernt"


def _empty_draft() -> Dict[str, str]:
    return {"title": "", "author": "", "createdBy": ""}


class BooksController:
    """Drives the book list UI: loading, filtering, searching and the create/edit dialogs.

    Every mutation is followed by a full reload of the book list before the
    call returns. When an API call fails the user is notified and the current
    state, including any open dialog, is left as it was.
    """

    def __init__(self, api: Optional[BooksApiClient] = None, notify: Optional[Callable[[str], None]] = None,
                 search_enabled: Optional[bool] = None, now: Optional[Callable] = None) -> None:
        self.api = api or BooksApiClient()
        self.notify = notify or (lambda message: logger.info("%s", message))
        enabled = settings.enable_search if search_enabled is None else search_enabled
        self.state = BookListState(search_enabled=enabled)
        self._now = now
        self.new_book: Dict[str, str] = _empty_draft()
        self.create_dialog_open = False
        self.edit_book: Optional[Book] = None
        self.edit_dialog_open = False

    # ------------------------- Loading ------------------------- #
    def load_books(self) -> bool:
        """Replace the cache with a fresh copy from the API and re-apply the filter."""
        try:
            books = self.api.list_books()
        except ApiError as exc:
            logger.error("Loading books failed: %s", exc)
            self.notify(MSG_LOAD_FAILED)
            return False

        now = self._now() if self._now else None
        for book in books:
            book.formatted_created_at = format_date_user_friendly(book.created_at, now=now)
        self.state.replace_books(books)
        return True

    # ------------------------- Filtering ------------------------- #
    def set_start_date(self, value: DateInput) -> None:
        self.state.filter_state.start_date = value
        self.state.apply_filter()
        if isinstance(value, date):
            self.notify(f"Filter angewendet: Bücher ab {value.strftime('%d.%m.%Y')}")
        elif value is None:
            self.notify(MSG_START_REMOVED)

    def set_end_date(self, value: DateInput) -> None:
        self.state.filter_state.end_date = value
        self.state.apply_filter()
        if isinstance(value, date):
            self.notify(f"Filter angewendet: Bücher bis {value.strftime('%d.%m.%Y')}")
        elif value is None:
            self.notify(MSG_END_REMOVED)

    def search(self, text: Optional[str]) -> None:
        self.state.filter_state.search_text = text or ""
        self.state.apply_filter()

    def reset_filter(self) -> None:
        self.state.reset_filter()
        self.notify(MSG_FILTER_RESET)

    # ------------------------- Create dialog ------------------------- #
    def open_create_dialog(self) -> None:
        self.new_book = _empty_draft()
        self.create_dialog_open = True

    def cancel_create(self) -> None:
        self.create_dialog_open = False

    def create_book(self) -> bool:
        draft = self.new_book
        try:
            self.api.create_book(draft.get("title", ""), draft.get("author", ""), draft.get("createdBy") or None)
        except ApiError as exc:
            logger.error("Creating book failed: %s", exc)
            self.notify(MSG_CREATE_FAILED)
            return False
        self.notify(MSG_CREATED)
        self.create_dialog_open = False
        self.load_books()
        return True

    # ------------------------- Edit dialog ------------------------- #
    def find_book(self, book_id: int) -> Optional[Book]:
        for book in self.state.books:
            if book.id == book_id:
                return book
        return None

    def open_edit_dialog(self, book: Book) -> None:
        # Work on a copy so the cached record stays untouched until saved
        self.edit_book = book.copy()
        self.edit_dialog_open = True

    def save_draft(self) -> bool:
        if self.edit_book is None:
            return False
        try:
            self.api.update_book(self.edit_book)
        except ApiError as exc:
            logger.error("Updating book %s failed: %s", self.edit_book.id, exc)
            self.notify(MSG_UPDATE_FAILED)
            return False
        self.notify(MSG_UPDATED)
        self.edit_dialog_open = False
        self.load_books()
        return True

    def cancel_draft(self) -> None:
        self.edit_dialog_open = False
        self.edit_book = None

    # ------------------------- Delete ------------------------- #
    def delete_book(self, book: Book, confirm: Optional[Callable[[str], bool]] = None) -> bool:
        """Delete a book after an optional confirmation, then reload."""
        if confirm is not None and not confirm(f'Buch "{book.title}" wirklich löschen?'):
            return False
        try:
            self.api.delete_book(book.id)
        except ApiError as exc:
            logger.error("Deleting book %s failed: %s", book.id, exc)
            self.notify(MSG_DELETE_FAILED)
            return False
        self.notify(MSG_DELETED)
        self.load_books()
        return True
