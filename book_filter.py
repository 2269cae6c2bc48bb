from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Union

from book import Book
from date_format import parse_date_from_string, record_day

logger = logging.getLogger(__name__)

DateInput = Union[str, date, None]


def _as_day(value: DateInput) -> Optional[date]:
    """Accept either a picked date or the raw "dd.MM.yy[yy]" text of a date field."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_date_from_string(value)


def apply_filter(books: List[Book], start: Optional[date] = None, end: Optional[date] = None,
                 search_text: str = "") -> List[Book]:
    """Return the books matching the title search and the inclusive day bounds.

    Pure: the input list is not modified and relative order is kept.
    """
    needle = (search_text or "").casefold()
    if not start and not end and not needle:
        return list(books)

    def matches(book: Book) -> bool:
        if needle and needle not in (book.title or "").casefold():
            return False
        if start is None and end is None:
            return True
        day = record_day(book.created_at)
        if day is None:
            return False
        if start is not None and day < start:
            return False
        if end is not None and day > end:
            return False
        return True

    return [b for b in books if matches(b)]


@dataclass
class FilterState:
    start_date: DateInput = None
    end_date: DateInput = None
    search_text: str = ""
    total_count: int = 0
    filtered_count: int = 0


@dataclass
class BookListState:
    """Client-side book cache plus the filter applied to it.

    ``books`` is replaced wholesale on every reload; ``filtered_books`` is
    always derived from it.
    """

    books: List[Book] = field(default_factory=list)
    filtered_books: List[Book] = field(default_factory=list)
    filter_state: FilterState = field(default_factory=FilterState)
    search_enabled: bool = True

    def replace_books(self, books: List[Book]) -> None:
        self.books = list(books)
        self.apply_filter()

    def update_stats(self) -> None:
        self.filter_state.total_count = len(self.books)
        self.filter_state.filtered_count = len(self.filtered_books)

    def apply_filter(self) -> List[Book]:
        search_text = self.filter_state.search_text if self.search_enabled else ""
        start = _as_day(self.filter_state.start_date)
        end = _as_day(self.filter_state.end_date)
        self.filtered_books = apply_filter(self.books, start, end, search_text)
        self.update_stats()
        logger.debug("Filter applied: %d of %d books", self.filter_state.filtered_count, self.filter_state.total_count)
        return self.filtered_books

    def reset_filter(self) -> None:
        self.filter_state.start_date = None
        self.filter_state.end_date = None
        self.filter_state.search_text = ""
        self.apply_filter()
