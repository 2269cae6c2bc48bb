from datetime import date, datetime

from book import Book, to_iso_instant
from book_filter import BookListState, apply_filter


def _book(book_id, title, day):
    created = to_iso_instant(datetime(day.year, day.month, day.day, 12, 0))
    return Book(title=title, author="A", id=book_id, created_at=created)


BOOKS = [
    _book(1, "Buch Heute", date(2025, 8, 24)),
    _book(2, "Buch Gestern", date(2025, 8, 23)),
    _book(3, "Anderes Heute", date(2025, 8, 10)),
    _book(4, "Buch Alt", date(2025, 5, 10)),
]


def _ids(books):
    return [b.id for b in books]


def test_no_filter_returns_everything():
    result = apply_filter(BOOKS)
    assert _ids(result) == [1, 2, 3, 4]
    assert result is not BOOKS


def test_search_is_case_insensitive():
    assert _ids(apply_filter(BOOKS, search_text="heute")) == [1, 3]
    assert _ids(apply_filter(BOOKS, search_text="BUCH")) == [1, 2, 4]


def test_bounds_are_inclusive():
    start, end = date(2025, 8, 10), date(2025, 8, 23)
    assert _ids(apply_filter(BOOKS, start=start, end=end)) == [2, 3]


def test_day_outside_bounds_excluded():
    assert _ids(apply_filter(BOOKS, start=date(2025, 8, 11), end=date(2025, 8, 22))) == []


def test_only_start_or_only_end():
    assert _ids(apply_filter(BOOKS, start=date(2025, 8, 23))) == [1, 2]
    assert _ids(apply_filter(BOOKS, end=date(2025, 8, 10))) == [3, 4]


def test_search_and_dates_combine_with_and():
    assert _ids(apply_filter(BOOKS, start=date(2025, 8, 20), search_text="heute")) == [1]


def test_unparseable_created_at_fails_date_bounds_only():
    broken = Book(title="Kaputt", author="A", id=9, created_at="n/a")
    assert _ids(apply_filter([broken], start=date(2025, 1, 1))) == []
    assert _ids(apply_filter([broken], search_text="kaputt")) == [9]


def test_state_counts_and_string_bounds():
    state = BookListState()
    state.replace_books(BOOKS)
    assert (state.filter_state.total_count, state.filter_state.filtered_count) == (4, 4)

    state.filter_state.start_date = "10.08.25"
    state.filter_state.end_date = "23.08.2025"
    state.apply_filter()
    assert _ids(state.filtered_books) == [2, 3]
    assert (state.filter_state.total_count, state.filter_state.filtered_count) == (4, 2)


def test_state_accepts_picked_dates():
    state = BookListState(books=list(BOOKS))
    state.filter_state.start_date = date(2025, 8, 23)
    state.filter_state.end_date = datetime(2025, 8, 24, 18, 0)
    assert _ids(state.apply_filter()) == [1, 2]


def test_malformed_bound_is_treated_as_absent():
    state = BookListState(books=list(BOOKS))
    state.filter_state.start_date = "gestern"
    assert _ids(state.apply_filter()) == [1, 2, 3, 4]


def test_apply_filter_is_idempotent():
    state = BookListState(books=list(BOOKS))
    state.filter_state.search_text = "buch"
    first = _ids(state.apply_filter())
    second = _ids(state.apply_filter())
    assert first == second == [1, 2, 4]
    assert state.filter_state.filtered_count == 3


def test_reset_filter_shows_everything():
    state = BookListState(books=list(BOOKS))
    state.filter_state.search_text = "alt"
    state.filter_state.start_date = "01.01.2025"
    state.apply_filter()
    state.reset_filter()
    assert (state.filter_state.start_date, state.filter_state.end_date, state.filter_state.search_text) == (None, None, "")
    assert _ids(state.filtered_books) == [1, 2, 3, 4]


def test_search_ignored_when_disabled():
    state = BookListState(books=list(BOOKS), search_enabled=False)
    state.filter_state.search_text = "alt"
    assert _ids(state.apply_filter()) == [1, 2, 3, 4]
