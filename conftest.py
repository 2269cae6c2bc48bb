from datetime import datetime

import pytest

import database
from database import initialize_database
from book import Book, to_iso_instant
from http_client import ApiError
from library import Library

# Sunday, 24 August 2025, local time
NOW = datetime(2025, 8, 24, 15, 0)


@pytest.fixture
def db_file(tmp_path, monkeypatch, request):
    # Each test gets its own database file; module helpers look it up at call time
    path = str(tmp_path / f"test_{request.node.name}.db")
    monkeypatch.setattr(database, "DATABASE_FILE", path)
    initialize_database(path, seed=False)
    return path


@pytest.fixture
def lib(db_file):
    return Library()


class FakeApi:
    """In-memory stand-in for BooksApiClient."""

    def __init__(self, now):
        self.now = now
        self.records = {}
        self.next_id = 1
        self.fail = False
        self.list_calls = 0

    def add(self, title, moment, author="A"):
        book_id = self.next_id
        self.next_id += 1
        self.records[book_id] = Book(title, author, id=book_id, created_at=to_iso_instant(moment), created_by="System")
        return book_id

    def _check(self):
        if self.fail:
            raise ApiError("HTTP error! status: 500", 500)

    def list_books(self, q=None, date_from=None, date_to=None):
        self._check()
        self.list_calls += 1
        return [b.copy() for b in self.records.values()]

    def create_book(self, title, author, created_by=None):
        self._check()
        if not title or not author:
            raise ApiError("HTTP error! status: 400", 400)
        return self.add(title, self.now, author=author)

    def update_book(self, book):
        self._check()
        if book.id in self.records:
            stored = self.records[book.id]
            stored.title, stored.author, stored.created_by = book.title, book.author, book.created_by

    def delete_book(self, book_id):
        self._check()
        self.records.pop(book_id, None)


@pytest.fixture
def fake_api():
    api = FakeApi(now=NOW)
    api.add("Buch Heute", datetime(2025, 8, 24, 14, 32))
    api.add("Buch Gestern", datetime(2025, 8, 23, 8, 15))
    api.add("Buch Alt", datetime(2025, 5, 10, 13, 0))
    return api
