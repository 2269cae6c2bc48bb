import logging
import sqlite3
from typing import List, Optional

from book import Book, DEFAULT_CREATED_BY, utc_now_iso
from database import get_db_connection
from query_builder import BookQuery, SELECT_BOOKS
from utils.validators import TextValidator

logger = logging.getLogger(__name__)


class StoreUnavailableError(Exception):
    """Raised when the SQLite store cannot be opened or queried."""


class Library:
    """Access layer for the books table.

    Every operation opens its own connection and closes it again, so a Library
    instance holds no open handle and can be created per request.
    """

    def __init__(self, db_file: Optional[str] = None) -> None:
        self.db_file = db_file

    def _connect(self) -> sqlite3.Connection:
        try:
            return get_db_connection(self.db_file)
        except sqlite3.Error as exc:
            raise StoreUnavailableError("Database unreachable") from exc

    # ------------------------- Queries ------------------------- #
    def list_books(self, q: Optional[str] = None, date_from: Optional[str] = None,
                   date_to: Optional[str] = None) -> List[Book]:
        """Return all books matching the optional title substring and creation-day bounds."""
        sql, params = BookQuery.from_params(q, date_from, date_to).build()
        conn = self._connect()
        try:
            rows = conn.execute(sql, params).fetchall()
            return [Book.from_dict(dict(row)) for row in rows]
        except sqlite3.Error as exc:
            logger.error("Listing books failed: %s", exc)
            raise StoreUnavailableError("Database unreachable") from exc
        finally:
            conn.close()

    def get_book(self, book_id: int) -> Optional[Book]:
        conn = self._connect()
        try:
            row = conn.execute(f"{SELECT_BOOKS} WHERE id = ?", (book_id,)).fetchone()
            return Book.from_dict(dict(row)) if row else None
        except sqlite3.Error as exc:
            raise StoreUnavailableError("Database unreachable") from exc
        finally:
            conn.close()

    def count_books(self) -> int:
        conn = self._connect()
        try:
            return conn.execute("SELECT COUNT(*) FROM books").fetchone()[0]
        except sqlite3.Error as exc:
            raise StoreUnavailableError("Database unreachable") from exc
        finally:
            conn.close()

    # ------------------------- Mutations ------------------------- #
    @staticmethod
    def _require_fields(title: Optional[str], author: Optional[str]) -> None:
        if not (TextValidator.validate_title(title) and TextValidator.validate_author(author)):
            raise ValueError("Title and author are required.")

    def add_book(self, title: str, author: str, created_by: Optional[str] = None) -> int:
        """Insert a new book and return its store-assigned id."""
        self._require_fields(title, author)

        conn = self._connect()
        try:
            cursor = conn.execute(
                "INSERT INTO books (title, author, createdAt, createdBy) VALUES (?, ?, ?, ?)",
                (title, author, utc_now_iso(), created_by or DEFAULT_CREATED_BY),
            )
            conn.commit()
            return cursor.lastrowid
        except sqlite3.Error as exc:
            raise StoreUnavailableError("Database unreachable") from exc
        finally:
            conn.close()

    def update_book(self, book_id: int, title: str, author: str,
                    created_by: Optional[str] = None) -> bool:
        """Replace title, author and creator of a book; createdAt is never touched.

        Returns False when no row matched. Callers decide whether that matters.
        """
        self._require_fields(title, author)

        conn = self._connect()
        try:
            cursor = conn.execute(
                "UPDATE books SET title = ?, author = ?, createdBy = ? WHERE id = ?",
                (title, author, created_by or DEFAULT_CREATED_BY, book_id),
            )
            conn.commit()
            return cursor.rowcount > 0
        except sqlite3.Error as exc:
            raise StoreUnavailableError("Database unreachable") from exc
        finally:
            conn.close()

    def remove_book(self, book_id: int) -> bool:
        conn = self._connect()
        try:
            cursor = conn.execute("DELETE FROM books WHERE id = ?", (book_id,))
            conn.commit()
            return cursor.rowcount > 0
        except sqlite3.Error as exc:
            raise StoreUnavailableError("Database unreachable") from exc
        finally:
            conn.close()
