import logging
import sqlite3
from datetime import datetime, timedelta
from typing import Optional

from book import to_iso_instant
from config import settings

logger = logging.getLogger(__name__)

# Default database file, read at call time so it can be redirected
DATABASE_FILE = settings.db_file

SEED_AUTHOR = "System"


def get_db_connection(db_file: Optional[str] = None) -> sqlite3.Connection:
    """Open a connection to the SQLite database with dict-like rows."""
    conn = sqlite3.connect(db_file or DATABASE_FILE)
    conn.row_factory = sqlite3.Row
    return conn


def create_tables(db_file: Optional[str] = None) -> None:
    """Create the books table if it does not exist yet."""
    conn = get_db_connection(db_file)
    try:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS books (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                author TEXT NOT NULL,
                createdAt TEXT NOT NULL,
                createdBy TEXT NOT NULL
            )
        """)
        conn.commit()
    finally:
        conn.close()


def _demo_rows(now: datetime) -> list:
    return [
        ("Buch Heute", "Autor A", now),
        ("Buch Gestern", "Autor B", now - timedelta(days=1)),
        ("Buch Vorgestern", "Autor C", now - timedelta(days=2)),
        ("Buch Letzte Woche", "Autor D", now - timedelta(days=7)),
        ("Buch Alt", "Autor E", datetime(2025, 5, 10, 13, 0)),
    ]


def seed_demo_books(db_file: Optional[str] = None, now: Optional[datetime] = None) -> int:
    """Insert the five demo books, but only into an empty table.

    Returns the number of inserted rows (0 when the table already had data).
    """
    conn = get_db_connection(db_file)
    try:
        count = conn.execute("SELECT COUNT(*) FROM books").fetchone()[0]
        if count > 0:
            return 0

        rows = [
            (title, author, to_iso_instant(created), SEED_AUTHOR)
            for title, author, created in _demo_rows(now or datetime.now())
        ]
        conn.executemany(
            "INSERT INTO books (title, author, createdAt, createdBy) VALUES (?, ?, ?, ?)",
            rows,
        )
        conn.commit()
        logger.info("Seeded %d demo books", len(rows))
        return len(rows)
    finally:
        conn.close()


def initialize_database(db_file: Optional[str] = None, seed: bool = True) -> None:
    """Create the schema and, if requested, seed demo data into an empty table."""
    create_tables(db_file)
    if seed:
        seed_demo_books(db_file)
