from __future__ import annotations

from datetime import datetime, timezone

DEFAULT_CREATED_BY = "Unknown"


def to_iso_instant(moment: datetime) -> str:
    """Render a datetime as a UTC instant with millisecond precision and a 'Z' suffix.

    Naive datetimes are interpreted as local time.
    """
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    return to_iso_instant(datetime.now(timezone.utc))


class Book:
    """Represents a single book record in the register."""

    def __init__(self, title: str, author: str, id: int | None = None, created_at: str | None = None,
                 created_by: str | None = None) -> None:
        self.id = id
        self.title = title
        self.author = author
        self.created_at = created_at
        self.created_by = created_by or DEFAULT_CREATED_BY
        # Display label derived on the client side, never persisted
        self.formatted_created_at: str | None = None

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} (#{self.id})"

    def __repr__(self) -> str:  # pragma: no cover
        return f"Book(id={self.id!r}, title={self.title!r})"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "createdAt": self.created_at,
            "createdBy": self.created_by,
        }

    def copy(self) -> "Book":
        clone = Book.from_dict(self.to_dict())
        clone.formatted_created_at = self.formatted_created_at
        return clone

    @staticmethod
    def from_dict(data: dict) -> "Book":
        # Rows from SQLite and JSON payloads share the camelCase column names
        return Book(
            id=data.get("id"),
            title=data["title"],
            author=data["author"],
            created_at=data.get("createdAt"),
            created_by=data.get("createdBy"),
        )
