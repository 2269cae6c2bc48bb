"""Structured WHERE-clause builder for the book list query.

Conditions are kept as typed objects with their bound values; SQL text is only
assembled from whitelisted columns and operators, never from caller input.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

SELECT_BOOKS = "SELECT id, title, author, createdAt, createdBy FROM books"

_COLUMNS = {
    "title": "title",
    "created_day": "date(createdAt)",
}
_OPERATORS = {"LIKE": "?", ">=": "date(?)", "<=": "date(?)"}


@dataclass(frozen=True)
class Condition:
    column: str
    operator: str
    value: Any

    def __post_init__(self) -> None:
        if self.column not in _COLUMNS:
            raise ValueError(f"Unsupported column: {self.column}")
        if self.operator not in _OPERATORS:
            raise ValueError(f"Unsupported operator: {self.operator}")

    def to_sql(self) -> str:
        return f"{_COLUMNS[self.column]} {self.operator} {_OPERATORS[self.operator]}"


@dataclass
class BookQuery:
    conditions: List[Condition] = field(default_factory=list)

    def title_contains(self, text: str) -> "BookQuery":
        self.conditions.append(Condition("title", "LIKE", f"%{text}%"))
        return self

    def created_from(self, day: str) -> "BookQuery":
        self.conditions.append(Condition("created_day", ">=", day))
        return self

    def created_to(self, day: str) -> "BookQuery":
        self.conditions.append(Condition("created_day", "<=", day))
        return self

    @classmethod
    def from_params(cls, q: Optional[str] = None, date_from: Optional[str] = None,
                    date_to: Optional[str] = None) -> "BookQuery":
        """Build a query from optional list parameters; empty values are ignored."""
        query = cls()
        if q:
            query.title_contains(q)
        if date_from:
            query.created_from(date_from)
        if date_to:
            query.created_to(date_to)
        return query

    @property
    def params(self) -> List[Any]:
        return [c.value for c in self.conditions]

    def build(self) -> Tuple[str, List[Any]]:
        clauses = ["1=1"] + [c.to_sql() for c in self.conditions]
        return f"{SELECT_BOOKS} WHERE {' AND '.join(clauses)}", self.params
