import re
from datetime import date
from typing import Optional

_ISO_DAY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class TextValidator:
    """Basic checks for the required free-text fields of a book."""

    @staticmethod
    def _is_non_blank(text: Optional[str]) -> bool:
        if text is None or not isinstance(text, str):
            return False
        return bool(text.strip())

    @staticmethod
    def validate_title(title: Optional[str]) -> bool:
        return TextValidator._is_non_blank(title)

    @staticmethod
    def validate_author(author: Optional[str]) -> bool:
        return TextValidator._is_non_blank(author)


class DateValidator:
    """Checks for the date-only strings accepted by the list endpoint (YYYY-MM-DD)."""

    @staticmethod
    def is_iso_day(value: Optional[str]) -> bool:
        if not value or not _ISO_DAY.match(value):
            return False
        try:
            date.fromisoformat(value)
        except ValueError:
            return False
        return True
