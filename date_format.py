"""Date helpers for the book list display.

All labels use one fixed locale (German), and every comparison happens on the
local calendar day of the displaying client.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any

WEEKDAYS = ["Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag", "Sonntag"]
TODAY_LABEL = "Heute"
YESTERDAY_LABEL = "Gestern"
DAY_BEFORE_YESTERDAY_LABEL = "Vorgestern"


def parse_instant(value: Any) -> datetime | None:
    """Parse an ISO-8601 instant into a naive local datetime, or None if it is not one."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def record_day(created_at: Any) -> date | None:
    """Local calendar day of a record's creation instant."""
    moment = parse_instant(created_at)
    return moment.date() if moment else None


def _day_month_year(day: date) -> str:
    return f"{day.day:02d}.{day.month:02d}.{day.year}"


def format_date_user_friendly(value: Any, now: datetime | None = None) -> str:
    """Turn a backend timestamp into a relative label.

    Examples:
     - Heute, 14:32 Uhr
     - Gestern, 08:15 Uhr
     - Vorgestern, 19:45 Uhr
     - Montag, 19.08.2025, 11:00 Uhr   (within the last week)
     - 10.07.2025, 09:30 Uhr           (older than a week)

    Empty input yields an empty string; anything unparseable is returned as is.
    """
    if not value:
        return ""

    moment = parse_instant(value)
    if moment is None:
        return value

    today = (now or datetime.now()).date()
    yesterday = today - timedelta(days=1)
    day_before_yesterday = today - timedelta(days=2)
    one_week_ago = today - timedelta(days=7)

    book_day = moment.date()
    time_string = f"{moment.hour:02d}:{moment.minute:02d} Uhr"

    if book_day == today:
        return f"{TODAY_LABEL}, {time_string}"
    if book_day == yesterday:
        return f"{YESTERDAY_LABEL}, {time_string}"
    if book_day == day_before_yesterday:
        return f"{DAY_BEFORE_YESTERDAY_LABEL}, {time_string}"
    if book_day >= one_week_ago:
        return f"{WEEKDAYS[book_day.weekday()]}, {_day_month_year(book_day)}, {time_string}"
    return f"{_day_month_year(book_day)}, {time_string}"


def parse_date_from_string(value: Any) -> date | None:
    """Parse a German date string ("dd.MM.yy" or "dd.MM.yyyy") into a calendar day.

    Two-digit years below 50 map to 20xx, the rest to 19xx. Day and month are
    not range-checked: out-of-range values roll over into neighbouring months,
    so "31.02.25" becomes 3 March 2025. Returns None for anything that cannot be
    read as three numbers.
    """
    if not value or not isinstance(value, str):
        return None

    parts = value.split(".")
    if len(parts) != 3:
        return None

    try:
        day = int(parts[0])
        month_index = int(parts[1]) - 1  # zero-based month from here on
        year = int(parts[2])
    except ValueError:
        return None

    if 0 <= year < 100:
        year += 2000 if year < 50 else 1900

    year += month_index // 12
    month = month_index % 12 + 1
    try:
        return date(year, month, 1) + timedelta(days=day - 1)
    except (ValueError, OverflowError):
        return None
