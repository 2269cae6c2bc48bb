from datetime import date, datetime, timedelta

import pytest

from book import to_iso_instant
from date_format import format_date_user_friendly, parse_date_from_string, record_day

# Sunday, 24 August 2025, local time
NOW = datetime(2025, 8, 24, 15, 0)


def _label(moment: datetime) -> str:
    # Timestamps travel as UTC instants; the formatter shows them in local time again
    return format_date_user_friendly(to_iso_instant(moment), now=NOW)


def test_today():
    assert _label(datetime(2025, 8, 24, 14, 32)) == "Heute, 14:32 Uhr"


def test_today_just_after_midnight():
    assert _label(datetime(2025, 8, 24, 0, 5)) == "Heute, 00:05 Uhr"


def test_yesterday():
    assert _label(datetime(2025, 8, 23, 8, 15)) == "Gestern, 08:15 Uhr"


def test_day_before_yesterday():
    assert _label(datetime(2025, 8, 22, 19, 45)) == "Vorgestern, 19:45 Uhr"


def test_within_last_week_shows_weekday():
    assert _label(datetime(2025, 8, 19, 11, 0)) == "Dienstag, 19.08.2025, 11:00 Uhr"


def test_exactly_seven_days_ago_is_still_last_week():
    assert _label(datetime(2025, 8, 17, 9, 30)) == "Sonntag, 17.08.2025, 09:30 Uhr"


def test_eight_days_ago_is_plain_date():
    assert _label(NOW - timedelta(days=8)) == "16.08.2025, 15:00 Uhr"


def test_older_date():
    assert _label(datetime(2025, 5, 10, 13, 0)) == "10.05.2025, 13:00 Uhr"


def test_future_day_uses_weekday_form():
    assert _label(datetime(2025, 8, 26, 7, 0)) == "Dienstag, 26.08.2025, 07:00 Uhr"


def test_naive_timestamp_is_local_time():
    assert format_date_user_friendly("2025-08-24T09:05:00", now=NOW) == "Heute, 09:05 Uhr"


def test_uses_current_time_by_default():
    assert format_date_user_friendly(to_iso_instant(datetime.now())).startswith("Heute, ")


@pytest.mark.parametrize("raw", ["not a date", "2025-13-45T10:00:00Z", "24.08.2025"])
def test_malformed_input_is_echoed(raw):
    assert format_date_user_friendly(raw, now=NOW) == raw


@pytest.mark.parametrize("raw", ["", None])
def test_empty_input(raw):
    assert format_date_user_friendly(raw, now=NOW) == ""


def test_parse_two_and_four_digit_year_agree():
    assert parse_date_from_string("24.08.25") == parse_date_from_string("24.08.2025") == date(2025, 8, 24)


@pytest.mark.parametrize("raw,expected", [
    ("01.01.00", date(2000, 1, 1)),
    ("01.01.49", date(2049, 1, 1)),
    ("01.01.50", date(1950, 1, 1)),
    ("31.12.99", date(1999, 12, 31)),
    ("1.2.2025", date(2025, 2, 1)),
])
def test_parse_years(raw, expected):
    assert parse_date_from_string(raw) == expected


def test_parse_does_not_validate_ranges():
    assert parse_date_from_string("31.02.25") == date(2025, 3, 3)
    assert parse_date_from_string("01.13.2025") == date(2026, 1, 1)


@pytest.mark.parametrize("raw", [None, "", 20250824, "24-08-2025", "24.08", "1.2.3.4", "aa.bb.cc"])
def test_parse_invalid_returns_none(raw):
    assert parse_date_from_string(raw) is None


def test_record_day_is_local_calendar_day():
    moment = datetime(2025, 8, 24, 23, 59)
    assert record_day(to_iso_instant(moment)) == date(2025, 8, 24)
    assert record_day("garbage") is None
