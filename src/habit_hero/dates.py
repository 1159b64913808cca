"""Date helpers. Pure functions over ISO (YYYY-MM-DD) calendar dates."""

from __future__ import annotations

import calendar as _calendar
import re
from datetime import date, datetime, timedelta

from habit_hero.errors import InvalidDateError

_ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def system_today() -> date:
    """Read the local system clock. Only front-ends call this."""
    return date.today()


def to_iso(d: date) -> str:
    return d.isoformat()


def parse_iso_date(value: date | str) -> date:
    """Parse a YYYY-MM-DD string (or pass a date through).

    Raises InvalidDateError for anything else, including datetimes and
    strings carrying a time component.
    """
    if isinstance(value, datetime):
        raise InvalidDateError(f"Expected a calendar date, got a datetime: {value!r}")
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _ISO_DATE_RE.fullmatch(value):
        raise InvalidDateError(f"Invalid date {value!r}, expected YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidDateError(f"Invalid date {value!r}, expected YYYY-MM-DD") from e


def normalize_date(value: date | str) -> str:
    """Validate and return the canonical ISO string."""
    return to_iso(parse_iso_date(value))


def date_minus(day: date | str, days: int) -> str:
    return to_iso(parse_iso_date(day) - timedelta(days=days))


def yesterday(today: date | str) -> str:
    return date_minus(today, 1)


def month_dates(year: int, month: int) -> list[str]:
    """Every ISO date of the given month, in order."""
    if not 1 <= month <= 12 or not 1 <= year <= 9999:
        raise InvalidDateError(f"Invalid month {year}-{month:02d}")
    _, days_in_month = _calendar.monthrange(year, month)
    return [to_iso(date(year, month, d)) for d in range(1, days_in_month + 1)]
