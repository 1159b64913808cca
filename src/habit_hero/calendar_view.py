"""Month calendar view of a participant's check-ins."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from enum import Enum

from habit_hero.dates import month_dates, normalize_date
from habit_hero.ledger import Participant


class DayStatus(Enum):
    CHECKED_IN = "checked-in"
    MISSED = "missed"
    NO_DATA = "no-data"


@dataclass(frozen=True)
class CalendarDay:
    date: str
    status: DayStatus
    is_today: bool = False


def classify_day(day: str, check_ins: set[str], created_date: str, today: str) -> DayStatus:
    """Bucket for one date.

    - In the ledger -> CHECKED_IN
    - In [created_date, today) and absent -> MISSED
    - Anything else (before creation, today unchecked, future) -> NO_DATA
    """
    if day in check_ins:
        return DayStatus.CHECKED_IN
    if created_date <= day < today:
        return DayStatus.MISSED
    return DayStatus.NO_DATA


def participant_calendar_view(
    participant: Participant,
    created_date: date | str,
    month: int,
    year: int,
    today: date | str,
) -> dict[str, CalendarDay]:
    """Map every date of the month to its CalendarDay."""
    created_iso = normalize_date(created_date)
    today_iso = normalize_date(today)
    check_ins = set(participant.check_ins)
    return {
        day: CalendarDay(
            date=day,
            status=classify_day(day, check_ins, created_iso, today_iso),
            is_today=day == today_iso,
        )
        for day in month_dates(year, month)
    }


def month_grid(year: int, month: int) -> list[list[str | None]]:
    """Sunday-first weeks of ISO dates, padded with None outside the month."""
    days = month_dates(year, month)
    lead = (date(year, month, 1).weekday() + 1) % 7  # Monday=0 -> Sunday-first offset
    cells: list[str | None] = [None] * lead + list(days)
    cells += [None] * (-len(cells) % 7)
    return [cells[i:i + 7] for i in range(0, len(cells), 7)]


WEEKDAY_HEADERS: list[str] = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
MONTH_NAMES: list[str] = list(calendar.month_name)
