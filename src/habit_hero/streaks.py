"""Streak calculation for habit-hero check-in ledgers."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from habit_hero.dates import parse_iso_date


@dataclass(frozen=True)
class ParticipantStats:
    total_check_ins: int
    current_streak: int
    longest_streak: int


def get_streak_from_dates(date_set: set[date], reference: date) -> int:
    """Count consecutive days backwards from reference, inclusive."""
    streak = 0
    current = reference
    while current in date_set:
        streak += 1
        current -= timedelta(days=1)
    return streak


def calculate_streak(check_ins: Iterable[str], today: date | str) -> int:
    """Current streak for a set of YYYY-MM-DD check-in dates.

    Rules:
    - The run ends at the latest check-in
    - The latest check-in must be today or yesterday, otherwise 0
    - The first missing day stops the walk backwards
    """
    dates = set(check_ins)
    if not dates:
        return 0

    today_date = parse_iso_date(today)
    last = parse_iso_date(max(dates))
    if last not in (today_date, today_date - timedelta(days=1)):
        return 0

    return get_streak_from_dates({parse_iso_date(d) for d in dates}, last)


def longest_streak(check_ins: Iterable[str]) -> int:
    """Longest run of consecutive days anywhere in the ledger."""
    sorted_dates = sorted(set(check_ins))
    if not sorted_dates:
        return 0

    longest = 0
    streak = 1
    for i in range(1, len(sorted_dates)):
        prev = parse_iso_date(sorted_dates[i - 1])
        curr = parse_iso_date(sorted_dates[i])
        if (curr - prev).days == 1:
            streak += 1
        else:
            longest = max(longest, streak)
            streak = 1
    return max(longest, streak)


def derive_stats(check_ins: Iterable[str], today: date | str) -> ParticipantStats:
    """Derived participant fields. Pure; the ledger calls this after every mutation."""
    dates = set(check_ins)
    return ParticipantStats(
        total_check_ins=len(dates),
        current_streak=calculate_streak(dates, today),
        longest_streak=longest_streak(dates),
    )


def streak_badge(streak: int) -> str:
    """Emoji badge for a current streak: 30+ trophy, 7+ fire, 3+ star."""
    if streak >= 30:
        return "\U0001f3c6"
    if streak >= 7:
        return "\U0001f525"
    if streak >= 3:
        return "⭐"
    return ""
