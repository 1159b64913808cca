"""Check-in ledger: the per-participant set of check-in dates.

Every mutation recomputes the derived fields through derive_stats before
returning, so a reader never sees a stale total or streak.
"""
from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass, field
from datetime import date

from habit_hero.dates import normalize_date
from habit_hero.streaks import derive_stats

log = logging.getLogger(__name__)


@dataclass
class Participant:
    username: str
    check_ins: list[str] = field(default_factory=list)  # sorted ascending, unique
    total_check_ins: int = 0
    current_streak: int = 0
    longest_streak: int = 0

    def has_checked_in(self, day: date | str) -> bool:
        return normalize_date(day) in self.check_ins


def refresh_stats(participant: Participant, today: date | str) -> Participant:
    """Recompute derived fields for the given today without touching the ledger."""
    stats = derive_stats(participant.check_ins, today)
    participant.total_check_ins = stats.total_check_ins
    participant.current_streak = stats.current_streak
    participant.longest_streak = stats.longest_streak
    return participant


def add_check_in(participant: Participant, day: date | str, today: date | str) -> bool:
    """Record a check-in. Returns False if the date was already present."""
    iso_day = normalize_date(day)
    today_iso = normalize_date(today)
    idx = bisect.bisect_left(participant.check_ins, iso_day)
    changed = idx == len(participant.check_ins) or participant.check_ins[idx] != iso_day
    if changed:
        participant.check_ins.insert(idx, iso_day)
        log.debug("check-in added: %s %s", participant.username, iso_day)
    else:
        log.debug("check-in already present: %s %s", participant.username, iso_day)
    refresh_stats(participant, today_iso)
    return changed


def remove_check_in(participant: Participant, day: date | str, today: date | str) -> bool:
    """Undo a check-in. Returns False if the date was not present."""
    iso_day = normalize_date(day)
    today_iso = normalize_date(today)
    changed = iso_day in participant.check_ins
    if changed:
        participant.check_ins.remove(iso_day)
        log.debug("check-in removed: %s %s", participant.username, iso_day)
    else:
        log.debug("no check-in to remove: %s %s", participant.username, iso_day)
    refresh_stats(participant, today_iso)
    return changed
