"""In-memory challenge store for one habit-hero session.

A ChallengeStore is constructed once per session and passed to whatever needs
it. Every operation that depends on the current date takes `today` as an
argument; the store never reads the clock itself.
"""
from __future__ import annotations

import logging
from datetime import date

from habit_hero import challenges as challenge_ops
from habit_hero import ledger
from habit_hero.calendar_view import CalendarDay, participant_calendar_view
from habit_hero.challenges import Challenge, new_challenge_id
from habit_hero.dates import date_minus, normalize_date
from habit_hero.errors import (
    ChallengeNotFoundError,
    DateOutOfRangeError,
    InvalidInputError,
)
from habit_hero.leaderboard import rank_participants
from habit_hero.ledger import Participant, refresh_stats

log = logging.getLogger(__name__)


def check_in_window(challenge: Challenge, today: date | str, backfill_days: int) -> tuple[str, str]:
    """Inclusive (first, last) dates a front-end lets a user check in for."""
    if backfill_days < 0:
        raise InvalidInputError(f"backfill_days must be >= 0, got {backfill_days}")
    today_iso = normalize_date(today)
    first = max(challenge.created_date, date_minus(today_iso, backfill_days))
    return first, today_iso


def ensure_in_window(
    challenge: Challenge, day: date | str, today: date | str, backfill_days: int
) -> str:
    """Return the normalized day, or raise DateOutOfRangeError."""
    iso_day = normalize_date(day)
    first, last = check_in_window(challenge, today, backfill_days)
    if not first <= iso_day <= last:
        raise DateOutOfRangeError(
            f"{iso_day} is outside the check-in window {first} .. {last}"
        )
    return iso_day


class ChallengeStore:
    """Owns every challenge (and through them every participant) of a session."""

    def __init__(self) -> None:
        self._challenges: dict[str, Challenge] = {}

    def __len__(self) -> int:
        return len(self._challenges)

    def create_challenge(
        self, name: str, creator: str, today: date | str, description: str = ""
    ) -> Challenge:
        """Create a challenge dated today. The creator joins it immediately."""
        if not name or not name.strip():
            raise InvalidInputError("Challenge name must not be empty")
        today_iso = normalize_date(today)
        challenge = Challenge(
            id=new_challenge_id(),
            name=name.strip(),
            created_date=today_iso,
            creator=creator,
            description=description,
        )
        challenge_ops.join_challenge(challenge, creator, today_iso)
        self._challenges[challenge.id] = challenge
        log.info("challenge created: %s (%s) by %s", challenge.name, challenge.id, creator)
        return challenge

    def get_challenge(self, challenge_id: str) -> Challenge:
        try:
            return self._challenges[challenge_id]
        except KeyError:
            raise ChallengeNotFoundError(challenge_id) from None

    def resolve_id(self, prefix: str) -> str:
        """Expand a unique id prefix to the full challenge id."""
        if prefix in self._challenges:
            return prefix
        matches = [cid for cid in self._challenges if prefix and cid.startswith(prefix)]
        if len(matches) == 1:
            return matches[0]
        if matches:
            raise InvalidInputError(f"Ambiguous challenge id prefix: {prefix}")
        raise ChallengeNotFoundError(prefix)

    def list_challenges(self) -> list[Challenge]:
        """All challenges in creation order."""
        return list(self._challenges.values())

    def challenges_for(self, username: str) -> list[Challenge]:
        return [c for c in self._challenges.values() if challenge_ops.is_participant(c, username)]

    def join_challenge(self, challenge_id: str, username: str, today: date | str) -> Participant:
        challenge = self.get_challenge(challenge_id)
        return challenge_ops.join_challenge(challenge, username, today)

    def get_participant(self, challenge_id: str, username: str, today: date | str) -> Participant:
        """Look up a participant with stats refreshed for today."""
        challenge = self.get_challenge(challenge_id)
        participant = challenge_ops.get_participant(challenge, username)
        return refresh_stats(participant, today)

    def _lookup(self, challenge_id: str, username: str) -> Participant:
        return challenge_ops.get_participant(self.get_challenge(challenge_id), username)

    def add_check_in(
        self, challenge_id: str, username: str, day: date | str, today: date | str
    ) -> Participant:
        participant = self._lookup(challenge_id, username)
        ledger.add_check_in(participant, day, today)
        return participant

    def remove_check_in(
        self, challenge_id: str, username: str, day: date | str, today: date | str
    ) -> Participant:
        participant = self._lookup(challenge_id, username)
        ledger.remove_check_in(participant, day, today)
        return participant

    def ranked_participants(self, challenge_id: str, today: date | str) -> list[dict]:
        challenge = self.get_challenge(challenge_id)
        today_iso = normalize_date(today)
        for participant in challenge.participants.values():
            refresh_stats(participant, today_iso)
        return rank_participants(challenge.participants.values())

    def participant_calendar_view(
        self, challenge_id: str, username: str, month: int, year: int, today: date | str
    ) -> dict[str, CalendarDay]:
        challenge = self.get_challenge(challenge_id)
        participant = challenge_ops.get_participant(challenge, username)
        return participant_calendar_view(participant, challenge.created_date, month, year, today)
