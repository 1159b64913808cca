"""Error taxonomy for habit-hero.

Idempotent no-ops (duplicate check-in, duplicate join) are not errors and
never raise.
"""
from __future__ import annotations


class HabitHeroError(Exception):
    """Base class for every failure the core signals to a front-end."""


class ChallengeNotFoundError(HabitHeroError, LookupError):
    def __init__(self, challenge_id: str) -> None:
        super().__init__(f"Challenge not found: {challenge_id}")
        self.challenge_id = challenge_id


class ParticipantNotFoundError(HabitHeroError, LookupError):
    def __init__(self, challenge_id: str, username: str) -> None:
        super().__init__(f"{username!r} has not joined challenge {challenge_id}")
        self.challenge_id = challenge_id
        self.username = username


class InvalidInputError(HabitHeroError, ValueError):
    pass


class InvalidDateError(InvalidInputError):
    pass


class DateOutOfRangeError(InvalidDateError):
    """Raised by the check-in window policy, never by the ledger itself."""
