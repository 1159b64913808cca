"""Challenges and the join operation."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date

from habit_hero.dates import normalize_date
from habit_hero.errors import InvalidInputError, ParticipantNotFoundError
from habit_hero.ledger import Participant, refresh_stats

log = logging.getLogger(__name__)


def new_challenge_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Challenge:
    id: str
    name: str
    created_date: str  # YYYY-MM-DD, fixed at creation
    creator: str = ""
    description: str = ""
    participants: dict[str, Participant] = field(default_factory=dict)  # join order

    def __post_init__(self) -> None:
        self.created_date = normalize_date(self.created_date)


def _check_username(username: str) -> str:
    if not isinstance(username, str) or not username.strip():
        raise InvalidInputError("Username must be a non-empty string")
    return username


def is_participant(challenge: Challenge, username: str) -> bool:
    return username in challenge.participants


def get_participant(challenge: Challenge, username: str) -> Participant:
    try:
        return challenge.participants[username]
    except KeyError:
        raise ParticipantNotFoundError(challenge.id, username) from None


def join_challenge(challenge: Challenge, username: str, today: date | str) -> Participant:
    """Admit username once. Joining again returns the existing participant."""
    _check_username(username)
    today_iso = normalize_date(today)
    existing = challenge.participants.get(username)
    if existing is not None:
        log.debug("%s already in challenge %s", username, challenge.id)
        return refresh_stats(existing, today_iso)

    participant = Participant(username=username)
    challenge.participants[username] = participant
    log.info("%s joined challenge %s (%s)", username, challenge.name, challenge.id)
    return participant
