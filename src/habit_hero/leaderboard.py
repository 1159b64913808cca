"""Leaderboard ranking for a challenge's participants.

Pure functions: ranking builds new row dicts and never reorders or mutates
the participants it reads.
"""
from __future__ import annotations

from collections.abc import Iterable

from habit_hero.ledger import Participant


def build_row(participant: Participant) -> dict:
    """Read-only leaderboard row for one participant."""
    return {
        "username": participant.username,
        "total_check_ins": participant.total_check_ins,
        "current_streak": participant.current_streak,
    }


def ranking_key(row: dict) -> tuple:
    return (-row["total_check_ins"], -row["current_streak"], row["username"])


def rank_participants(participants: Iterable[Participant]) -> list[dict]:
    """Sort by total_check_ins descending. Adds 'rank' key (1-based).

    Tie-break: current_streak desc, then username asc (case-sensitive).
    Usernames are unique per challenge, so the order is total.
    """
    rows = sorted((build_row(p) for p in participants), key=ranking_key)
    for i, row in enumerate(rows):
        row["rank"] = i + 1
    return rows


def find_rank(ranked: list[dict], username: str) -> int | None:
    for row in ranked:
        if row["username"] == username:
            return row["rank"]
    return None
