"""MCP server for habit-hero.

Exposes a session's challenges as MCP tools so an assistant can join, check
in and read leaderboards mid-conversation. One ChallengeStore lives for the
lifetime of the server process.
Run via: python3 -m habit_hero.mcp_server
"""
from __future__ import annotations

import argparse
import logging
from collections.abc import Callable
from datetime import date
from typing import Any

from mcp.server.fastmcp import FastMCP

from habit_hero.challenges import Challenge
from habit_hero.cli import setup_logging
from habit_hero.config import get_backfill_days, get_log_level
from habit_hero.dates import normalize_date, parse_iso_date, system_today
from habit_hero.errors import HabitHeroError
from habit_hero.leaderboard import find_rank
from habit_hero.ledger import Participant
from habit_hero.store import ChallengeStore, ensure_in_window

log = logging.getLogger(__name__)


def _participant_dict(participant: Participant) -> dict[str, Any]:
    return {
        "username": participant.username,
        "check_ins": list(participant.check_ins),
        "total_check_ins": participant.total_check_ins,
        "current_streak": participant.current_streak,
        "longest_streak": participant.longest_streak,
    }


def _challenge_dict(challenge: Challenge) -> dict[str, Any]:
    return {
        "id": challenge.id,
        "name": challenge.name,
        "description": challenge.description,
        "creator": challenge.creator,
        "created_date": challenge.created_date,
        "participants": list(challenge.participants),
    }


def create_challenge(
    store: ChallengeStore, today: str, name: str, username: str, description: str = ""
) -> dict[str, Any]:
    try:
        challenge = store.create_challenge(name, username, today, description)
    except HabitHeroError as e:
        return {"error": str(e)}
    return _challenge_dict(challenge)


def list_challenges(store: ChallengeStore, username: str = "") -> dict[str, Any]:
    challenges = store.challenges_for(username) if username else store.list_challenges()
    return {"challenges": [_challenge_dict(c) for c in challenges], "count": len(challenges)}


def join_challenge(store: ChallengeStore, today: str, challenge_id: str, username: str) -> dict[str, Any]:
    try:
        cid = store.resolve_id(challenge_id)
        participant = store.join_challenge(cid, username, today)
    except HabitHeroError as e:
        return {"error": str(e)}
    return {"challenge_id": cid, **_participant_dict(participant)}


def change_check_in(
    store: ChallengeStore,
    today: str,
    backfill_days: int,
    challenge_id: str,
    username: str,
    day: str = "",
    undo: bool = False,
) -> dict[str, Any]:
    """Add (or with undo, remove) a check-in inside the backfill window."""
    try:
        cid = store.resolve_id(challenge_id)
        challenge = store.get_challenge(cid)
        iso_day = ensure_in_window(challenge, day or today, today, backfill_days)
        if undo:
            participant = store.remove_check_in(cid, username, iso_day, today)
        else:
            participant = store.add_check_in(cid, username, iso_day, today)
    except HabitHeroError as e:
        return {"error": str(e)}
    return {"challenge_id": cid, "date": iso_day, **_participant_dict(participant)}


def get_participant(store: ChallengeStore, today: str, challenge_id: str, username: str) -> dict[str, Any]:
    try:
        cid = store.resolve_id(challenge_id)
        participant = store.get_participant(cid, username, today)
    except HabitHeroError as e:
        return {"error": str(e)}
    return {"challenge_id": cid, **_participant_dict(participant)}


def get_leaderboard(
    store: ChallengeStore, today: str, challenge_id: str, username: str = ""
) -> dict[str, Any]:
    try:
        cid = store.resolve_id(challenge_id)
        ranked = store.ranked_participants(cid, today)
    except HabitHeroError as e:
        return {"error": str(e)}

    your_rank = find_rank(ranked, username) if username else None
    return {"entries": ranked, "count": len(ranked), "your_rank": your_rank}


def get_calendar(
    store: ChallengeStore,
    today: str,
    challenge_id: str,
    username: str,
    month: int | None = None,
    year: int | None = None,
) -> dict[str, Any]:
    today_date = parse_iso_date(today)
    month = today_date.month if month is None else month
    year = today_date.year if year is None else year
    try:
        cid = store.resolve_id(challenge_id)
        view = store.participant_calendar_view(cid, username, month, year, today)
    except HabitHeroError as e:
        return {"error": str(e)}
    return {
        "month": month,
        "year": year,
        "days": {
            d: {"status": entry.status.value, "is_today": entry.is_today}
            for d, entry in view.items()
        },
    }


def create_server(
    store: ChallengeStore,
    clock: Callable[[], date] = system_today,
    backfill_days: int = 1,
) -> FastMCP:
    """Build a FastMCP server whose tools all operate on store."""
    mcp = FastMCP(name="habit-hero")

    def today() -> str:
        return normalize_date(clock())

    @mcp.tool(name="create_challenge")
    def create_challenge_tool(name: str, username: str, description: str = "") -> dict[str, Any]:
        """Create a challenge starting today; the creator joins it."""
        return create_challenge(store, today(), name, username, description)

    @mcp.tool(name="list_challenges")
    def list_challenges_tool(username: str = "") -> dict[str, Any]:
        """List challenges, optionally only those username has joined."""
        return list_challenges(store, username)

    @mcp.tool(name="join_challenge")
    def join_challenge_tool(challenge_id: str, username: str) -> dict[str, Any]:
        """Join a challenge. Joining twice is a no-op."""
        return join_challenge(store, today(), challenge_id, username)

    @mcp.tool(name="check_in")
    def check_in_tool(challenge_id: str, username: str, date: str = "") -> dict[str, Any]:
        """Check in for a date (YYYY-MM-DD, default today)."""
        return change_check_in(store, today(), backfill_days, challenge_id, username, date)

    @mcp.tool(name="undo_check_in")
    def undo_check_in_tool(challenge_id: str, username: str, date: str = "") -> dict[str, Any]:
        """Remove a check-in for a date (YYYY-MM-DD, default today)."""
        return change_check_in(store, today(), backfill_days, challenge_id, username, date, undo=True)

    @mcp.tool(name="get_participant")
    def get_participant_tool(challenge_id: str, username: str) -> dict[str, Any]:
        """Get one participant's check-ins, totals and streaks."""
        return get_participant(store, today(), challenge_id, username)

    @mcp.tool(name="get_leaderboard")
    def get_leaderboard_tool(challenge_id: str, username: str = "") -> dict[str, Any]:
        """Ranked participants: check-ins desc, streak desc, username asc."""
        return get_leaderboard(store, today(), challenge_id, username)

    @mcp.tool(name="get_calendar")
    def get_calendar_tool(
        challenge_id: str, username: str, month: int | None = None, year: int | None = None
    ) -> dict[str, Any]:
        """Per-day status for a month: checked-in, missed or no-data."""
        return get_calendar(store, today(), challenge_id, username, month, year)

    return mcp


def main() -> None:
    parser = argparse.ArgumentParser(prog="habit-hero-mcp", description="habit-hero MCP server")
    parser.add_argument("--backfill-days", type=int, default=None)
    args = parser.parse_args()
    backfill_days = args.backfill_days if args.backfill_days is not None else get_backfill_days()
    setup_logging(get_log_level())
    log.debug("starting habit-hero MCP server (backfill_days=%d)", backfill_days)
    create_server(ChallengeStore(), backfill_days=backfill_days).run()


if __name__ == "__main__":
    main()
