"""CLI for habit-hero.

`habit-hero` opens a session backed by a fresh in-memory ChallengeStore and
reads commands interactively, or replays them from a script file.
"""

from __future__ import annotations

import argparse
import logging
import shlex
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from habit_hero.challenges import is_participant
from habit_hero.config import (
    get_backfill_days,
    get_log_level,
    get_username,
    set_username,
)
from habit_hero.dates import normalize_date, parse_iso_date, system_today, yesterday
from habit_hero.display import (
    console,
    print_calendar,
    print_challenge,
    print_challenge_list,
    print_check_in_result,
    print_error,
    print_help,
    print_leaderboard,
)
from habit_hero.errors import HabitHeroError, InvalidInputError
from habit_hero.leaderboard import find_rank
from habit_hero.store import ChallengeStore, ensure_in_window

log = logging.getLogger(__name__)

COMMANDS: list[tuple[str, str]] = [
    ("create NAME [-d DESC]", "Create a challenge (you join it automatically)"),
    ("list", "List all challenges"),
    ("join ID", "Join a challenge"),
    ("checkin ID [DATE]", "Check in for today, yesterday or a date"),
    ("undo ID [DATE]", "Remove a check-in"),
    ("show ID", "Show a challenge and your streak"),
    ("board ID", "Show the challenge leaderboard"),
    ("calendar ID [-m M] [-y Y]", "Show your check-in calendar"),
    ("user NAME", "Switch the current user"),
    ("today [DATE]", "Show or pin the session date"),
    ("help", "Show this help"),
    ("quit", "End the session"),
]


class CommandError(Exception):
    """A session command line could not be parsed."""


class _CommandParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise CommandError(message)

    def exit(self, status: int = 0, message: str | None = None) -> None:  # type: ignore[override]
        raise CommandError(message or "")


@dataclass
class Session:
    store: ChallengeStore
    username: str | None = None
    clock: Callable[[], date] = system_today
    backfill_days: int = 1
    failures: int = 0

    def today(self) -> str:
        return normalize_date(self.clock())

    def require_user(self) -> str:
        if not self.username:
            raise InvalidInputError("No user set. Run: user NAME")
        return self.username


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="habit-hero",
        description="Track shared habit challenges, check-ins and streaks",
    )
    parser.add_argument("script", nargs="?", default=None, help="File of session commands to replay")
    parser.add_argument("--user", "-u", default=None, help="Username for this session")
    parser.add_argument("--save-user", action="store_true", help="Remember --user as the default")
    parser.add_argument("--today", default=None, help="Pin the session date (YYYY-MM-DD)")
    parser.add_argument("--config", default=None, help="Path to config.json")
    parser.add_argument(
        "--backfill-days", type=int, default=None,
        help="How many past days a check-in may target (default from config, else 1)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def build_command_parser() -> argparse.ArgumentParser:
    """Parser for one line typed in a session."""
    parser = _CommandParser(prog="", add_help=False)
    sub = parser.add_subparsers(dest="command", parser_class=_CommandParser)
    create_p = sub.add_parser("create", add_help=False)
    create_p.add_argument("name", nargs="+")
    create_p.add_argument("--description", "-d", default="")
    sub.add_parser("list", add_help=False)
    for name in ("join", "show", "board"):
        p = sub.add_parser(name, add_help=False)
        p.add_argument("challenge_id")
    for name in ("checkin", "undo"):
        p = sub.add_parser(name, add_help=False)
        p.add_argument("challenge_id")
        p.add_argument("date", nargs="?", default="today")
    cal_p = sub.add_parser("calendar", add_help=False)
    cal_p.add_argument("challenge_id")
    cal_p.add_argument("--month", "-m", type=int, default=None)
    cal_p.add_argument("--year", "-y", type=int, default=None)
    user_p = sub.add_parser("user", add_help=False)
    user_p.add_argument("username")
    today_p = sub.add_parser("today", add_help=False)
    today_p.add_argument("date", nargs="?", default=None)
    sub.add_parser("help", add_help=False)
    sub.add_parser("quit", add_help=False)
    sub.add_parser("exit", add_help=False)
    return parser


def setup_logging(level: str | int = logging.WARNING) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def resolve_day(word: str, today: str) -> str:
    """Accept 'today', 'yesterday' or a YYYY-MM-DD date."""
    lowered = word.lower()
    if lowered == "today":
        return today
    if lowered == "yesterday":
        return yesterday(today)
    return normalize_date(word)


def _challenge_summary(session: Session, challenge_id: str) -> dict:
    challenge = session.store.get_challenge(challenge_id)
    return {
        "id": challenge.id,
        "name": challenge.name,
        "creator": challenge.creator,
        "participants": len(challenge.participants),
        "joined": bool(session.username) and is_participant(challenge, session.username),
    }


def do_create(session: Session, name: str, description: str = "") -> dict:
    """Create a challenge owned by the current user."""
    username = session.require_user()
    challenge = session.store.create_challenge(name, username, session.today(), description)
    console.print(f"  Created [bold]{escape(challenge.name)}[/] ([cyan]{challenge.id[:8]}[/])")
    return {"ok": True, "id": challenge.id, "name": challenge.name}


def do_list(session: Session) -> dict:
    """List every challenge in the session."""
    summaries = [_challenge_summary(session, c.id) for c in session.store.list_challenges()]
    print_challenge_list(summaries, username=session.username)
    return {"ok": True, "challenges": summaries}


def do_join(session: Session, challenge_id: str) -> dict:
    username = session.require_user()
    cid = session.store.resolve_id(challenge_id)
    session.store.join_challenge(cid, username, session.today())
    challenge = session.store.get_challenge(cid)
    console.print(f"  {escape(username)} is in [bold]{escape(challenge.name)}[/]")
    return {"ok": True, "id": cid, "participants": list(challenge.participants)}


def _do_ledger_change(session: Session, challenge_id: str, day: str, action: str) -> dict:
    username = session.require_user()
    today = session.today()
    cid = session.store.resolve_id(challenge_id)
    challenge = session.store.get_challenge(cid)
    iso_day = ensure_in_window(challenge, resolve_day(day, today), today, session.backfill_days)
    participant = session.store.get_participant(cid, username, today)
    before = participant.total_check_ins
    if action == "checkin":
        participant = session.store.add_check_in(cid, username, iso_day, today)
    else:
        participant = session.store.remove_check_in(cid, username, iso_day, today)
    result = {
        "ok": True,
        "action": action,
        "date": iso_day,
        "changed": participant.total_check_ins != before,
        "total_check_ins": participant.total_check_ins,
        "current_streak": participant.current_streak,
    }
    print_check_in_result(result)
    return result


def do_check_in(session: Session, challenge_id: str, day: str = "today") -> dict:
    """Record a check-in for the current user, limited to the backfill window."""
    return _do_ledger_change(session, challenge_id, day, "checkin")


def do_undo(session: Session, challenge_id: str, day: str = "today") -> dict:
    """Remove a check-in for the current user, limited to the backfill window."""
    return _do_ledger_change(session, challenge_id, day, "undo")


def do_show(session: Session, challenge_id: str) -> dict:
    today = session.today()
    cid = session.store.resolve_id(challenge_id)
    challenge = session.store.get_challenge(cid)
    data: dict = {
        "id": challenge.id,
        "name": challenge.name,
        "description": challenge.description,
        "creator": challenge.creator,
        "created_date": challenge.created_date,
        "participants": list(challenge.participants),
        "me": None,
    }
    if session.username and is_participant(challenge, session.username):
        p = session.store.get_participant(cid, session.username, today)
        data["me"] = {
            "total_check_ins": p.total_check_ins,
            "current_streak": p.current_streak,
            "longest_streak": p.longest_streak,
            "checked_in_today": p.has_checked_in(today),
        }
    print_challenge(data)
    return {"ok": True, **data}


def do_board(session: Session, challenge_id: str) -> dict:
    """Show the challenge leaderboard."""
    cid = session.store.resolve_id(challenge_id)
    ranked = session.store.ranked_participants(cid, session.today())
    challenge = session.store.get_challenge(cid)
    print_leaderboard(ranked, title=challenge.name, highlight_username=session.username)
    your_rank = find_rank(ranked, session.username) if session.username else None
    return {"ok": True, "entries": ranked, "count": len(ranked), "your_rank": your_rank}


def do_calendar(
    session: Session, challenge_id: str, month: int | None = None, year: int | None = None
) -> dict:
    """Show the current user's month calendar (defaults to the current month)."""
    username = session.require_user()
    today = parse_iso_date(session.today())
    month = today.month if month is None else month
    year = today.year if year is None else year
    cid = session.store.resolve_id(challenge_id)
    view = session.store.participant_calendar_view(cid, username, month, year, today)
    print_calendar(view, year, month)
    return {"ok": True, "month": month, "year": year, "days": view}


def do_user(session: Session, username: str) -> dict:
    session.username = username
    console.print(f"  Current user: [bold]{escape(username)}[/]")
    return {"ok": True, "username": username}


def do_today(session: Session, day: str | None = None) -> dict:
    """Show the session date, or pin it to a date."""
    if day is not None:
        pinned = parse_iso_date(resolve_day(day, session.today()))
        session.clock = lambda: pinned
        log.info("session date pinned to %s", pinned.isoformat())
    today = session.today()
    console.print(f"  Today is [bold]{today}[/]")
    return {"ok": True, "today": today}


def run_command(session: Session, line: str, parser: argparse.ArgumentParser | None = None) -> dict:
    """Parse and run one session command. Failures are printed, never raised."""
    parser = parser or build_command_parser()
    try:
        args = parser.parse_args(shlex.split(line))
        command = args.command
        if command is None or command == "help":
            print_help(COMMANDS)
            return {"ok": True}
        if command in ("quit", "exit"):
            return {"ok": True, "quit": True}
        if command == "create":
            return do_create(session, " ".join(args.name), args.description)
        if command == "list":
            return do_list(session)
        if command == "join":
            return do_join(session, args.challenge_id)
        if command == "checkin":
            return do_check_in(session, args.challenge_id, args.date)
        if command == "undo":
            return do_undo(session, args.challenge_id, args.date)
        if command == "show":
            return do_show(session, args.challenge_id)
        if command == "board":
            return do_board(session, args.challenge_id)
        if command == "calendar":
            return do_calendar(session, args.challenge_id, args.month, args.year)
        if command == "user":
            return do_user(session, args.username)
        return do_today(session, args.date)
    except (CommandError, ValueError) as e:
        message = str(e).strip() or "Invalid command"
        if not isinstance(e, HabitHeroError):
            message = f"{message}. Type 'help' for commands."
        print_error(message)
        session.failures += 1
        return {"ok": False, "reason": message}
    except HabitHeroError as e:
        print_error(str(e))
        session.failures += 1
        return {"ok": False, "reason": str(e)}


def run_script(session: Session, lines: Iterable[str]) -> int:
    """Replay commands; '#' comments and blank lines are skipped. Returns an exit code."""
    parser = build_command_parser()
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        console.print(f"[grey50]> {line}[/]")
        result = run_command(session, line, parser)
        if result.get("quit"):
            break
    return 1 if session.failures else 0


def run_interactive(session: Session) -> None:
    parser = build_command_parser()
    console.print("[bold]HABIT HERO[/]  type 'help' for commands")
    while True:
        prompt = f"[bold cyan]{escape(session.username or '?')}[/] @ {session.today()} > "
        try:
            line = console.input(prompt)
        except (EOFError, KeyboardInterrupt):
            console.print()
            break
        if not line.strip():
            continue
        if run_command(session, line, parser).get("quit"):
            break


def main(argv: list[str] | None = None) -> None:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config_path = Path(args.config).expanduser() if args.config else None
    setup_logging(logging.DEBUG if args.verbose else get_log_level(config_path))

    username = args.user or get_username(config_path)
    if args.save_user:
        if not args.user:
            parser.error("--save-user requires --user")
        set_username(args.user, config_path)

    clock: Callable[[], date] = system_today
    if args.today:
        try:
            pinned = parse_iso_date(args.today)
        except HabitHeroError as e:
            parser.error(str(e))
        clock = lambda: pinned  # noqa: E731

    backfill_days = args.backfill_days
    if backfill_days is None:
        backfill_days = get_backfill_days(config_path)
    elif backfill_days < 0:
        parser.error("--backfill-days must be >= 0")

    session = Session(
        store=ChallengeStore(), username=username, clock=clock, backfill_days=backfill_days
    )

    if args.script:
        script_path = Path(args.script)
        try:
            lines = script_path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            parser.error(f"Cannot read script {script_path}: {e}")
        exit_code = run_script(session, lines)
        if exit_code:
            raise SystemExit(exit_code)
    else:
        run_interactive(session)


if __name__ == "__main__":
    main()
