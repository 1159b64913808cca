"""Rich terminal display for habit-hero."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from habit_hero.calendar_view import (
    MONTH_NAMES,
    WEEKDAY_HEADERS,
    CalendarDay,
    DayStatus,
    month_grid,
)
from habit_hero.streaks import streak_badge

console = Console()

_STATUS_STYLE: dict[DayStatus, str] = {
    DayStatus.CHECKED_IN: "bold green",
    DayStatus.MISSED: "red",
    DayStatus.NO_DATA: "grey50",
}


def short_id(challenge_id: str) -> str:
    return challenge_id[:8]


def format_streak(streak: int) -> str:
    """'3 days ⭐', '1 day', '0 days'."""
    unit = "day" if streak == 1 else "days"
    badge = streak_badge(streak)
    return f"{streak} {unit} {badge}" if badge else f"{streak} {unit}"


def print_challenge_list(challenges: list[dict], username: str | None = None) -> None:
    """Print all challenges with participant counts.

    Each dict has: id, name, creator, participants (int), joined (bool).
    """
    if not challenges:
        console.print(
            Panel(
                "\n  No challenges yet. Create one with [bold]create NAME[/].\n",
                title="[bold]HABIT HERO[/]",
                box=box.ROUNDED,
                border_style="grey50",
                width=60,
            )
        )
        return

    table = Table(
        title="Live Challenges",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold",
    )
    table.add_column("ID", style="cyan", width=10)
    table.add_column("Challenge", min_width=20)
    table.add_column("Creator")
    table.add_column("Participants", justify="right")
    table.add_column("", width=8)

    for c in challenges:
        action = "[green]Enter[/]" if c.get("joined") else "[yellow]Join[/]"
        table.add_row(
            short_id(c["id"]),
            f"[bold]{escape(c['name'])}[/]",
            escape(c.get("creator", "")),
            str(c.get("participants", 0)),
            action if username else "",
        )
    console.print(table)


def print_challenge(data: dict) -> None:
    """Print one challenge with the current user's stats when they have joined."""
    lines: list[str] = []
    lines.append("")
    lines.append(f"  [bold]{escape(data['name'])}[/]  [cyan]{short_id(data['id'])}[/]")
    if data.get("description"):
        lines.append(f"  {escape(data['description'])}")
    lines.append("")
    lines.append(f"  Creator: {escape(data.get('creator', ''))}")
    lines.append(f"  Started: {data.get('created_date', '')}")
    lines.append(f"  Participants: {escape(', '.join(data.get('participants', [])))}")

    me = data.get("me")
    if me:
        lines.append("")
        lines.append(f"  Current Streak: [bold]{format_streak(me['current_streak'])}[/]")
        lines.append(f"  Longest Streak: {me['longest_streak']} days")
        lines.append(f"  Check-ins:      {me['total_check_ins']}")
        today_mark = "✅" if me.get("checked_in_today") else "⏳"
        lines.append(f"  Today:          {today_mark}")
    lines.append("")

    console.print(
        Panel(
            "\n".join(lines),
            title="[bold]CHALLENGE[/]",
            box=box.ROUNDED,
            border_style="cyan",
            width=60,
        )
    )


def print_leaderboard(
    ranked: list[dict], title: str = "Leaderboard", highlight_username: str | None = None
) -> None:
    """Print ranked rows, highlighting one username."""
    if not ranked:
        console.print("[grey50]No participants yet.[/]")
        return

    table = Table(
        title=escape(title),
        box=box.ROUNDED,
        show_header=True,
        header_style="bold",
    )
    table.add_column("#", justify="right", width=4)
    table.add_column("Username", min_width=12)
    table.add_column("Check-ins", justify="right")
    table.add_column("Streak", justify="right")

    for row in ranked:
        style = "bold yellow" if row["username"] == highlight_username else None
        table.add_row(
            str(row["rank"]),
            escape(row["username"]),
            str(row["total_check_ins"]),
            format_streak(row["current_streak"]),
            style=style,
        )
    console.print(table)


def print_calendar(view: dict[str, CalendarDay], year: int, month: int) -> None:
    """Print a Sunday-first month grid coloured by day status."""
    table = Table(
        title=f"{MONTH_NAMES[month]} {year}",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold",
    )
    for header in WEEKDAY_HEADERS:
        table.add_column(header, justify="right", width=4)

    for week in month_grid(year, month):
        cells: list[str] = []
        for day in week:
            if day is None:
                cells.append("")
                continue
            entry = view[day]
            style = _STATUS_STYLE[entry.status]
            if entry.is_today:
                style += " underline"
            cells.append(f"[{style}]{int(day[-2:])}[/]")
        table.add_row(*cells)

    console.print(table)
    console.print("  [bold green]■[/] checked in  [red]■[/] missed  [grey50]■[/] no data")


def print_check_in_result(result: dict) -> None:
    """Print the outcome of a check-in or undo."""
    verb = "Checked in" if result.get("action") == "checkin" else "Removed check-in"
    if not result.get("changed"):
        verb = "Already checked in" if result.get("action") == "checkin" else "No check-in"
    console.print(
        f"  {verb} for [bold]{result['date']}[/]  "
        f"streak: {format_streak(result['current_streak'])}  "
        f"total: {result['total_check_ins']}"
    )


def print_error(message: str) -> None:
    console.print(f"[red]{escape(message)}[/]")


def print_help(commands: list[tuple[str, str]]) -> None:
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Command", style="bold")
    table.add_column("Description")
    for usage, help_text in commands:
        table.add_row(escape(usage), help_text)
    console.print(table)
