"""Leaderboard commands."""

from typing import Annotated

import typer
from rich.table import Table

from urfocus_cli.utils.ui.console import get_console

from .decorators import command_wrapper
from .utils import (
    get_leaderboard_service,
    get_profile_service,
    get_record_store,
    warn_if_onboarding,
)

app = typer.Typer(help="Top focusers")
console = get_console()

_TITLES = {
    "minutes": "Minutes Focused",
    "streak": "Daily Streaks",
    "sessions": "Sessions Completed",
}


@app.command("show")
@command_wrapper
async def show_leaderboard(
    by: Annotated[
        str, typer.Option("--by", "-b", help="Rank by: minutes, streak or sessions")
    ] = "minutes",
    limit: Annotated[int, typer.Option("--limit", "-n", help="Rows to show")] = 10,
) -> None:
    """Show the top users."""
    store = get_record_store()
    try:
        entries = await get_leaderboard_service(store).top(by, limit)
        profiles = get_profile_service(store)
    finally:
        await store.close()

    warn_if_onboarding(profiles)

    if not entries:
        console.print("[yellow]No one on the leaderboard yet[/yellow]")
        return

    table = Table(title=f"🏆 Top {limit} {_TITLES.get(by, by)}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("User", style="cyan")
    table.add_column("Minutes", justify="right")
    table.add_column("Streak", justify="right")
    table.add_column("Sessions", justify="right")

    for rank, entry in enumerate(entries, start=1):
        table.add_row(
            str(rank),
            entry.display_name,
            str(entry.minutes_focused),
            f"{entry.streak_days} days",
            str(entry.sessions_completed),
        )
    console.print(table)
