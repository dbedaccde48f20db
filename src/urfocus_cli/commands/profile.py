"""Profile commands - username and personal stats."""

from typing import Annotated

import typer

from urfocus_cli.models.exceptions import TransientNetworkError
from urfocus_cli.utils.ui.console import get_console
from urfocus_cli.utils.ui.formatters import (
    format_key_value_table,
    format_success,
    format_warning,
)

from .decorators import command_wrapper
from .utils import get_profile_service, get_record_store, warn_if_onboarding

app = typer.Typer(help="Your profile and stats")
console = get_console()


@app.command("show")
@command_wrapper
async def show_profile() -> None:
    """Show local totals and the stats others see."""
    store = get_record_store()
    try:
        profiles = get_profile_service(store)
        profile = profiles.local_profile()

        format_key_value_table(
            "Profile",
            [
                ("Username", profile.username or "[dim](not set)[/dim]"),
                ("Minutes focused", str(profile.minutes_focused)),
                ("Sessions", str(profile.sessions_completed)),
                ("Streak", f"{profile.streak_days} days"),
                ("User ID", f"[dim]{profile.local_user_id}[/dim]"),
            ],
        )
        warn_if_onboarding(profiles)

        try:
            remote = await profiles.fetch_remote_stats()
        except TransientNetworkError as e:
            console.print(f"[red]Could not load leaderboard stats: {e}[/red]")
            return
    finally:
        await store.close()

    if remote is None:
        console.print("[dim]Not on the leaderboard yet[/dim]")
    else:
        console.print(
            f"[dim]Leaderboard: {remote.minutes_focused} min · "
            f"{remote.streak_days} day streak · {remote.sessions_completed} sessions[/dim]"
        )


@app.command("claim")
@command_wrapper
async def claim_username(
    username: Annotated[str, typer.Argument(help="Display name")],
) -> None:
    """Claim a unique username."""
    store = get_record_store()
    try:
        profiles = get_profile_service(store)
        name = await profiles.claim_username(username)
        await profiles.push_stats()
    finally:
        await store.close()
    format_success(f"You are now '{name}'")


@app.command("sync")
@command_wrapper
async def sync_stats() -> None:
    """Publish your local totals to the leaderboard."""
    store = get_record_store()
    try:
        pushed = await get_profile_service(store).push_stats()
    finally:
        await store.close()
    if pushed:
        format_success("Leaderboard updated")
    else:
        format_warning("Leaderboard update failed, see the log for details")
