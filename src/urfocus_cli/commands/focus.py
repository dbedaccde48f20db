"""Focus timer commands."""

from __future__ import annotations

import asyncio
import signal
from typing import Annotated, Optional

import typer
from rich.console import Group
from rich.live import Live
from rich.panel import Panel
from rich.prompt import Confirm
from rich.text import Text

from urfocus_cli.models.exceptions import TransientNetworkError
from urfocus_cli.services import SessionStateMachine, SharedGoalAggregator
from urfocus_cli.services.config_service import get_config_service
from urfocus_cli.utils.logger import get_logger
from urfocus_cli.utils.ui.console import background_style, get_console
from urfocus_cli.utils.ui.formatters import (
    format_clock,
    format_key_value_table,
    format_success,
    format_warning,
    render_progress_bar,
)

from .decorators import command_wrapper
from .utils import get_record_store, get_session_machine, warn_if_onboarding

app = typer.Typer(help="Focus timer with coin rewards")
console = get_console()
logger = get_logger()

TICK_SECONDS = 1.0


def render_timer(machine: SessionStateMachine, aggregator: SharedGoalAggregator):
    """Build the live timer panel."""
    remaining = machine.remaining_seconds()
    progress = machine.progress()
    status = machine.status

    lines = [
        Text(format_clock(remaining), style="bold cyan", justify="center"),
        Text(
            f"{render_progress_bar(progress, width=30)} {progress * 100:.0f}%",
            justify="center",
        ),
    ]

    goal = aggregator.current_value()
    if goal is not None:
        ratio = goal.progress("seconds")
        lines.append(
            Text(
                f"Campus goal {render_progress_bar(ratio, width=15)} {ratio * 100:.1f}%",
                style="dim",
                justify="center",
            )
        )
    lines.append(Text("Ctrl+C to pause", style="dim", justify="center"))

    return Panel(
        Group(*lines),
        title=f"🍅 Focus ({machine.session.goal_minutes} min)",
        subtitle=status,
        border_style="green" if status == "running" else "yellow",
        style=background_style(machine.preferences.background),
    )


async def run_focus_session(
    machine: SessionStateMachine,
    aggregator: SharedGoalAggregator,
    tick_seconds: float = TICK_SECONDS,
) -> bool:
    """Run the timer until it completes or the user gives up.

    Ctrl+C pauses the session and asks whether to resume.

    Returns:
        True if the session completed
    """
    loop = asyncio.get_running_loop()
    interrupted = asyncio.Event()
    try:
        loop.add_signal_handler(signal.SIGINT, interrupted.set)
        handler_installed = True
    except (NotImplementedError, RuntimeError):
        handler_installed = False

    try:
        try:
            await aggregator.fetch()
        except TransientNetworkError as e:
            logger.warning("shared goal unavailable: %s", e)
        aggregator.subscribe()

        machine.start()
        while True:
            with Live(
                render_timer(machine, aggregator),
                console=console,
                refresh_per_second=4,
                transient=True,
            ) as live:
                while machine.status == "running":
                    machine.tick()
                    live.update(render_timer(machine, aggregator))
                    if machine.status != "running":
                        break
                    try:
                        await asyncio.wait_for(interrupted.wait(), timeout=tick_seconds)
                    except TimeoutError:
                        continue
                    interrupted.clear()
                    machine.pause()

            if machine.status == "completed":
                return True

            console.print(
                f"[yellow]⏸  Paused with {format_clock(machine.remaining_seconds())} left[/yellow]"
            )
            resume = await asyncio.to_thread(Confirm.ask, "Resume?", default=True)
            if not resume:
                machine.reset()
                return False
            machine.start()
    finally:
        aggregator.unsubscribe()
        if handler_installed:
            loop.remove_signal_handler(signal.SIGINT)
        await machine.wait_idle()


@app.command("start")
@command_wrapper
async def start_focus(
    minutes: Annotated[
        Optional[int],
        typer.Option("--minutes", "-m", help="Session length (1-120), saved as default"),
    ] = None,
) -> None:
    """Start a focus session and count it down."""
    store = get_record_store()
    try:
        machine = get_session_machine(store)
        warn_if_onboarding(machine.profile_service)
        if minutes is not None:
            machine.set_goal_minutes(minutes)
        completed = await run_focus_session(machine, machine.aggregator)
    finally:
        await store.close()

    if not completed:
        format_warning("Session abandoned, no coins earned")
        return

    prefs = machine.preferences
    format_success(f"Focus session complete! +{machine.last_reward} coins")
    console.print(
        f"  💰 Coins: [bold]{prefs.coins}[/bold]   "
        f"🔥 Streak: [bold]{prefs.streak_days}[/bold] "
        f"day{'' if prefs.streak_days == 1 else 's'}"
    )


@app.command("length")
@command_wrapper(auth_required=False)
def set_length(
    minutes: Annotated[int, typer.Argument(help="Session length in minutes (1-120)")],
) -> None:
    """Set the default session length."""
    machine = get_session_machine()
    machine.set_goal_minutes(minutes)
    format_success(f"Session length set to {minutes} minutes")


@app.command("status")
@command_wrapper(auth_required=False)
def show_status() -> None:
    """Show session settings, coins and streak."""
    prefs = get_config_service().config.focus
    last_day = prefs.last_completed_day.isoformat() if prefs.last_completed_day else "never"
    format_key_value_table(
        "Focus",
        [
            ("Session length", f"{prefs.session_minutes} min"),
            ("Coins", str(prefs.coins)),
            ("Streak", f"{prefs.streak_days} day{'' if prefs.streak_days == 1 else 's'}"),
            ("Last completed", last_day),
            ("Background", prefs.background),
        ],
    )
