"""Shared campus goal commands."""

from __future__ import annotations

import asyncio
import signal
from typing import Annotated, Optional

import typer
from rich.live import Live

from urfocus_cli.models import SharedGoal
from urfocus_cli.models.core import ProgressMetric
from urfocus_cli.models.exceptions import ValidationError
from urfocus_cli.utils.ui.console import get_console
from urfocus_cli.utils.ui.formatters import format_focus_time, render_progress_bar

from .decorators import command_wrapper
from .utils import get_aggregator, get_record_store

app = typer.Typer(help="Shared campus focus goal")
console = get_console()


def format_goal(goal: SharedGoal, metric: ProgressMetric = "seconds") -> str:
    """One-line summary of the shared goal."""
    ratio = goal.progress(metric)
    if metric == "sessions":
        amount = f"{goal.sessions_completed:,}/{goal.goal_target:,} sessions"
    else:
        amount = (
            f"{format_focus_time(goal.seconds_focused)}"
            f"/{format_focus_time(goal.goal_target, short=True)}"
        )
    return f"{render_progress_bar(ratio, width=30)} {ratio * 100:.1f}%  {amount}"


def _check_metric(metric: str) -> ProgressMetric:
    if metric not in ("sessions", "seconds"):
        raise ValidationError("metric must be 'sessions' or 'seconds'")
    return metric  # type: ignore[return-value]


@app.command("show")
@command_wrapper
async def show_goal(
    metric: Annotated[
        str, typer.Option("--metric", help="Progress metric: seconds or sessions")
    ] = "seconds",
) -> None:
    """Show progress toward the shared goal."""
    chosen = _check_metric(metric)
    store = get_record_store()
    try:
        goal = await get_aggregator(store).fetch()
    finally:
        await store.close()

    console.print("\n[bold cyan]🎯 Campus Focus Goal[/bold cyan]\n")
    console.print(f"  {format_goal(goal, chosen)}")
    console.print(
        f"  [dim]{goal.sessions_completed:,} sessions · "
        f"{format_focus_time(goal.seconds_focused)} focused by everyone[/dim]\n"
    )


@app.command("watch")
@command_wrapper
async def watch_goal(
    metric: Annotated[
        str, typer.Option("--metric", help="Progress metric: seconds or sessions")
    ] = "seconds",
    duration: Annotated[
        Optional[float],
        typer.Option("--for", help="Stop after this many seconds"),
    ] = None,
) -> None:
    """Follow the shared goal live until Ctrl+C."""
    chosen = _check_metric(metric)
    store = get_record_store()
    aggregator = get_aggregator(store)

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, stop.set)
        handler_installed = True
    except (NotImplementedError, RuntimeError):
        handler_installed = False

    try:
        goal = await aggregator.fetch()
        with Live(format_goal(goal, chosen), console=console) as live:
            aggregator.subscribe(lambda g: live.update(format_goal(g, chosen)))
            try:
                await asyncio.wait_for(stop.wait(), timeout=duration)
            except TimeoutError:
                pass
    finally:
        aggregator.unsubscribe()
        if handler_installed:
            loop.remove_signal_handler(signal.SIGINT)
        await store.close()
