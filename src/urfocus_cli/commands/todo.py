"""To-do list commands."""

from typing import Annotated

import typer

from urfocus_cli.services import TodoService
from urfocus_cli.utils.ui.console import get_console
from urfocus_cli.utils.ui.formatters import format_success, format_warning

from .decorators import command_wrapper

app = typer.Typer(help="A simple to-do list for your study sessions")
console = get_console()

SHORT_ID = 8


@app.command("list")
@command_wrapper(auth_required=False)
def list_todos() -> None:
    """Show the to-do list."""
    items = TodoService().list()
    if not items:
        console.print("[dim]Nothing to do. Add one with 'urfocus todo add'[/dim]")
        return

    for item in items:
        mark = "[green]✓[/green]" if item.is_completed else "○"
        title = f"[strike dim]{item.title}[/strike dim]" if item.is_completed else item.title
        console.print(f"{mark} [dim]{item.id[:SHORT_ID]}[/dim]  {title}")


@app.command("add")
@command_wrapper(auth_required=False)
def add_todo(
    title: Annotated[list[str], typer.Argument(help="To-do title")],
) -> None:
    """Add a to-do."""
    item = TodoService().add(" ".join(title))
    if item is None:
        format_warning("Empty to-do ignored")
        return
    format_success(f"Added {item.id[:SHORT_ID]}: {item.title}")


@app.command("toggle")
@command_wrapper(auth_required=False)
def toggle_todo(
    item_id: Annotated[str, typer.Argument(help="To-do ID (prefix is enough)")],
) -> None:
    """Mark a to-do done, or not done."""
    item = TodoService().toggle(item_id)
    state = "done" if item.is_completed else "not done"
    format_success(f"{item.title} marked {state}")


@app.command("delete")
@command_wrapper(auth_required=False)
def delete_todo(
    item_id: Annotated[str, typer.Argument(help="To-do ID (prefix is enough)")],
) -> None:
    """Delete a to-do."""
    item = TodoService().delete(item_id)
    format_success(f"Deleted {item.title}")
