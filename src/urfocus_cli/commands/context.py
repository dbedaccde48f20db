"""Context management commands.

Switches between the local SQLite vault and the remote records service.
"""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.table import Table

from urfocus_cli.models.exceptions import NotFoundError
from urfocus_cli.services.config_service import get_config_service
from urfocus_cli.utils.ui.console import get_console
from urfocus_cli.utils.ui.formatters import format_success

from .decorators import command_wrapper

app = typer.Typer(help="Manage storage contexts (local/remote)")
console = get_console()


@app.command("list")
@command_wrapper(auth_required=False)
def list_contexts() -> None:
    """List available contexts."""
    svc = get_config_service()
    current = svc.config.current_context_name

    table = Table(show_header=True)
    table.add_column("", width=1)
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    table.add_column("Source", style="dim")
    table.add_column("Description")

    for ctx in svc.list_contexts():
        table.add_row(
            "*" if ctx.name == current else "",
            ctx.name,
            ctx.type,
            ctx.source,
            ctx.description,
        )
    console.print(table)


@app.command("current")
@command_wrapper(auth_required=False)
def current_context() -> None:
    """Show the active context."""
    ctx = get_config_service().get_current_context()
    console.print(f"\n[bold]Context:[/bold] {ctx.name} ([cyan]{ctx.type}[/cyan])")
    console.print(f"[bold]Source:[/bold] {ctx.source}")
    if ctx.description:
        console.print(f"[bold]Description:[/bold] {ctx.description}")
    console.print()


@app.command("use")
@command_wrapper(auth_required=False)
def use_context(
    name: Annotated[str, typer.Argument(help="Context name")],
) -> None:
    """Switch the active context."""
    try:
        ctx = get_config_service().use_context(name)
    except ValueError as e:
        raise NotFoundError(str(e)) from e
    format_success(f"Switched to context '{ctx.name}' ({ctx.type})")


@app.command("set-token")
@command_wrapper(auth_required=False)
def set_token(
    token: Annotated[str, typer.Argument(help="Access token for the records service")],
    context: Annotated[
        Optional[str], typer.Option("--context", "-c", help="Context (default: current)")
    ] = None,
) -> None:
    """Store an access token for a remote context."""
    svc = get_config_service()
    try:
        target = svc.config.get_context(context) if context else svc.get_current_context()
    except ValueError as e:
        raise NotFoundError(str(e)) from e
    svc.save_credentials(token, target.name)
    format_success(f"Token saved for context '{target.name}'")
