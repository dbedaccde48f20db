"""Main entry point for UR Focus CLI."""

import typer

from urfocus_cli import __version__
from urfocus_cli.commands import config, context, focus, goal, leaderboard, profile, shop, todo
from urfocus_cli.services.config_service import get_config_service
from urfocus_cli.utils.logger import log_file_path
from urfocus_cli.utils.typer_helpers import SuggestingGroup
from urfocus_cli.utils.ui.console import get_console

app = typer.Typer(
    name="urfocus",
    cls=SuggestingGroup,
    help="Focus timer with coin rewards and a shared campus goal",
    no_args_is_help=True,
)

console = get_console()


# Add subcommands
app.add_typer(focus.app, name="focus", help="Run focus sessions")
app.add_typer(goal.app, name="goal", help="Shared campus goal")
app.add_typer(leaderboard.app, name="leaderboard", help="Top focusers")
app.add_typer(shop.app, name="shop", help="Spend coins on cosmetics")
app.add_typer(todo.app, name="todo", help="To-do list")
app.add_typer(profile.app, name="profile", help="Username and stats")
app.add_typer(config.app, name="config", help="Configuration management")
app.add_typer(context.app, name="context", help="Storage context (local/cloud)")


@app.command()
def version() -> None:
    """Show version information, the active context and the log location."""
    console.print(f"[bold]UR Focus CLI[/bold] version [cyan]{__version__}[/cyan]")
    console.print(f"[dim]Logs: {log_file_path()}[/dim]")
    try:
        ctx = get_config_service().get_current_context()
    except (ValueError, RuntimeError):
        return
    console.print(f"[dim]Context: {ctx.name} ({ctx.type})[/dim]")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
