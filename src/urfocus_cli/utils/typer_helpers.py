"""Typer helper utilities."""

from difflib import get_close_matches

import typer
from typer.core import TyperGroup

from urfocus_cli.utils import exit_codes
from urfocus_cli.utils.ui.console import get_console


def suggest_commands(attempted: str, known: list[str], limit: int = 3) -> list[str]:
    """Known command names closest to a mistyped one, best match first."""
    return get_close_matches(attempted.lower(), known, n=limit, cutoff=0.6)


class SuggestingGroup(TyperGroup):
    """Typer group that answers an unknown command with "did you mean"."""

    def resolve_command(self, ctx, args):
        try:
            return super().resolve_command(ctx, args)
        except Exception as e:
            if not args:
                raise
            suggestions = suggest_commands(args[0], sorted(self.commands))
            if not suggestions:
                raise

            console = get_console()
            console.print(f"[red]Error:[/red] no such command '{args[0]}'")
            console.print(f"[yellow]Did you mean:[/yellow] {', '.join(suggestions)}")
            raise typer.Exit(exit_codes.ERROR_INVALID_ARGS) from e
