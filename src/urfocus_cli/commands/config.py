"""Configuration management commands."""

from typing import Annotated, Optional

import typer

from urfocus_cli.models.exceptions import NotFoundError
from urfocus_cli.services.config_service import get_config_service
from urfocus_cli.utils.ui.console import get_console
from urfocus_cli.utils.ui.formatters import format_success, format_warning

from .decorators import command_wrapper

app = typer.Typer(help="Configuration management commands")
console = get_console()


def parse_value(value: str) -> str | int | bool:
    """Convert a command-line value to bool or int when it looks like one."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.lstrip("-").isdigit():
        return int(value)
    return value


@app.command("view")
@command_wrapper(auth_required=False)
def view_config() -> None:
    """View current configuration."""
    config = get_config_service().config
    console.print_json(config.model_dump_json(indent=2))


@app.command("get")
@command_wrapper(auth_required=False)
def get_value(
    key: Annotated[str, typer.Argument(help="Configuration key (e.g., focus.session_minutes)")],
) -> None:
    """Get a configuration value."""
    value = get_config_service().get(key)
    if value is None:
        raise NotFoundError(f"Configuration key '{key}' not found")
    console.print(value)


@app.command("set")
@command_wrapper(auth_required=False)
def set_value(
    key: Annotated[str, typer.Argument(help="Configuration key (e.g., sync.poll_interval)")],
    value: Annotated[str, typer.Argument(help="Configuration value")],
) -> None:
    """Set a configuration value."""
    parsed = parse_value(value)
    try:
        get_config_service().set(key, parsed)
    except KeyError as e:
        raise NotFoundError(f"Configuration key '{key}' not found") from e
    format_success(f"Configuration '{key}' set to '{parsed}'")


@app.command("reset")
@command_wrapper(auth_required=False)
def reset_config(
    yes: Annotated[
        Optional[bool], typer.Option("--yes", "-y", help="Skip confirmation")
    ] = False,
) -> None:
    """Reset configuration to defaults (coins, streak and stats included)."""
    if not yes and not typer.confirm(
        "Reset the entire configuration, including coins and streak?"
    ):
        format_warning("Cancelled")
        raise typer.Exit(0)

    get_config_service().reset_config()
    format_success("Configuration reset to defaults")
