"""Output formatters for UR Focus CLI."""

from rich.table import Table

from urfocus_cli.utils.ui.console import get_console

console = get_console()


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {message}")


def format_clock(seconds: float) -> str:
    """Format a countdown as MM:SS (minutes may exceed 59)."""
    total = max(0, int(seconds))
    return f"{total // 60:02d}:{total % 60:02d}"


def format_focus_time(seconds: int, short: bool = False) -> str:
    """Format focused seconds as "3h 20m" (or "3h" when short)."""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    if hours > 0:
        return f"{hours}h" if short else f"{hours}h {minutes}m"
    return f"{minutes}m"


def render_progress_bar(ratio: float, width: int = 20) -> str:
    """Render a progress bar using block characters."""
    ratio = min(max(ratio, 0.0), 1.0)
    filled = int(ratio * width)
    return "█" * filled + "░" * (width - filled)


def format_key_value_table(title: str, rows: list[tuple[str, str]]) -> None:
    """Display a two-column key/value table."""
    table = Table(title=title, show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in rows:
        table.add_row(key, value)
    console.print(table)
