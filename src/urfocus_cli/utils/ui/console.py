"""Console utilities for UR Focus CLI.

Also maps equipped shop backgrounds to the Rich style of the timer panel.
"""

from functools import lru_cache

from rich.console import Console
from rich.style import Style

# Terminals cannot paint gradients, so "gradient" uses the two campus colors.
BACKGROUND_STYLES: dict[str, Style] = {
    "system": Style(),
    "midnight": Style(color="bright_white", bgcolor="#0b1a3a"),
    "gradient": Style(color="#1a3a8c", bgcolor="#f5d442"),
}


@lru_cache(maxsize=2)
def get_console(highlight: bool = True) -> Console:
    """Get a Rich Console instance for consistent output formatting."""
    return Console(highlight=highlight)


def background_style(background: str | None) -> Style:
    """Panel style for an equipped background; unknown ids use the terminal's own."""
    return BACKGROUND_STYLES.get(background or "system", BACKGROUND_STYLES["system"])
