"""UR Focus CLI - focus timer with a shared campus goal."""

__version__ = "0.3.0"
