"""Focus session state."""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Literal

SessionStatus = Literal["idle", "running", "paused", "completed"]


@dataclass
class Session:
    """Represents one device's focus timer.

    Not persisted: a restart always begins idle.
    """

    goal_minutes: int
    status: SessionStatus = "idle"
    start_at: datetime | None = None
    target_at: datetime | None = None
    paused_remaining: int | None = None
    completed_this_run: bool = False

    @property
    def total_seconds(self) -> int:
        """Configured session length in seconds."""
        return self.goal_minutes * 60

    def remaining_seconds(self, now: datetime) -> int:
        """Seconds left in the session at *now*."""
        if self.status == "completed":
            return 0
        if self.status == "paused" and self.paused_remaining is not None:
            return self.paused_remaining
        if self.status == "running" and self.target_at is not None:
            return max(0, int((self.target_at - now).total_seconds()))
        return self.total_seconds

    def progress(self, now: datetime) -> float:
        """Fraction of the session elapsed, between 0 and 1."""
        if self.total_seconds <= 0:
            return 0.0
        done = self.total_seconds - self.remaining_seconds(now)
        return min(max(done / self.total_seconds, 0.0), 1.0)

    def is_due(self, now: datetime) -> bool:
        """Check if a running session has reached its target time."""
        return (
            self.status == "running"
            and self.target_at is not None
            and now >= self.target_at
        )

    def copy(self) -> "Session":
        """Return an independent snapshot."""
        return replace(self)
