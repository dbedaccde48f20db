"""Focus session domain: rewards, streaks and the session snapshot."""

from .rewards import compute_reward
from .session import Session, SessionStatus
from .streak import should_bump_streak

__all__ = ["compute_reward", "should_bump_streak", "Session", "SessionStatus"]
