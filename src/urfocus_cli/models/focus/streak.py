"""Daily streak rule."""

from datetime import date


def should_bump_streak(last_completed_day: date | None, today: date) -> bool:
    """Whether a completion on *today* extends the streak.

    Only the first completion on a calendar day later than the recorded one
    counts; repeated completions on the same day do not.
    """
    return last_completed_day is None or last_completed_day < today
