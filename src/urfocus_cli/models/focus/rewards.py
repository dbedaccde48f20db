"""Coin rewards for completed focus sessions."""

import math

BONUS_THRESHOLD_MINUTES = 30
BONUS_GROWTH = 1.1
COINS_PER_MINUTE = 2


def compute_reward(duration_minutes: float) -> int:
    """
    Coins awarded for a completed session.

    Sessions shorter than 30 minutes earn two coins per minute. From 30
    minutes on the base is multiplied by 1.1 for every 30 minutes, so
    longer sessions pay disproportionately more.

    Args:
        duration_minutes: Configured session length in minutes

    Returns:
        Non-negative coin reward
    """
    base = COINS_PER_MINUTE * duration_minutes
    if duration_minutes < BONUS_THRESHOLD_MINUTES:
        reward = math.floor(base)
    else:
        reward = math.floor(
            base * BONUS_GROWTH ** (duration_minutes / BONUS_THRESHOLD_MINUTES)
        )
    return max(reward, 0)
