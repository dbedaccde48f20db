"""UR Focus domain models.

Pydantic models for the shared goal, leaderboard, profile, shop and to-do
entities, plus the configuration models.
"""

from .config_models import AppConfig, Context, FocusPreferences
from .core import (
    DEFAULT_GOAL_TARGET,
    LeaderboardEntry,
    Record,
    SharedGoal,
    ShopItem,
    TodoItem,
    UserProfile,
)

__all__ = [
    "DEFAULT_GOAL_TARGET",
    "Record",
    "SharedGoal",
    "LeaderboardEntry",
    "UserProfile",
    "ShopItem",
    "TodoItem",
    # Config models
    "AppConfig",
    "Context",
    "FocusPreferences",
]
