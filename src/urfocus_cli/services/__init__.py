"""Services module for UR Focus CLI - Business logic layer."""

from .leaderboard_service import LeaderboardService
from .notification_service import Notifier, TerminalNotifier
from .profile_service import ProfileService
from .session_service import SessionStateMachine
from .shared_goal_service import SharedGoalAggregator
from .shop_service import ShopService
from .todo_service import TodoService

__all__ = [
    "SharedGoalAggregator",
    "SessionStateMachine",
    "ProfileService",
    "LeaderboardService",
    "ShopService",
    "TodoService",
    "Notifier",
    "TerminalNotifier",
]
