"""Exceptions raised by UR Focus services and adapters."""


class FocusError(Exception):
    """Base exception for UR Focus errors."""


class NotFoundError(FocusError):
    """Requested item does not exist."""


class TransientNetworkError(FocusError):
    """Storage backend unreachable or failed; the operation was abandoned."""


class ValidationError(FocusError):
    """User input failed validation."""


class UsernameTakenError(ValidationError):
    """Another user already holds the requested display name."""


class InsufficientCoinsError(FocusError):
    """Coin balance is too low for a purchase."""

    def __init__(self, cost: int, balance: int):
        super().__init__(
            f"Not enough coins: item costs {cost}, you have {balance}. "
            "Complete more focus sessions to earn more."
        )
        self.cost = cost
        self.balance = balance
