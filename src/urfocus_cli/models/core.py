"""Core data models for UR Focus."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

DEFAULT_GOAL_TARGET = 600_000

ProgressMetric = Literal["sessions", "seconds"]
ShopItemKind = Literal["background", "sticker", "title"]


def _int_field(fields: dict[str, Any], key: str) -> int:
    """Read an integer field from a stored record, treating junk as zero."""
    value = fields.get(key)
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(float(value))
        except ValueError:
            return 0
    return 0


class Record(BaseModel):
    """A stored record as returned by any RecordStore backend.

    Attributes:
        collection: Collection (record type) the record belongs to
        id: Record identifier, unique within the collection
        fields: Arbitrary JSON-compatible field values
        updated_at: Last write timestamp assigned by the store
    """

    collection: str
    id: str
    fields: dict[str, Any] = Field(default_factory=dict)
    updated_at: datetime | None = None

    def int_value(self, key: str) -> int:
        """Read an integer field, returning 0 when missing or malformed."""
        return _int_field(self.fields, key)


class SharedGoal(BaseModel):
    """The crowd-wide focus counter every client contributes to.

    Attributes:
        sessions_completed: Focus sessions completed by all users
        seconds_focused: Focus seconds accumulated by all users
        goal_target: Target used for the progress display (never zero)
        updated_at: Time of the last increment
    """

    sessions_completed: int = Field(default=0, ge=0)
    seconds_focused: int = Field(default=0, ge=0)
    goal_target: int = Field(default=DEFAULT_GOAL_TARGET, gt=0)
    updated_at: datetime | None = None

    @classmethod
    def from_record(cls, record: Record) -> "SharedGoal":
        """Build from a stored record, normalizing a zero target to the default."""
        target = record.int_value("goalTarget")
        return cls(
            sessions_completed=max(0, record.int_value("sessionsCompleted")),
            seconds_focused=max(0, record.int_value("secondsFocused")),
            goal_target=target if target > 0 else DEFAULT_GOAL_TARGET,
            updated_at=record.updated_at,
        )

    def to_fields(self) -> dict[str, Any]:
        """Stored field representation."""
        return {
            "sessionsCompleted": self.sessions_completed,
            "secondsFocused": self.seconds_focused,
            "goalTarget": self.goal_target,
        }

    def progress(self, metric: ProgressMetric = "seconds") -> float:
        """Completion ratio toward the target, clamped to [0, 1]."""
        current = (
            self.sessions_completed if metric == "sessions" else self.seconds_focused
        )
        return min(1.0, current / self.goal_target)


class LeaderboardEntry(BaseModel):
    """One user's public leaderboard row."""

    id: str
    display_name: str = "(anon)"
    minutes_focused: int = 0
    streak_days: int = 0
    sessions_completed: int = 0

    @classmethod
    def from_record(cls, record: Record) -> "LeaderboardEntry":
        """Build from a stored leaderboard record."""
        return cls(
            id=record.id,
            display_name=record.fields.get("displayName") or "(anon)",
            minutes_focused=record.int_value("minutesFocused"),
            streak_days=record.int_value("streakDays"),
            sessions_completed=record.int_value("sessionsCompleted"),
        )

    def to_fields(self) -> dict[str, Any]:
        """Stored field representation."""
        return {
            "displayName": self.display_name,
            "minutesFocused": self.minutes_focused,
            "streakDays": self.streak_days,
            "sessionsCompleted": self.sessions_completed,
        }


class UserProfile(BaseModel):
    """Local view of the current user."""

    username: str
    minutes_focused: int
    sessions_completed: int
    streak_days: int
    local_user_id: str


class ShopItem(BaseModel):
    """A cosmetic item that can be bought with coins.

    Attributes:
        id: Stable item identifier used on the command line
        name: Display name
        description: One-line description
        cost: Price in coins
        kind: Item category; backgrounds can be equipped
        background: Background identifier applied when equipped
    """

    id: str
    name: str
    description: str
    cost: int = Field(ge=0)
    kind: ShopItemKind
    background: str | None = None


class TodoItem(BaseModel):
    """A to-do list entry."""

    id: str
    title: str
    is_completed: bool = False
