"""Configuration models for UR Focus CLI.

The application config holds the storage contexts (local SQLite vault or
remote records API) plus the persisted local focus preferences.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from urfocus_cli.utils.timeutils import get_system_timezone

MIN_SESSION_MINUTES = 1
MAX_SESSION_MINUTES = 120
MAX_POLL_INTERVAL = 30.0

DEFAULT_SHOP_COSTS = {
    "midnight-theme": 300,
    "study-gremlins": 500,
    "library-goblin": 400,
    "gradient-background": 800,
}


class APIConfig(BaseModel):
    """API configuration."""

    timeout: int = Field(default=30)
    retry: int = Field(default=3)


class SyncConfig(BaseModel):
    """Realtime sync configuration."""

    poll_interval: float = Field(
        default=15.0, description="Seconds between shared goal refreshes"
    )

    @field_validator("poll_interval")
    @classmethod
    def validate_poll_interval(cls, v: float) -> float:
        """Polling must be positive and at most 30 seconds."""
        if v <= 0 or v > MAX_POLL_INTERVAL:
            raise ValueError(f"poll_interval must be in (0, {MAX_POLL_INTERVAL:g}]")
        return v


class FocusPreferences(BaseModel):
    """Local per-device settings that survive restarts."""

    session_minutes: int = Field(default=25)
    coins: int = Field(default=0, ge=0)
    streak_days: int = Field(default=0, ge=0)
    last_completed_day: date | None = None
    background: str = Field(default="system")
    owned_items: list[str] = Field(default_factory=list)
    username: str = Field(default="")
    local_user_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    minutes_focused: int = Field(default=0, ge=0)
    sessions_completed: int = Field(default=0, ge=0)
    timezone: str = Field(default_factory=get_system_timezone)

    @field_validator("session_minutes")
    @classmethod
    def validate_session_minutes(cls, v: int) -> int:
        """Session length is limited to 1-120 minutes."""
        if not MIN_SESSION_MINUTES <= v <= MAX_SESSION_MINUTES:
            raise ValueError(
                f"session_minutes must be between {MIN_SESSION_MINUTES} "
                f"and {MAX_SESSION_MINUTES}"
            )
        return v


class ShopConfig(BaseModel):
    """Product configuration for the cosmetic shop."""

    item_costs: dict[str, int] = Field(
        default_factory=lambda: dict(DEFAULT_SHOP_COSTS)
    )


class Context(BaseModel):
    """Context configuration for a storage backend.

    Represents either a local SQLite vault or remote records API endpoint.
    """

    name: str = Field(..., description="Unique context name")
    type: Literal["local", "remote"] = Field(..., description="Context type")
    source: str = Field(..., description="Database path or API URL")
    description: str = Field(default="", description="Human-readable description")

    @field_validator("source")
    @classmethod
    def validate_source(cls, v: str) -> str:
        """Source must not be empty."""
        if not v or not v.strip():
            raise ValueError("source cannot be empty")
        return v.strip()


class AppConfig(BaseModel):
    """Main UR Focus configuration."""

    current_context_name: str = Field(
        default="local", description="Active context name"
    )
    contexts: list[Context] = Field(
        default_factory=list, description="Available contexts"
    )

    api: APIConfig = Field(default_factory=APIConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    focus: FocusPreferences = Field(default_factory=FocusPreferences)
    shop: ShopConfig = Field(default_factory=ShopConfig)

    def get_context(self, name: str) -> Context:
        """Get context by name."""
        for ctx in self.contexts:
            if ctx.name == name:
                return ctx
        raise ValueError(f"Context '{name}' not found")

    def get_current_context(self) -> Context:
        """Get the currently active context."""
        return self.get_context(self.current_context_name)
