"""Profile service - username onboarding and per-user stats."""

from __future__ import annotations

from collections.abc import Callable

from urfocus_cli.models import FocusPreferences, LeaderboardEntry, UserProfile
from urfocus_cli.models.exceptions import (
    TransientNetworkError,
    UsernameTakenError,
    ValidationError,
)
from urfocus_cli.repositories import RecordStore
from urfocus_cli.utils.logger import get_logger

logger = get_logger()

USERS_COLLECTION = "users"
LEADERBOARD_COLLECTION = "leaderboard"


class ProfileService:
    """Keeps the local profile and mirrors it to the shared store.

    Local totals live in the persisted focus preferences; the store holds the
    claimed display name (``users/<id>``) and the public leaderboard row
    (``leaderboard/<id>``).
    """

    def __init__(
        self,
        store: RecordStore,
        preferences: FocusPreferences,
        save_preferences: Callable[[], None],
    ):
        self.store = store
        self.preferences = preferences
        self.save_preferences = save_preferences

    @property
    def user_id(self) -> str:
        return self.preferences.local_user_id

    @property
    def needs_onboarding(self) -> bool:
        """True until a username has been claimed."""
        return not self.preferences.username

    def local_profile(self) -> UserProfile:
        prefs = self.preferences
        return UserProfile(
            username=prefs.username,
            minutes_focused=prefs.minutes_focused,
            sessions_completed=prefs.sessions_completed,
            streak_days=prefs.streak_days,
            local_user_id=prefs.local_user_id,
        )

    async def claim_username(self, desired: str) -> str:
        """Claim a unique display name for this user.

        Raises:
            ValidationError: If the name is empty after trimming
            UsernameTakenError: If another user already has the name
            TransientNetworkError: If the store cannot be reached
        """
        name = desired.strip()
        if not name:
            raise ValidationError("Username cannot be empty")

        holders = await self.store.find_records(
            USERS_COLLECTION, "displayName", name, limit=2
        )
        if any(record.id != self.user_id for record in holders):
            raise UsernameTakenError("That username is taken")

        await self.store.create_or_update_record(
            USERS_COLLECTION, self.user_id, {"displayName": name}, merge=True
        )
        self.preferences.username = name
        self.save_preferences()
        logger.info("username claimed: %s", name)
        return name

    def record_completion(self, focus_minutes: int, streaked: bool) -> UserProfile:
        """Add a completed session to the local totals.

        The streak counter itself is maintained by the session state
        machine; ``streaked`` is only logged here.
        """
        self.preferences.minutes_focused += max(0, int(focus_minutes))
        self.preferences.sessions_completed += 1
        self.save_preferences()
        logger.debug(
            "profile updated: +%s min (streaked=%s)", focus_minutes, streaked
        )
        return self.local_profile()

    def leaderboard_entry(self) -> LeaderboardEntry:
        prefs = self.preferences
        return LeaderboardEntry(
            id=prefs.local_user_id,
            display_name=prefs.username or "(anon)",
            minutes_focused=prefs.minutes_focused,
            streak_days=prefs.streak_days,
            sessions_completed=prefs.sessions_completed,
        )

    async def push_stats(self) -> bool:
        """Upsert this user's leaderboard row. Failures are logged and dropped."""
        fields = self.leaderboard_entry().to_fields()
        if not self.preferences.username:
            fields.pop("displayName")
        try:
            await self.store.create_or_update_record(
                LEADERBOARD_COLLECTION, self.user_id, fields, merge=True
            )
        except (TransientNetworkError, ValueError) as e:
            logger.warning("leaderboard update dropped: %s", e)
            return False
        except Exception:
            logger.exception("leaderboard update failed")
            return False
        return True

    async def fetch_remote_stats(self) -> LeaderboardEntry | None:
        """Read this user's leaderboard row; store errors propagate."""
        record = await self.store.get_record(LEADERBOARD_COLLECTION, self.user_id)
        return LeaderboardEntry.from_record(record) if record else None
