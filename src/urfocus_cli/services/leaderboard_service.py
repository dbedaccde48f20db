"""Leaderboard service."""

from __future__ import annotations

from urfocus_cli.models import LeaderboardEntry
from urfocus_cli.models.exceptions import ValidationError
from urfocus_cli.repositories import RecordStore
from urfocus_cli.services.profile_service import LEADERBOARD_COLLECTION

SORT_FIELDS = {
    "minutes": "minutesFocused",
    "streak": "streakDays",
    "sessions": "sessionsCompleted",
}


class LeaderboardService:
    """Ranks users by focus minutes, streak or sessions."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def top(self, sort_by: str = "minutes", limit: int = 10) -> list[LeaderboardEntry]:
        """Highest entries first.

        Raises:
            ValidationError: If sort_by is unknown or limit is not positive
            TransientNetworkError: If the store cannot be reached
        """
        field = SORT_FIELDS.get(sort_by)
        if field is None:
            raise ValidationError(
                f"Unknown sort '{sort_by}'. Use one of: {', '.join(SORT_FIELDS)}"
            )
        if limit < 1:
            raise ValidationError("limit must be at least 1")

        records = await self.store.query_top(
            LEADERBOARD_COLLECTION, field, descending=True, limit=limit
        )
        return [LeaderboardEntry.from_record(record) for record in records]
