"""Tests for ProfileService and LeaderboardService."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from urfocus_cli.adapters.sqlite import SqliteRecordStore
from urfocus_cli.models import FocusPreferences
from urfocus_cli.models.exceptions import (
    TransientNetworkError,
    UsernameTakenError,
    ValidationError,
)
from urfocus_cli.services import LeaderboardService, ProfileService


@pytest.fixture()
def store(tmp_path):
    s = SqliteRecordStore(str(tmp_path / "profile.db"))
    yield s
    if s._connection is not None:
        s._connection.close()


@pytest.fixture()
def save():
    return MagicMock()


@pytest.fixture()
def profiles(store, preferences, save) -> ProfileService:
    return ProfileService(store, preferences, save)


# ---------------------------------------------------------------------------
# Username onboarding
# ---------------------------------------------------------------------------


class TestClaimUsername:
    def test_new_user_needs_onboarding(self, profiles):
        assert profiles.needs_onboarding is True

    @pytest.mark.asyncio
    async def test_claim_trims_and_persists(self, profiles, store, preferences, save):
        name = await profiles.claim_username("  ana  ")
        assert name == "ana"
        assert preferences.username == "ana"
        assert profiles.needs_onboarding is False
        save.assert_called_once()
        record = await store.get_record("users", preferences.local_user_id)
        assert record.fields["displayName"] == "ana"

    @pytest.mark.asyncio
    async def test_empty_username_rejected(self, profiles, save):
        with pytest.raises(ValidationError, match="Username cannot be empty"):
            await profiles.claim_username("   ")
        save.assert_not_called()

    @pytest.mark.asyncio
    async def test_taken_username_rejected(self, profiles, store, preferences):
        await store.create_or_update_record("users", "someone-else", {"displayName": "ana"})
        with pytest.raises(UsernameTakenError, match="That username is taken"):
            await profiles.claim_username("ana")
        assert preferences.username == ""

    @pytest.mark.asyncio
    async def test_reclaiming_own_name_is_allowed(self, profiles):
        await profiles.claim_username("ana")
        assert await profiles.claim_username("ana") == "ana"

    @pytest.mark.asyncio
    async def test_claim_keeps_other_user_fields(self, profiles, store, preferences):
        await store.create_or_update_record("users", preferences.local_user_id, {"school": "UR"})
        await profiles.claim_username("ana")
        record = await store.get_record("users", preferences.local_user_id)
        assert record.fields == {"school": "UR", "displayName": "ana"}

    @pytest.mark.asyncio
    async def test_store_error_surfaces(self, preferences, save):
        broken = MagicMock()
        broken.find_records = AsyncMock(side_effect=TransientNetworkError("offline"))
        with pytest.raises(TransientNetworkError):
            await ProfileService(broken, preferences, save).claim_username("ana")


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


class TestStats:
    def test_record_completion_updates_totals(self, profiles, preferences, save):
        profile = profiles.record_completion(25, streaked=True)
        assert profile.minutes_focused == 25
        assert profile.sessions_completed == 1
        assert preferences.minutes_focused == 25
        save.assert_called_once()

    def test_streak_is_reported_from_preferences(self, profiles, preferences):
        preferences.streak_days = 4
        assert profiles.record_completion(25, streaked=False).streak_days == 4

    @pytest.mark.asyncio
    async def test_push_stats_upserts_leaderboard(self, profiles, store, preferences):
        preferences.username = "ana"
        profiles.record_completion(25, streaked=True)
        assert await profiles.push_stats() is True
        entry = await profiles.fetch_remote_stats()
        assert entry.display_name == "ana"
        assert entry.minutes_focused == 25
        assert entry.sessions_completed == 1

    @pytest.mark.asyncio
    async def test_push_without_username_shows_anon(self, profiles):
        await profiles.push_stats()
        entry = await profiles.fetch_remote_stats()
        assert entry.display_name == "(anon)"

    @pytest.mark.asyncio
    async def test_push_failure_is_swallowed(self, preferences, save):
        broken = MagicMock()
        broken.create_or_update_record = AsyncMock(side_effect=TransientNetworkError("offline"))
        assert await ProfileService(broken, preferences, save).push_stats() is False

    @pytest.mark.asyncio
    async def test_fetch_remote_stats_missing(self, profiles):
        assert await profiles.fetch_remote_stats() is None

    @pytest.mark.asyncio
    async def test_fetch_remote_stats_error_surfaces(self, preferences, save):
        broken = MagicMock()
        broken.get_record = AsyncMock(side_effect=TransientNetworkError("offline"))
        with pytest.raises(TransientNetworkError):
            await ProfileService(broken, preferences, save).fetch_remote_stats()


# ---------------------------------------------------------------------------
# Leaderboard
# ---------------------------------------------------------------------------


async def _seed(store):
    rows = {
        "u1": {"displayName": "ana", "minutesFocused": 300, "streakDays": 2, "sessionsCompleted": 12},
        "u2": {"displayName": "ben", "minutesFocused": 50, "streakDays": 9, "sessionsCompleted": 2},
        "u3": {"minutesFocused": 120, "streakDays": 5, "sessionsCompleted": 30},
    }
    for user_id, fields in rows.items():
        await store.create_or_update_record("leaderboard", user_id, fields)


class TestLeaderboard:
    @pytest.mark.asyncio
    async def test_top_by_minutes(self, store):
        await _seed(store)
        entries = await LeaderboardService(store).top("minutes")
        assert [e.display_name for e in entries] == ["ana", "(anon)", "ben"]

    @pytest.mark.asyncio
    async def test_top_by_streak_with_limit(self, store):
        await _seed(store)
        entries = await LeaderboardService(store).top("streak", limit=2)
        assert [e.streak_days for e in entries] == [9, 5]

    @pytest.mark.asyncio
    async def test_top_by_sessions(self, store):
        await _seed(store)
        entries = await LeaderboardService(store).top("sessions", limit=1)
        assert entries[0].id == "u3"

    @pytest.mark.asyncio
    async def test_unknown_sort_rejected(self, store):
        with pytest.raises(ValidationError):
            await LeaderboardService(store).top("coins")

    @pytest.mark.asyncio
    async def test_non_positive_limit_rejected(self, store):
        with pytest.raises(ValidationError):
            await LeaderboardService(store).top("minutes", limit=0)

    @pytest.mark.asyncio
    async def test_store_error_surfaces(self):
        broken = MagicMock()
        broken.query_top = AsyncMock(side_effect=TransientNetworkError("offline"))
        with pytest.raises(TransientNetworkError):
            await LeaderboardService(broken).top()
