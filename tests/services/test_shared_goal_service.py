"""Tests for the shared goal aggregator."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from urfocus_cli.adapters.sqlite import SqliteRecordStore
from urfocus_cli.models import Record
from urfocus_cli.models.exceptions import TransientNetworkError
from urfocus_cli.services.shared_goal_service import (
    SharedGoalAggregator,
    clamp_contribution,
)


@pytest.fixture()
def store(tmp_path):
    s = SqliteRecordStore(str(tmp_path / "goal.db"))
    yield s
    if s._connection is not None:
        s._connection.close()


@pytest.fixture()
def aggregator(store):
    return SharedGoalAggregator(store, poll_interval=30)


# ---------------------------------------------------------------------------
# Clamping
# ---------------------------------------------------------------------------


class TestClamp:
    @pytest.mark.parametrize(
        "seconds, expected",
        [(30, 60), (60, 60), (1500, 1500), (21_600, 21_600), (100_000, 21_600), (-5, 60)],
    )
    def test_clamp(self, seconds, expected):
        assert clamp_contribution(seconds) == expected


# ---------------------------------------------------------------------------
# fetch
# ---------------------------------------------------------------------------


class TestFetch:
    @pytest.mark.asyncio
    async def test_missing_record_is_created_with_defaults(self, aggregator, store):
        goal = await aggregator.fetch()
        assert goal.sessions_completed == 0
        assert goal.seconds_focused == 0
        assert goal.goal_target == 600_000
        stored = await store.get_record("shared", "goal")
        assert stored.int_value("goalTarget") == 600_000

    @pytest.mark.asyncio
    async def test_creation_keeps_concurrent_completion(self, aggregator, store):
        other = SharedGoalAggregator(store, poll_interval=30)
        read = store.get_record

        async def read_then_other_client_completes(collection, record_id):
            record = await read(collection, record_id)
            await other.record_completion(1500)
            return record

        store.get_record = read_then_other_client_completes
        goal = await aggregator.fetch()
        del store.get_record

        assert goal.sessions_completed == 1
        assert goal.seconds_focused == 1500
        assert goal.goal_target == 600_000
        stored = await store.get_record("shared", "goal")
        assert stored.fields == {
            "sessionsCompleted": 1,
            "secondsFocused": 1500,
            "goalTarget": 600_000,
        }

    @pytest.mark.asyncio
    async def test_zero_target_reads_as_default(self, aggregator, store):
        await store.create_or_update_record("shared", "goal", {"goalTarget": 0, "sessionsCompleted": 2})
        goal = await aggregator.fetch()
        assert goal.goal_target == 600_000
        assert goal.sessions_completed == 2

    @pytest.mark.asyncio
    async def test_store_error_propagates(self):
        broken = MagicMock()
        broken.get_record = AsyncMock(side_effect=TransientNetworkError("offline"))
        with pytest.raises(TransientNetworkError):
            await SharedGoalAggregator(broken).fetch()

    @pytest.mark.asyncio
    async def test_fetch_updates_current_value(self, aggregator):
        assert aggregator.current_value() is None
        goal = await aggregator.fetch()
        assert aggregator.current_value() == goal


# ---------------------------------------------------------------------------
# record_completion
# ---------------------------------------------------------------------------


class TestRecordCompletion:
    @pytest.mark.asyncio
    async def test_short_session_counts_as_one_minute(self, aggregator, store):
        assert await aggregator.record_completion(30) is True
        record = await store.get_record("shared", "goal")
        assert record.int_value("secondsFocused") == 60
        assert record.int_value("sessionsCompleted") == 1

    @pytest.mark.asyncio
    async def test_long_session_is_capped(self, aggregator, store):
        await aggregator.record_completion(100_000)
        record = await store.get_record("shared", "goal")
        assert record.int_value("secondsFocused") == 21_600

    @pytest.mark.asyncio
    async def test_increment_keeps_existing_target(self, aggregator, store):
        await aggregator.fetch()
        await aggregator.record_completion(1500)
        goal = await aggregator.fetch()
        assert goal.goal_target == 600_000
        assert goal.seconds_focused == 1500

    @pytest.mark.asyncio
    async def test_uses_atomic_increment(self):
        mock_store = MagicMock()
        mock_store.atomic_increment = AsyncMock(
            return_value=Record(collection="shared", id="goal", fields={"sessionsCompleted": 1})
        )
        await SharedGoalAggregator(mock_store).record_completion(1500)
        mock_store.atomic_increment.assert_awaited_once_with(
            "shared", "goal", {"sessionsCompleted": 1, "secondsFocused": 1500}
        )

    @pytest.mark.asyncio
    async def test_failure_is_swallowed(self):
        mock_store = MagicMock()
        mock_store.atomic_increment = AsyncMock(side_effect=TransientNetworkError("offline"))
        assert await SharedGoalAggregator(mock_store).record_completion(1500) is False

    @pytest.mark.asyncio
    async def test_unexpected_failure_is_swallowed(self):
        mock_store = MagicMock()
        mock_store.atomic_increment = AsyncMock(side_effect=RuntimeError("boom"))
        assert await SharedGoalAggregator(mock_store).record_completion(1500) is False

    @pytest.mark.asyncio
    async def test_concurrent_completions_all_count(self, aggregator, store):
        await asyncio.gather(*(aggregator.record_completion(60) for _ in range(10)))
        goal = await aggregator.fetch()
        assert goal.sessions_completed == 10
        assert goal.seconds_focused == 600


# ---------------------------------------------------------------------------
# Observers and subscriptions
# ---------------------------------------------------------------------------


class TestObservers:
    @pytest.mark.asyncio
    async def test_on_change_and_remove(self, aggregator):
        seen = []
        remove = aggregator.on_change(seen.append)
        await aggregator.record_completion(60)
        remove()
        remove()
        await aggregator.record_completion(60)
        assert [g.sessions_completed for g in seen] == [1]

    @pytest.mark.asyncio
    async def test_observer_errors_do_not_break_increment(self, aggregator):
        aggregator.on_change(MagicMock(side_effect=RuntimeError("bad observer")))
        assert await aggregator.record_completion(60) is True

    def test_poll_interval_is_capped(self, store):
        assert SharedGoalAggregator(store, poll_interval=120).poll_interval == 30


class TestSubscribe:
    @pytest.mark.asyncio
    async def test_subscription_delivers_updates(self, aggregator):
        updates = []
        changed = asyncio.Event()

        def on_update(goal):
            updates.append(goal.sessions_completed)
            changed.set()

        await aggregator.fetch()
        aggregator.subscribe(on_update)
        await asyncio.wait_for(changed.wait(), timeout=2)
        changed.clear()

        await aggregator.record_completion(60)
        await asyncio.wait_for(changed.wait(), timeout=2)
        aggregator.unsubscribe()

        assert updates == [0, 1]

    @pytest.mark.asyncio
    async def test_double_subscribe_cancels_previous(self, aggregator):
        first = aggregator.subscribe()
        second = aggregator.subscribe()
        assert first.active is False
        assert second.active is True
        aggregator.unsubscribe()
        assert second.active is False

    def test_unsubscribe_is_idempotent(self, aggregator):
        aggregator.unsubscribe()
        aggregator.unsubscribe()
