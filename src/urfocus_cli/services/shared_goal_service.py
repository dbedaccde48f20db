"""Shared goal aggregator.

Every user contributes to one crowd-wide counter stored as the singleton
record ``shared/goal``. Contributions are increments, never overwrites, so
clients do not clobber each other's deltas. On stores without a native
increment the write falls back to read-increment-write and concurrent
completions may lose a delta; that is accepted.
"""

from __future__ import annotations

from collections.abc import Callable

from urfocus_cli.models import DEFAULT_GOAL_TARGET, Record, SharedGoal
from urfocus_cli.models.config_models import MAX_POLL_INTERVAL
from urfocus_cli.models.exceptions import TransientNetworkError
from urfocus_cli.repositories import RecordStore, Subscription
from urfocus_cli.utils.logger import get_logger

logger = get_logger()

MIN_CONTRIBUTION_SECONDS = 60
MAX_CONTRIBUTION_SECONDS = 21_600

GoalCallback = Callable[[SharedGoal], None]


def clamp_contribution(seconds: int) -> int:
    """Clamp a session's contribution into [60, 21600] seconds."""
    return max(MIN_CONTRIBUTION_SECONDS, min(MAX_CONTRIBUTION_SECONDS, int(seconds)))


class SharedGoalAggregator:
    """Reads, increments and watches the shared goal record."""

    def __init__(
        self,
        store: RecordStore,
        collection: str = "shared",
        record_id: str = "goal",
        poll_interval: float = 15.0,
    ):
        self.store = store
        self.collection = collection
        self.record_id = record_id
        self.poll_interval = min(poll_interval, MAX_POLL_INTERVAL)
        self._subscription: Subscription | None = None
        self._observers: list[GoalCallback] = []
        self._current: SharedGoal | None = None

    def current_value(self) -> SharedGoal | None:
        """Latest goal seen by fetch, increment or subscription."""
        return self._current

    def on_change(self, callback: GoalCallback) -> Callable[[], None]:
        """Register an observer; returns a function that removes it."""
        self._observers.append(callback)

        def remove() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return remove

    def _publish(self, goal: SharedGoal) -> None:
        self._current = goal
        for callback in list(self._observers):
            try:
                callback(goal)
            except Exception:
                logger.exception("shared goal observer raised")

    async def fetch(self) -> SharedGoal:
        """Read the shared goal, creating it with defaults if it does not exist.

        Raises:
            TransientNetworkError: If the store cannot be reached
        """
        record = await self.store.get_record(self.collection, self.record_id)
        if record is None:
            logger.info("shared goal missing, creating %s/%s", self.collection, self.record_id)
            record = await self.store.create_if_absent(
                self.collection,
                self.record_id,
                SharedGoal(goal_target=DEFAULT_GOAL_TARGET).to_fields(),
            )
        goal = SharedGoal.from_record(record)
        self._publish(goal)
        return goal

    async def record_completion(self, seconds: int) -> bool:
        """Add one completed session of ``seconds`` to the shared goal.

        Never raises; returns False when the write was dropped.
        """
        clamped = clamp_contribution(seconds)
        try:
            record = await self.store.atomic_increment(
                self.collection,
                self.record_id,
                {"sessionsCompleted": 1, "secondsFocused": clamped},
            )
        except (TransientNetworkError, ValueError) as e:
            logger.warning("shared goal increment of %ss dropped: %s", clamped, e)
            return False
        except Exception:
            logger.exception("shared goal increment of %ss failed", clamped)
            return False

        if record is not None:
            self._publish(SharedGoal.from_record(record))
        logger.debug("shared goal incremented by %ss", clamped)
        return True

    def subscribe(self, on_update: GoalCallback | None = None) -> Subscription:
        """Watch the shared goal; a previous subscription is cancelled first.

        Must be called with a running event loop.
        """
        self.unsubscribe()

        def deliver(record: Record) -> None:
            goal = SharedGoal.from_record(record)
            self._publish(goal)
            if on_update is not None:
                on_update(goal)

        self._subscription = self.store.subscribe(
            self.collection, self.record_id, deliver, interval=self.poll_interval
        )
        return self._subscription

    def unsubscribe(self) -> None:
        """Stop watching. Safe to call when not subscribed."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
