"""Focus session state machine.

    idle -> running -> (paused <-> running) -> completed -> idle

The machine is driven by discrete commands (start, pause, reset) and a
periodic ``tick``. Entering ``completed`` pays the coin reward, applies the
daily streak rule and fires the shared goal and profile updates as
background tasks. Those side effects never roll back the local transition.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from datetime import datetime, timedelta
from typing import Any

from urfocus_cli.models import FocusPreferences
from urfocus_cli.models.config_models import MAX_SESSION_MINUTES, MIN_SESSION_MINUTES
from urfocus_cli.models.exceptions import ValidationError
from urfocus_cli.models.focus import Session, compute_reward, should_bump_streak
from urfocus_cli.services.notification_service import Notifier
from urfocus_cli.services.profile_service import ProfileService
from urfocus_cli.services.shared_goal_service import SharedGoalAggregator
from urfocus_cli.utils.logger import get_logger
from urfocus_cli.utils.timeutils import calendar_day, now_local

logger = get_logger()

NOTIFICATION_ID = "URFocusEnd"
NOTIFICATION_TITLE = "UR Focus"
NOTIFICATION_BODY = "🎉 Focus session complete! Great job."

SessionCallback = Callable[[Session], None]


class SessionStateMachine:
    """Drives one user's focus timer."""

    def __init__(
        self,
        preferences: FocusPreferences,
        save_preferences: Callable[[], None],
        aggregator: SharedGoalAggregator,
        profile_service: ProfileService,
        notifier: Notifier | None = None,
        clock: Callable[[], datetime] = now_local,
        reward: Callable[[float], int] = compute_reward,
    ):
        self.preferences = preferences
        self.save_preferences = save_preferences
        self.aggregator = aggregator
        self.profile_service = profile_service
        self.notifier = notifier
        self.clock = clock
        self.reward = reward

        self.session = Session(goal_minutes=preferences.session_minutes)
        self.last_reward: int | None = None
        self._observers: list[SessionCallback] = []
        self._tasks: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def status(self) -> str:
        return self.session.status

    def snapshot(self) -> Session:
        return self.session.copy()

    current_value = snapshot

    def on_change(self, callback: SessionCallback) -> Callable[[], None]:
        """Register an observer; returns a function that removes it."""
        self._observers.append(callback)

        def remove() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return remove

    def _publish(self) -> None:
        snapshot = self.snapshot()
        for callback in list(self._observers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("session observer raised")

    def remaining_seconds(self, now: datetime | None = None) -> int:
        return self.session.remaining_seconds(now or self.clock())

    def progress(self, now: datetime | None = None) -> float:
        return self.session.progress(now or self.clock())

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def set_goal_minutes(self, minutes: int) -> None:
        """Change the session length and persist it as the default.

        Raises:
            ValidationError: If minutes is outside 1-120 or a session is running
        """
        if not MIN_SESSION_MINUTES <= minutes <= MAX_SESSION_MINUTES:
            raise ValidationError(
                f"Session length must be between {MIN_SESSION_MINUTES} "
                f"and {MAX_SESSION_MINUTES} minutes"
            )
        if self.session.status in ("running", "paused"):
            raise ValidationError("Reset the current session before changing its length")

        self.preferences.session_minutes = minutes
        self.save_preferences()
        self.session = Session(goal_minutes=minutes)
        self._publish()

    def start(self) -> None:
        """Start from idle/completed, or resume from paused. No-op while running."""
        session = self.session
        if session.status == "running":
            return

        now = self.clock()
        if session.status == "paused":
            remaining = session.paused_remaining or 0
            session.target_at = now + timedelta(seconds=remaining)
            session.paused_remaining = None
        else:
            session = self.session = Session(goal_minutes=self.preferences.session_minutes)
            session.start_at = now
            session.target_at = now + timedelta(seconds=session.total_seconds)
        session.status = "running"

        if self.notifier is not None:
            self.notifier.schedule_one_shot(
                NOTIFICATION_ID, session.target_at, NOTIFICATION_TITLE, NOTIFICATION_BODY
            )
        logger.info("session running until %s", session.target_at.isoformat())
        self._publish()

    def pause(self) -> None:
        """Pause a running session. No-op in any other state."""
        if self.session.status != "running":
            return

        now = self.clock()
        if self.tick(now):
            return

        session = self.session
        session.paused_remaining = session.remaining_seconds(now)
        session.status = "paused"
        session.target_at = None
        self._cancel_notification()
        logger.info("session paused with %ss left", session.paused_remaining)
        self._publish()

    def reset(self) -> None:
        """Return to idle from any state."""
        self.session = Session(goal_minutes=self.preferences.session_minutes)
        self._cancel_notification()
        logger.info("session reset")
        self._publish()

    def tick(self, now: datetime | None = None) -> bool:
        """Complete the session if its target time has been reached.

        Returns True when this call completed the session.
        """
        now = now or self.clock()
        if not self.session.is_due(now):
            return False
        self._complete(now)
        return True

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def _complete(self, now: datetime) -> None:
        session = self.session
        session.status = "completed"
        session.completed_this_run = True
        session.paused_remaining = None
        self._cancel_notification()

        prefs = self.preferences
        minutes = session.goal_minutes
        earned = self.reward(minutes)
        self.last_reward = earned

        today = calendar_day(now, prefs.timezone)
        streaked = should_bump_streak(prefs.last_completed_day, today)
        if streaked:
            prefs.streak_days += 1
            prefs.last_completed_day = today
        prefs.coins += earned

        try:
            self.save_preferences()
        except Exception:
            logger.exception("could not persist preferences after completion")

        logger.info(
            "session completed: %s min, +%s coins, streak=%s",
            minutes,
            earned,
            prefs.streak_days,
        )

        self._spawn(self.aggregator.record_completion(minutes * 60))
        try:
            self.profile_service.record_completion(minutes, streaked)
        except Exception:
            logger.exception("local profile update failed")
        self._spawn(self.profile_service.push_stats())
        self._publish()

    def _cancel_notification(self) -> None:
        if self.notifier is not None:
            self.notifier.cancel(NOTIFICATION_ID)

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("no event loop, dropping background update")
            coro.close()
            return
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning("background update failed: %s", task.exception())

    async def wait_idle(self) -> None:
        """Wait for all in-flight background updates to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
