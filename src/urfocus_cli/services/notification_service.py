"""Completion notifications for focus sessions."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime

from rich.panel import Panel

from urfocus_cli.utils.logger import get_logger
from urfocus_cli.utils.ui.console import get_console

logger = get_logger()


class Notifier(ABC):
    """Schedules one-shot local notifications."""

    @abstractmethod
    def schedule_one_shot(
        self, notification_id: str, fire_at: datetime, title: str, body: str
    ) -> None:
        """Schedule a notification, replacing any pending one with the same id."""

    @abstractmethod
    def cancel(self, notification_id: str) -> None:
        """Cancel a pending notification. Unknown ids are ignored."""


class TerminalNotifier(Notifier):
    """Rings the terminal bell and prints a panel when a notification fires.

    Notifications are timers on the running asyncio loop, so they only fire
    while the process is alive.
    """

    def __init__(self, console=None):
        self.console = console or get_console()
        self._pending: dict[str, asyncio.TimerHandle] = {}

    @property
    def pending_ids(self) -> list[str]:
        return list(self._pending)

    def schedule_one_shot(
        self, notification_id: str, fire_at: datetime, title: str, body: str
    ) -> None:
        self.cancel(notification_id)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("no event loop, notification %s not scheduled", notification_id)
            return

        delay = max(0.0, (fire_at - datetime.now(fire_at.tzinfo)).total_seconds())
        self._pending[notification_id] = loop.call_later(
            delay, self._fire, notification_id, title, body
        )
        logger.debug("notification %s scheduled in %.1fs", notification_id, delay)

    def cancel(self, notification_id: str) -> None:
        handle = self._pending.pop(notification_id, None)
        if handle is not None:
            handle.cancel()
            logger.debug("notification %s cancelled", notification_id)

    def _fire(self, notification_id: str, title: str, body: str) -> None:
        self._pending.pop(notification_id, None)
        self.console.bell()
        self.console.print(Panel(body, title=title, border_style="green"))
