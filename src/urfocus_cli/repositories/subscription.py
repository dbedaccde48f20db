"""Cancelable change subscriptions for stored records."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from urfocus_cli.models import Record
from urfocus_cli.utils.logger import get_logger

RecordFetcher = Callable[[], Awaitable[Record | None]]
RecordCallback = Callable[[Record], None]


class Subscription:
    """Watches one record and delivers it whenever it changes.

    The watcher polls the store every ``interval`` seconds. Stores that know
    about a write (same-process writes) call :meth:`poke` to refresh right
    away instead of waiting for the next poll. Delivery happens on the event
    loop that called :meth:`start`.
    """

    def __init__(
        self,
        fetch: RecordFetcher,
        on_change: RecordCallback,
        interval: float,
        on_close: Callable[["Subscription"], None] | None = None,
    ):
        self._fetch = fetch
        self._on_change = on_change
        self.interval = interval
        self._on_close = on_close
        self._task: asyncio.Task | None = None
        self._wakeup: asyncio.Event | None = None
        self._last_seen: tuple | None = None
        self._closed = False

    @property
    def active(self) -> bool:
        """True until unsubscribed."""
        return not self._closed

    def start(self) -> "Subscription":
        """Begin watching on the running event loop."""
        if self._closed:
            raise RuntimeError("Subscription was already cancelled")
        if self._task is None:
            self._wakeup = asyncio.Event()
            self._task = asyncio.get_running_loop().create_task(self._run())
        return self

    def poke(self) -> None:
        """Refresh immediately instead of waiting for the next poll."""
        if self._wakeup is not None and not self._closed:
            self._wakeup.set()

    def unsubscribe(self) -> None:
        """Stop delivery. Calling this more than once is a no-op."""
        if self._closed:
            return
        self._closed = True
        if self._task is not None:
            self._task.cancel()
            self._task = None
        if self._on_close is not None:
            self._on_close(self)

    async def refresh(self) -> None:
        """Fetch once and deliver if the record changed since the last delivery."""
        try:
            record = await self._fetch()
        except Exception as e:
            get_logger().warning("subscription refresh failed: %s", e)
            return
        if record is None or self._closed:
            return
        fingerprint = (record.updated_at, sorted(record.fields.items(), key=str))
        if fingerprint == self._last_seen:
            return
        self._last_seen = fingerprint
        try:
            self._on_change(record)
        except Exception:
            get_logger().exception("subscription callback raised")

    async def _run(self) -> None:
        while not self._closed:
            await self.refresh()
            assert self._wakeup is not None
            try:
                await asyncio.wait_for(self._wakeup.wait(), timeout=self.interval)
            except TimeoutError:
                pass
            self._wakeup.clear()
