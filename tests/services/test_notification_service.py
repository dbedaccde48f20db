"""Tests for the terminal notifier."""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from urfocus_cli.services import TerminalNotifier


@pytest.fixture()
def console():
    return MagicMock()


class TestTerminalNotifier:
    @pytest.mark.asyncio
    async def test_fires_after_delay(self, console):
        notifier = TerminalNotifier(console=console)
        fire_at = datetime.now(timezone.utc) + timedelta(milliseconds=20)
        notifier.schedule_one_shot("URFocusEnd", fire_at, "UR Focus", "done")
        assert notifier.pending_ids == ["URFocusEnd"]

        await asyncio.sleep(0.1)
        console.bell.assert_called_once()
        console.print.assert_called_once()
        assert notifier.pending_ids == []

    @pytest.mark.asyncio
    async def test_cancel_prevents_firing(self, console):
        notifier = TerminalNotifier(console=console)
        fire_at = datetime.now(timezone.utc) + timedelta(milliseconds=20)
        notifier.schedule_one_shot("URFocusEnd", fire_at, "UR Focus", "done")
        notifier.cancel("URFocusEnd")

        await asyncio.sleep(0.1)
        console.bell.assert_not_called()

    @pytest.mark.asyncio
    async def test_reschedule_replaces_pending(self, console):
        notifier = TerminalNotifier(console=console)
        soon = datetime.now(timezone.utc) + timedelta(milliseconds=20)
        notifier.schedule_one_shot("URFocusEnd", soon + timedelta(hours=1), "UR Focus", "late")
        notifier.schedule_one_shot("URFocusEnd", soon, "UR Focus", "done")

        await asyncio.sleep(0.1)
        console.bell.assert_called_once()

    def test_cancel_unknown_is_noop(self, console):
        TerminalNotifier(console=console).cancel("nothing")

    def test_without_event_loop_nothing_is_scheduled(self, console):
        notifier = TerminalNotifier(console=console)
        notifier.schedule_one_shot("URFocusEnd", datetime.now(timezone.utc), "UR Focus", "done")
        assert notifier.pending_ids == []
