"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem/API state.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from urfocus_cli.models import FocusPreferences


# ---------------------------------------------------------------------------
# Config isolation helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only.
    Also clears the lru_cache so each test gets a fresh service instance,
    and get_config_service() returns the same temporary service.
    """
    from urfocus_cli.services.config_service import get_config_service

    tmpdir = str(tmp_path)
    get_config_service.cache_clear()
    with patch("urfocus_cli.services.config_service.user_config_dir", return_value=tmpdir):
        with patch("urfocus_cli.services.config_service.user_data_dir", return_value=tmpdir):
            with patch("urfocus_cli.services.todo_service.user_data_dir", return_value=tmpdir):
                svc = get_config_service()
                yield svc
    get_config_service.cache_clear()


@pytest.fixture()
def preferences() -> FocusPreferences:
    """Fresh focus preferences in UTC."""
    return FocusPreferences(timezone="UTC")


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced clock for the session state machine."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 3, 4, 9, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


# ---------------------------------------------------------------------------
# Collaborator mocks
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_aggregator():
    aggregator = MagicMock()
    aggregator.record_completion = AsyncMock(return_value=True)
    return aggregator


@pytest.fixture()
def mock_profile_service():
    profile = MagicMock()
    profile.push_stats = AsyncMock(return_value=True)
    return profile


@pytest.fixture()
def mock_notifier():
    return MagicMock()
