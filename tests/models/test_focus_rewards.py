"""Unit tests for the coin reward calculator and the streak rule."""

from datetime import date

import pytest

from urfocus_cli.models.focus import compute_reward, should_bump_streak


class TestComputeReward:
    @pytest.mark.parametrize(
        "minutes, expected",
        [(1, 2), (25, 50), (29, 58), (30, 66), (60, 145), (120, 351)],
    )
    def test_known_values(self, minutes, expected):
        assert compute_reward(minutes) == expected

    def test_monotonic_over_allowed_lengths(self):
        rewards = [compute_reward(m) for m in range(1, 121)]
        assert rewards == sorted(rewards)

    def test_bonus_kicks_in_at_thirty_minutes(self):
        assert compute_reward(30) > 2 * 30

    def test_fractional_minutes_are_floored(self):
        assert compute_reward(12.7) == 25

    def test_never_negative(self):
        assert compute_reward(0) == 0
        assert compute_reward(-5) == 0


class TestShouldBumpStreak:
    def test_first_completion_ever(self):
        assert should_bump_streak(None, date(2024, 3, 4)) is True

    def test_same_day_does_not_bump(self):
        assert should_bump_streak(date(2024, 3, 4), date(2024, 3, 4)) is False

    def test_next_day_bumps(self):
        assert should_bump_streak(date(2024, 3, 4), date(2024, 3, 5)) is True

    def test_earlier_day_does_not_bump(self):
        # Clock moved backwards (timezone change); never double count
        assert should_bump_streak(date(2024, 3, 5), date(2024, 3, 4)) is False
