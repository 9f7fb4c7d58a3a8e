"""Tests for read-time deadline priority."""

from datetime import date, timedelta

import pytest

from payforeman.calculators.clock import Clock, FixedClock, SystemClock
from payforeman.calculators.priority import auto_priority, derive_priority
from payforeman.calculators.types import Priority

TODAY = date(2026, 3, 16)


class TestAutoPriority:
    """Test the days-remaining tiers."""

    @pytest.mark.parametrize(
        "days, expected",
        [
            (-5, Priority.CRITICAL),
            (0, Priority.CRITICAL),
            (7, Priority.CRITICAL),
            (8, Priority.HIGH),
            (14, Priority.HIGH),
            (15, Priority.NORMAL),
            (30, Priority.NORMAL),
            (31, Priority.LOW),
            (365, Priority.LOW),
        ],
    )
    def test_tiers(self, days, expected):
        assert auto_priority(days) == expected


class TestDerivePriority:
    """Test manual overrides and days remaining."""

    def test_days_remaining(self):
        result = derive_priority(TODAY + timedelta(days=10), None, TODAY)
        assert result.days_remaining == 10
        assert result.effective_priority == Priority.HIGH

    def test_overdue_is_negative_and_critical(self):
        result = derive_priority(TODAY - timedelta(days=3), "normal", TODAY)
        assert result.days_remaining == -3
        assert result.effective_priority == Priority.CRITICAL

    def test_normal_is_treated_as_unset(self):
        """The column default never masks the computed tier."""
        result = derive_priority(TODAY + timedelta(days=60), Priority.NORMAL, TODAY)
        assert result.effective_priority == Priority.LOW

    @pytest.mark.parametrize("manual", ["low", "high", "critical"])
    def test_manual_priority_overrides(self, manual):
        """A non-normal manual priority wins regardless of the date."""
        result = derive_priority(TODAY + timedelta(days=3), manual, TODAY)
        assert result.effective_priority == Priority(manual)
        assert result.days_remaining == 3

    def test_priority_moves_with_the_clock(self):
        """The same deadline becomes more urgent as today advances."""
        deadline = date(2026, 4, 30)
        clock = FixedClock(date(2026, 3, 1))
        assert derive_priority(deadline, None, clock.today()).effective_priority == Priority.LOW

        clock.set(date(2026, 4, 10))
        assert derive_priority(deadline, None, clock.today()).effective_priority == Priority.NORMAL

        clock.set(date(2026, 4, 25))
        assert derive_priority(deadline, None, clock.today()).effective_priority == Priority.CRITICAL


class TestClock:
    def test_clocks_satisfy_protocol(self):
        assert isinstance(SystemClock(), Clock)
        assert isinstance(FixedClock(TODAY), Clock)

    def test_system_clock_reads_today(self):
        assert SystemClock().today() == date.today()
