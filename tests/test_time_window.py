"""
Time Window Tests
=================
Tests for TimeWindow membership, parsing and clock evaluation.
"""

from datetime import datetime, time, timezone

import pytest

from smartolive.domain.exceptions import InvalidWindowError
from smartolive.domain.time_window import TimeWindow


class TestSameDayWindow:
    """Tests for windows with start < end."""

    def test_start_inclusive_end_exclusive(self, morning_window):
        """Test half-open interval semantics."""
        assert morning_window.contains(time(6, 0))
        assert morning_window.contains(time(8, 59))
        assert not morning_window.contains(time(9, 0))

    def test_outside_values(self, morning_window):
        """Test times before and after the window."""
        assert not morning_window.contains(time(5, 59))
        assert not morning_window.contains(time(22, 0))


class TestOvernightWindow:
    """Tests for windows wrapping past midnight."""

    def test_overnight_is_accepted(self):
        """Test that start > end builds an overnight window."""
        window = TimeWindow(time(22, 0), time(4, 0))
        assert window.is_overnight

    @pytest.mark.parametrize("moment", [time(22, 0), time(23, 30), time(0, 0), time(3, 0), time(4, 0)])
    def test_contains_across_midnight(self, moment):
        """Test membership on both sides of midnight."""
        assert TimeWindow(time(22, 0), time(4, 0)).contains(moment)

    @pytest.mark.parametrize("moment", [time(4, 1), time(12, 0), time(21, 59)])
    def test_excludes_daytime(self, moment):
        """Test that daytime is outside the overnight window."""
        assert not TimeWindow(time(22, 0), time(4, 0)).contains(moment)


class TestAllDayWindow:
    """Tests for the start == end sentinel."""

    @pytest.mark.parametrize("moment", [time(0, 0), time(12, 0), time(23, 59)])
    def test_always_contains(self, moment):
        """Test that equal bounds allow the whole day."""
        assert TimeWindow(time(7, 0), time(7, 0)).contains(moment)

    def test_factory(self):
        """Test the all_day constructor."""
        assert TimeWindow.all_day().is_all_day


class TestConstructionAndParsing:
    """Tests for validation and parsing."""

    @pytest.mark.parametrize("start,end", [(None, time(9, 0)), ("06:00", time(9, 0)), (time(6, 0), 9)])
    def test_rejects_non_time_bounds(self, start, end):
        """Test that only time objects are accepted."""
        with pytest.raises(InvalidWindowError):
            TimeWindow(start, end)

    def test_parse(self):
        """Test parsing of HH:MM-HH:MM."""
        window = TimeWindow.parse("06:00-09:30")
        assert window.start == time(6, 0)
        assert window.end == time(9, 30)
        assert str(window) == "06:00-09:30"

    @pytest.mark.parametrize("text", ["", "06:00", "6am-9am", "25:00-26:00"])
    def test_parse_rejects_garbage(self, text):
        """Test that malformed text raises InvalidWindowError."""
        with pytest.raises(InvalidWindowError):
            TimeWindow.parse(text)


class TestClockEvaluation:
    """Tests for contains_now with an injected clock."""

    def test_contains_now_uses_clock(self, morning_window):
        """Test evaluation against the injected time source."""
        inside = datetime(2024, 6, 15, 7, 30, tzinfo=timezone.utc)
        outside = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)
        assert morning_window.contains_now(lambda: inside)
        assert not morning_window.contains_now(lambda: outside)

    def test_is_within(self, morning_window):
        """Test full containment of one same-day window in another."""
        assert TimeWindow(time(6, 30), time(8, 0)).is_within(morning_window)
        assert not TimeWindow(time(5, 0), time(8, 0)).is_within(morning_window)
        assert not TimeWindow.all_day().is_within(morning_window)
        assert not TimeWindow(time(22, 0), time(4, 0)).is_within(morning_window)
