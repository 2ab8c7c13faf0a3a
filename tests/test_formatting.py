"""Tests for duration formatting."""

from devdesk_insights.sla.domain import format_average, format_duration, format_time_remaining
from devdesk_insights.sla.domain.formatting import MS_PER_DAY, MS_PER_HOUR, MS_PER_MINUTE


class TestFormatDuration:
    def test_exactly_one_day(self):
        assert format_duration(24 * MS_PER_HOUR) == "1d"

    def test_just_under_a_day(self):
        assert format_duration(23 * MS_PER_HOUR + 59 * MS_PER_MINUTE) == "23h 59m"

    def test_days_and_hours(self):
        assert format_duration(2 * MS_PER_DAY + 5 * MS_PER_HOUR + 10 * MS_PER_MINUTE) == "2d 5h"

    def test_minutes_only(self):
        assert format_duration(45 * MS_PER_MINUTE) == "45m"

    def test_zero(self):
        assert format_duration(0) == "0m"

    def test_negative_uses_magnitude(self):
        assert format_duration(-10 * MS_PER_MINUTE) == "10m"


class TestFormatTimeRemaining:
    def test_remaining(self):
        assert format_time_remaining(3 * MS_PER_HOUR + 20 * MS_PER_MINUTE) == "3h 20m remaining"

    def test_overdue(self):
        assert format_time_remaining(-600000) == "10m overdue"

    def test_overdue_by_days(self):
        assert format_time_remaining(-(MS_PER_DAY + 3 * MS_PER_HOUR)) == "1d 3h overdue"


class TestFormatAverage:
    def test_below_an_hour(self):
        assert format_average(59 * MS_PER_MINUTE) == "< 1h"

    def test_hours_round_half_up(self):
        assert format_average(4.5 * MS_PER_HOUR) == "5h"

    def test_days(self):
        assert format_average(3 * MS_PER_DAY) == "3d"

    def test_weeks(self):
        assert format_average(14 * MS_PER_DAY) == "2w"
