"""
Tests for the business-hours calendar.
"""

from datetime import date, datetime

import pendulum
import pytest

from garageslots.domain.calendar import (
    day_bounds,
    ensure_timezone,
    local_minutes,
    parse_clock_time,
    parse_date,
    to_instant,
)
from garageslots.domain.exceptions import ConfigurationError, InvalidDateError, InvalidIntervalError


class TestLocalMinutes:
    """Tests for projecting instants onto local wall-clock minutes."""

    def test_summer_time(self):
        assert local_minutes(pendulum.parse("2024-07-01T12:00:00Z"), "Europe/Berlin") == 14 * 60

    def test_winter_time(self):
        assert local_minutes(pendulum.parse("2024-01-15T12:00:00Z"), "Europe/Berlin") == 13 * 60

    def test_wraps_past_midnight(self):
        assert local_minutes(pendulum.parse("2024-07-01T23:30:00Z"), "Europe/Berlin") == 90

    def test_accepts_naive_datetime_as_utc(self):
        assert local_minutes(datetime(2024, 1, 15, 12, 0), "UTC") == 720

    def test_unknown_timezone(self):
        with pytest.raises(ConfigurationError):
            local_minutes(pendulum.parse("2024-01-15T12:00:00Z"), "Mars/Olympus")


class TestDayBounds:
    """Tests for absolute open/close instants of a local date."""

    def test_utc_day(self):
        bounds = day_bounds("2024-11-25", "UTC", "09:00", "18:00")

        assert bounds.open_instant == pendulum.parse("2024-11-25T09:00:00Z")
        assert bounds.close_instant == pendulum.parse("2024-11-25T18:00:00Z")

    def test_offset_changes_across_dst(self):
        """The same local hours map to different UTC instants around a DST switch."""
        before = day_bounds("2024-03-09", "America/New_York", "09:00", "17:00")
        after = day_bounds("2024-03-10", "America/New_York", "09:00", "17:00")

        assert before.open_instant == pendulum.parse("2024-03-09T14:00:00Z")
        assert after.open_instant == pendulum.parse("2024-03-10T13:00:00Z")
        assert after.close_instant == pendulum.parse("2024-03-10T21:00:00Z")

    def test_accepts_date_object(self):
        bounds = day_bounds(date(2024, 11, 25), "Europe/Berlin", "08:00", "17:00")

        assert bounds.open_instant == pendulum.parse("2024-11-25T07:00:00Z")

    def test_overnight_hours_rejected(self):
        with pytest.raises(ConfigurationError, match="overnight"):
            day_bounds("2024-11-25", "UTC", "22:00", "02:00")

    def test_missing_timezone(self):
        with pytest.raises(ConfigurationError, match="timezone"):
            day_bounds("2024-11-25", None, "09:00", "18:00")

    @pytest.mark.parametrize("value", ["2024-13-01", "2024-02-30", "25.11.2024", "tomorrow", ""])
    def test_invalid_date(self, value):
        with pytest.raises(InvalidDateError):
            day_bounds(value, "UTC", "09:00", "18:00")


class TestParsing:
    """Tests for the small parsing helpers."""

    @pytest.mark.parametrize("value,expected", [("00:00", 0), ("09:30", 570), ("23:59", 1439)])
    def test_parse_clock_time(self, value, expected):
        assert parse_clock_time(value) == expected

    @pytest.mark.parametrize("value", ["24:00", "9:00", "09:60", "", None])
    def test_parse_clock_time_rejects(self, value):
        with pytest.raises(ConfigurationError):
            parse_clock_time(value)

    def test_parse_date_from_datetime(self):
        assert parse_date(pendulum.datetime(2024, 11, 25, 15, 0)) == date(2024, 11, 25)

    def test_parse_date_rejects_numbers(self):
        with pytest.raises(InvalidDateError):
            parse_date(20241125)

    def test_ensure_timezone_returns_name(self):
        assert ensure_timezone("Europe/Berlin") == "Europe/Berlin"

    def test_to_instant_from_iso_string(self):
        instant = to_instant("2024-11-25T10:00:00+01:00")

        assert instant == pendulum.parse("2024-11-25T09:00:00Z")

    def test_to_instant_rejects_garbage(self):
        with pytest.raises(InvalidIntervalError):
            to_instant("not a time")

    def test_to_instant_rejects_none(self):
        with pytest.raises(InvalidIntervalError):
            to_instant(None)
