"""
Unit Tests - Business Clock
"""
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from binflow.shifts.clock import BusinessClock, to_utc


class TestBusinessDate:
    """Tests for BusinessClock.business_date"""

    def test_naive_timestamp_is_local_wall_clock(self, clock):
        """Naive values keep their calendar date"""
        assert clock.business_date(datetime(2024, 3, 1, 23, 30)) == date(2024, 3, 1)

    def test_aware_timestamp_is_converted(self, clock):
        """22:00 UTC on the 9th is the morning of the 10th in Auckland"""
        instant = datetime(2024, 3, 9, 22, 0, tzinfo=timezone.utc)

        assert clock.business_date(instant) == date(2024, 3, 10)

    def test_plain_date_passes_through(self, clock):
        assert clock.business_date(date(2024, 3, 1)) == date(2024, 3, 1)

    def test_same_instant_in_any_offset_gives_same_date(self, clock):
        """Write-time and read-time normalization agree for every offset"""
        instant = datetime(2024, 6, 30, 13, 15, tzinfo=timezone.utc)
        expected = clock.business_date(instant)

        for hours in range(-12, 15):
            offset = timezone(timedelta(hours=hours))
            assert clock.business_date(instant.astimezone(offset)) == expected

    def test_dst_transition(self):
        """Dates stay correct across the April daylight saving change"""
        clock = BusinessClock.from_name("Pacific/Auckland")
        # 2024-04-07 03:00 NZDT falls back to 02:00 NZST
        before = datetime(2024, 4, 6, 13, 30, tzinfo=timezone.utc)
        after = datetime(2024, 4, 6, 14, 30, tzinfo=timezone.utc)

        assert clock.business_date(before) == date(2024, 4, 7)
        assert clock.business_date(after) == date(2024, 4, 7)

    def test_utc_clock(self):
        clock = BusinessClock.from_name("UTC")
        instant = datetime(2024, 3, 1, 23, 30, tzinfo=ZoneInfo("Pacific/Auckland"))

        assert clock.business_date(instant) == date(2024, 3, 1)
        assert clock.name == "UTC"


class TestTimeOfDay:
    """Tests for BusinessClock.time_of_day"""

    def test_naive(self, clock):
        assert clock.time_of_day(datetime(2024, 3, 1, 9, 15)) == time(9, 15)

    def test_aware_converted(self, clock):
        value = clock.time_of_day(datetime(2024, 3, 9, 22, 0, tzinfo=timezone.utc))

        assert value == time(11, 0)
        assert value.tzinfo is None

    def test_plain_date_is_midnight(self, clock):
        assert clock.time_of_day(date(2024, 3, 1)) == time(0, 0)


class TestClockHelpers:

    def test_now_is_in_business_zone(self, clock):
        assert clock.now().tzinfo == ZoneInfo("Pacific/Auckland")
        assert clock.today() == clock.now().date()

    def test_clock_is_immutable(self, clock):
        with pytest.raises(AttributeError):
            clock.tz = ZoneInfo("UTC")

    def test_to_utc(self):
        naive = datetime(2024, 3, 1, 9, 0)
        aware = datetime(2024, 3, 1, 9, 0, tzinfo=ZoneInfo("Pacific/Auckland"))

        assert to_utc(naive) == datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
        assert to_utc(aware) == datetime(2024, 2, 29, 20, 0, tzinfo=timezone.utc)


class TestExplicitTimeOfDay:
    """Tests for time_of_day with an explicit time"""

    def test_naive_time_is_kept(self, clock):
        assert clock.time_of_day(datetime(2024, 3, 9, 22, 0, tzinfo=timezone.utc), time(7, 0)) == time(7, 0)

    def test_offset_time_is_converted(self, clock):
        """22:00 UTC on the 9th is 11:00 on the 10th in Auckland"""
        value = clock.time_of_day(
            datetime(2024, 3, 9, 22, 0, tzinfo=timezone.utc),
            time(22, 0, tzinfo=timezone.utc),
        )

        assert value == time(11, 0)
        assert value.tzinfo is None

    def test_offset_time_with_plain_date(self, clock):
        value = clock.time_of_day(date(2024, 6, 1), time(0, 30, tzinfo=timezone.utc))

        # NZST is UTC+12 in June
        assert value == time(12, 30)
