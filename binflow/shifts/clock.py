"""
Business Clock

Converts caller-supplied timestamps into calendar dates of the configured
business timezone. The same conversion is used when a shift report key is
written and when reports or tippings are filtered by date, so both sides
always agree on which day an instant belongs to.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo

from binflow.config import get_settings

DateLike = Union[date, datetime]


@dataclass(frozen=True)
class BusinessClock:
    """Immutable view of "now" and "which day" in one timezone."""

    tz: ZoneInfo

    @classmethod
    def from_name(cls, name: str) -> "BusinessClock":
        return cls(ZoneInfo(name))

    @property
    def name(self) -> str:
        return self.tz.key

    def now(self) -> datetime:
        """Current instant, expressed in the business timezone"""
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()

    def localize(self, value: datetime) -> datetime:
        """
        Express a timestamp in the business timezone.

        Naive values are wall-clock readings taken on site and are tagged
        with the business zone as-is. Aware values are converted.
        """
        if value.tzinfo is None:
            return value.replace(tzinfo=self.tz)
        return value.astimezone(self.tz)

    def business_date(self, value: DateLike) -> date:
        """Calendar date used as the shift report key"""
        if isinstance(value, datetime):
            return self.localize(value).date()
        return value

    def time_of_day(self, value: DateLike, at: Optional[time] = None) -> time:
        """
        Wall-clock time in the business timezone, without tzinfo.

        An explicit ``at`` with a UTC offset is read on the calendar day of
        ``value`` and converted; a naive ``at`` is already local.
        """
        if at is not None:
            if at.tzinfo is None:
                return at
            day = value.date() if isinstance(value, datetime) else value
            return self.localize(datetime.combine(day, at)).time().replace(tzinfo=None)
        if isinstance(value, datetime):
            return self.localize(value).time().replace(tzinfo=None)
        return time(0, 0)


def to_utc(value: datetime) -> datetime:
    """Normalize an instant to aware UTC; naive values are taken as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def get_business_clock() -> BusinessClock:
    """Clock for the configured business timezone"""
    return BusinessClock.from_name(get_settings().business.timezone)
