"""The one source of "now" for analytics.

Every caller that needs the current date (the admin view, the rebuild job)
receives a clock instead of reading the system time on its own.
"""

from datetime import date, datetime, time, timezone


class Clock:
    """Supplies the current instant as an aware UTC datetime."""

    def now(self) -> datetime:
        raise NotImplementedError

    def today(self, tz=timezone.utc) -> date:
        return self.now().astimezone(tz).date()


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """A clock pinned to one instant."""

    def __init__(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self._instant = instant

    def now(self) -> datetime:
        return self._instant


class DateClock(FixedClock):
    """
    A clock pinned to a calendar day.

    `today()` is that day in every timezone. `now()` is noon UTC on the day,
    which only matters for trailing ranges such as the sales overview.
    """

    def __init__(self, day: date) -> None:
        super().__init__(datetime.combine(day, time(12, 0), tzinfo=timezone.utc))
        self._day = day

    def today(self, tz=timezone.utc) -> date:
        return self._day
