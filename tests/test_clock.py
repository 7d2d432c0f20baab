"""Tests for the clock, configuration-driven "today" and token checks."""

from datetime import date, datetime, timedelta, timezone

from community_events.api import deps
from community_events.core.clock import DateClock, FixedClock, SystemClock
from community_events.core.security import decode_token
from community_events.services.ticket_analytics import resolve_window

from factories import create_access_token

LINE_ISLANDS = timezone(timedelta(hours=14))
BAKER_ISLAND = timezone(timedelta(hours=-12))


class TestClock:
    def test_date_clock_today(self):
        clock = DateClock(date(2025, 9, 9))
        assert clock.today() == date(2025, 9, 9)
        assert clock.today(timezone(timedelta(hours=-10))) == date(2025, 9, 9)

    def test_date_clock_keeps_day_in_extreme_offsets(self):
        clock = DateClock(date(2025, 9, 9))
        assert clock.today(LINE_ISLANDS) == date(2025, 9, 9)
        assert clock.today(BAKER_ISLAND) == date(2025, 9, 9)

    def test_date_clock_now_is_noon_utc(self):
        assert DateClock(date(2025, 9, 9)).now() == datetime(2025, 9, 9, 12, tzinfo=timezone.utc)

    def test_naive_instant_is_utc(self):
        clock = FixedClock(datetime(2025, 9, 9, 23, 30))
        assert clock.now().tzinfo is timezone.utc
        assert clock.today(timezone(timedelta(hours=2))) == date(2025, 9, 10)

    def test_system_clock_is_aware(self):
        assert SystemClock().now().tzinfo is not None


class TestGetClock:
    def test_reference_date_pins_today(self, monkeypatch):
        monkeypatch.setattr(deps.settings, "REFERENCE_DATE", date(2025, 9, 9))
        clock = deps.get_clock()
        assert isinstance(clock, DateClock)
        assert clock.today() == date(2025, 9, 9)

    def test_reference_date_holds_in_plus_fourteen_zone(self, monkeypatch):
        monkeypatch.setattr(deps.settings, "REFERENCE_DATE", date(2025, 9, 9))
        window = resolve_window(deps.get_clock(), past_count=1, future_count=1, weekday="tue", tz=LINE_ISLANDS)
        assert window.today == date(2025, 9, 9)
        assert window.instances == [date(2025, 9, 2), date(2025, 9, 9), date(2025, 9, 16)]

    def test_system_clock_by_default(self, monkeypatch):
        monkeypatch.setattr(deps.settings, "REFERENCE_DATE", None)
        assert isinstance(deps.get_clock(), SystemClock)


class TestTokens:
    def test_round_trip_subject(self):
        assert decode_token(create_access_token("abc")) == "abc"

    def test_expired_token(self):
        assert decode_token(create_access_token("abc", expires_delta=timedelta(seconds=-5))) is None

    def test_garbage(self):
        assert decode_token("garbage") is None
