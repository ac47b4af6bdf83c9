from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from custody_desk.core import clock as clock_module
from custody_desk.core.clock import Clock, FixedClock, desk_timezone
from custody_desk.core.config import settings


def test_today_is_the_desk_calendar_day():
    # 22:00 on Jan 9 at a UTC-3 desk
    instant = datetime(2024, 1, 10, 1, 0, tzinfo=timezone.utc)

    desk = FixedClock(instant, tz=timezone(timedelta(hours=-3)))
    utc = FixedClock(instant)

    assert desk.today() == date(2024, 1, 9)
    assert utc.today() == date(2024, 1, 10)


def test_clock_without_zone_uses_host_local_time():
    instant = datetime(2024, 6, 30, 23, 59, tzinfo=timezone.utc)

    assert Clock().local_date(instant) == instant.astimezone().date()


def test_desk_timezone_follows_settings(monkeypatch):
    monkeypatch.setattr(settings, "DESK_TIMEZONE", None)
    assert desk_timezone() is None

    monkeypatch.setattr(settings, "DESK_TIMEZONE", "America/Sao_Paulo")
    assert desk_timezone() == ZoneInfo("America/Sao_Paulo")


def test_system_clock_now_is_utc():
    assert clock_module.system_clock.now().tzinfo == timezone.utc
