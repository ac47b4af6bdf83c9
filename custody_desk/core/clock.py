# custody_desk/core/clock.py

from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo

from custody_desk.core.config import settings


def desk_timezone() -> tzinfo | None:
    """The desk's zone, or None for the host's local time."""
    if settings.DESK_TIMEZONE:
        return ZoneInfo(settings.DESK_TIMEZONE)
    return None


class Clock:
    """Source of "now" and "today" for the services.

    Instants are UTC. Calendar dates (due dates, late returns, the overdue
    sweep) are taken in the desk's timezone, so a return made on the evening
    of its due date is on time wherever the desk is.
    """

    def __init__(self, tz: tzinfo | None = None):
        self.tz = tz

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def local_date(self, instant: datetime) -> date:
        return instant.astimezone(self.tz).date()

    def today(self) -> date:
        return self.local_date(self.now())


class FixedClock(Clock):
    def __init__(self, instant: datetime, tz: tzinfo | None = timezone.utc):
        super().__init__(tz)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant

    def set(self, instant: datetime) -> None:
        self.instant = instant


system_clock = Clock(desk_timezone())


def get_clock() -> Clock:
    return system_clock
