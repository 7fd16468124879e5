"""Calendar collaborator resolving local dates."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Protocol
from zoneinfo import ZoneInfo

DATE_FORMAT = "%Y-%m-%d"


class Calendar(Protocol):
    """Date utilities the engine depends on."""

    def now(self) -> datetime:
        """Return the current local time."""

    def today(self) -> str:
        """Return today's local date as YYYY-MM-DD."""

    def format_date(self, day: date) -> str:
        """Format a date as YYYY-MM-DD."""

    def parse_date(self, value: str) -> date:
        """Parse a YYYY-MM-DD string."""

    def week_start(self, day: date) -> date:
        """Return the most recent Sunday on or before the date."""

    def month_start(self, day: date) -> date:
        """Return the first day of the date's month."""


@dataclass
class LocalCalendar(Calendar):
    """Calendar backed by the device-local or a configured timezone."""

    timezone_name: str | None = None
    clock: Callable[[], datetime] | None = None

    def now(self) -> datetime:
        """Return the current time in the calendar's timezone."""
        tz = self._tz()
        if self.clock is not None:
            current = self.clock()
            if current.tzinfo is None:
                return current.replace(tzinfo=tz) if tz else current.astimezone()
            return current.astimezone(tz) if tz else current.astimezone()
        if tz is None:
            return datetime.now().astimezone()
        return datetime.now(tz=tz)

    def today(self) -> str:
        """Return today's date string."""
        return self.format_date(self.now().date())

    def format_date(self, day: date) -> str:
        """Format a date as YYYY-MM-DD."""
        return day.strftime(DATE_FORMAT)

    def parse_date(self, value: str) -> date:
        """Parse a YYYY-MM-DD string, raising ValueError when invalid."""
        return datetime.strptime(value, DATE_FORMAT).date()

    def week_start(self, day: date) -> date:
        """Return the Sunday that starts the date's week."""
        days_since_sunday = (day.weekday() + 1) % 7
        return day - timedelta(days=days_since_sunday)

    def month_start(self, day: date) -> date:
        """Return the first of the date's month."""
        return day.replace(day=1)

    def _tz(self) -> tzinfo | None:
        if self.timezone_name is None:
            return None
        return ZoneInfo(self.timezone_name)
