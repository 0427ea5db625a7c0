"""
Business-local time.

All zone conversion in the service goes through BusinessClock. Callers
hand it business-local dates and "HH:MM" strings and get UTC instants
back; nothing else in the package touches a timezone.
"""
import re
from datetime import date, datetime, timezone
from typing import Callable, Optional

import pendulum
from pendulum import Date, DateTime

from studio_api.core.errors import InvalidDate

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

HISTORY_FORMAT = "MMM D, YYYY h:mm A"


def parse_hhmm(value: str) -> tuple[int, int]:
    """Split a 24h "HH:MM" string, raising ValueError when malformed."""
    match = _TIME_RE.match((value or "").strip())
    if not match:
        raise ValueError(f"Invalid time of day: {value!r}")
    return int(match.group(1)), int(match.group(2))


def is_hhmm(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        parse_hhmm(value)
    except ValueError:
        return False
    return True


def as_utc(value: datetime) -> datetime:
    """
    Plain UTC datetime for any instant.

    Naive values are read as UTC: that is how timezone-aware columns come
    back from backends without offset support (SQLite).
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    v = value.astimezone(timezone.utc)
    return datetime(v.year, v.month, v.day, v.hour, v.minute, v.second, v.microsecond, tzinfo=timezone.utc)


class BusinessClock:
    def __init__(self, tz_name: str, now: Optional[Callable[[], datetime]] = None):
        self.tz_name = tz_name
        self.tz = pendulum.timezone(tz_name)
        self._now = now

    def now(self) -> DateTime:
        if self._now is not None:
            return pendulum.instance(as_utc(self._now())).in_timezone(self.tz)
        return pendulum.now(self.tz)

    def now_utc(self) -> datetime:
        return as_utc(self.now())

    def today(self) -> Date:
        return self.now().date()

    def parse_date(self, value: str) -> Date:
        """Parse a "YYYY-MM-DD" business-local calendar day."""
        if not isinstance(value, str) or not _DATE_RE.match(value.strip()):
            raise InvalidDate(f"Invalid date: {value!r}")
        try:
            return pendulum.from_format(value.strip(), "YYYY-MM-DD", tz=self.tz).date()
        except ValueError:
            raise InvalidDate(f"Invalid date: {value!r}")

    def parse_target_date(self, value: str) -> Date:
        """Like parse_date, but days before today (business-local) are rejected."""
        day = self.parse_date(value)
        if day < self.today():
            raise InvalidDate("Invalid or past date")
        return day

    def weekday(self, day: date) -> int:
        # 0=Sun ... 6=Sat
        return date.isoweekday(day) % 7

    def local_midnight(self, day: date) -> DateTime:
        return pendulum.datetime(day.year, day.month, day.day, tz=self.tz)

    def day_bounds(self, day: date) -> tuple[datetime, datetime]:
        """[start, end) of the local day as UTC instants; not always 24h long."""
        start = self.local_midnight(day)
        return as_utc(start), as_utc(start.add(days=1))

    def at(self, day: date, hhmm: str) -> datetime:
        """UTC instant of a wall-clock time on a local day."""
        hour, minute = parse_hhmm(hhmm)
        return as_utc(pendulum.datetime(day.year, day.month, day.day, hour, minute, tz=self.tz))

    def to_local(self, instant: datetime) -> DateTime:
        return pendulum.instance(as_utc(instant)).in_timezone(self.tz)

    def hour_floor(self, instant: datetime) -> datetime:
        """Start of the local hour containing the instant."""
        return as_utc(self.to_local(instant).start_of("hour"))

    def format_local(self, instant: datetime, fmt: str = HISTORY_FORMAT) -> str:
        return self.to_local(instant).format(fmt)
