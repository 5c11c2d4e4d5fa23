"""Timezone-safe date/time operations.

All stored instants are UTC. The application timezone is applied only when an
instant has to be turned into a calendar day or a wall-clock time, and it is
always the zone given at construction, never the host's local zone.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .common.datetime_utils import ensure_utc, parse_iso_date, utc_now
from .core.constants import DEFAULT_TOLERANCE_MINUTES
from .core.enums import ShiftPosition
from .core.exceptions import ValidationError

Clock = Callable[[], datetime]


class TimeEngine:
    def __init__(self, timezone_name: str, *, clock: Optional[Clock] = None):
        try:
            self._tz = ZoneInfo(timezone_name)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValidationError(f"Unknown timezone: {timezone_name!r}")
        self._timezone_name = timezone_name
        self._clock = clock or utc_now

    @property
    def timezone_name(self) -> str:
        return self._timezone_name

    def now_utc(self) -> datetime:
        return ensure_utc(self._clock())

    def to_local(self, instant: datetime) -> datetime:
        return ensure_utc(instant).astimezone(self._tz)

    def local_calendar_date(self, instant: datetime) -> date:
        return self.to_local(instant).date()

    def local_minutes_since_midnight(self, instant: datetime) -> int:
        local = self.to_local(instant)
        return local.hour * 60 + local.minute

    def compare_to_shift_boundary(
        self,
        instant: datetime,
        shift_hour: int,
        tolerance_minutes: int = DEFAULT_TOLERANCE_MINUTES,
    ) -> ShiftPosition:
        """Place ``instant`` relative to ``shift_hour``:00 local time.

        The tolerance window starts exactly at the boundary and lasts
        ``tolerance_minutes`` whole minutes, so with a 1 minute tolerance
        09:00:00-09:00:59 is within and 09:01:00 is after.
        """
        local = self.to_local(instant)
        seconds = local.hour * 3600 + local.minute * 60 + local.second
        elapsed = seconds - int(shift_hour) * 3600
        if elapsed < 0:
            return ShiftPosition.BEFORE
        if elapsed < int(tolerance_minutes) * 60:
            return ShiftPosition.WITHIN_TOLERANCE
        return ShiftPosition.AFTER

    def today(self) -> date:
        return self.local_calendar_date(self.now_utc())

    def current_year(self, instant: Optional[datetime] = None) -> int:
        return self.local_calendar_date(instant or self.now_utc()).year

    def local_instant(self, day: date, hour: int, minute: int = 0) -> datetime:
        """UTC instant of the given local wall-clock time on ``day``."""
        local = datetime.combine(day, time(hour=hour, minute=minute), tzinfo=self._tz)
        return local.astimezone(timezone.utc)

    def local_day_range_utc(self, day: date) -> tuple[datetime, datetime]:
        start = datetime.combine(day, time.min, tzinfo=self._tz)
        end = start + timedelta(hours=23, minutes=59, seconds=59)
        return start.astimezone(timezone.utc), end.astimezone(timezone.utc)

    @staticmethod
    def parse_local_date(value) -> date:
        """Accept a date or a bare YYYY-MM-DD string.

        Bare strings are read as calendar days, not as UTC midnight, so there is
        no off-by-one when the application zone is east or west of UTC.
        """
        if isinstance(value, datetime):
            raise ValidationError("Expected a calendar date, not a timestamp")
        if isinstance(value, date):
            return value
        return parse_iso_date(str(value))
