"""
Date Service

Derives the puzzle day key and the time left until the next puzzle. The
puzzle rolls over at a fixed local hour in a fixed reference time zone, so
every player sees the same day key regardless of where they are.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from ..config.game_settings import REFERENCE_TIMEZONE, ROLLOVER_HOUR


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DateKeyProvider:
    """
    Computes day keys and rollover countdowns from the wall clock.

    Nothing is cached; callers poll it once a second for the countdown.
    """

    def __init__(self,
                 tz_name: str = REFERENCE_TIMEZONE,
                 rollover_hour: int = ROLLOVER_HOUR,
                 clock: Optional[Callable[[], datetime]] = None):
        if not 0 <= rollover_hour <= 23:
            raise ValueError(f"Rollover hour must be between 0 and 23, got {rollover_hour}")
        self.zone = ZoneInfo(tz_name)
        self.rollover_hour = rollover_hour
        self.clock = clock or _utc_now

    def _local_now(self, now: Optional[datetime] = None) -> datetime:
        now = now or self.clock()
        if now.tzinfo is None:
            raise ValueError("Clock must return timezone-aware datetimes")
        return now.astimezone(self.zone)

    def current_day_key(self, now: Optional[datetime] = None) -> str:
        """
        Returns today's puzzle key as YYYY-MM-DD.

        Before the rollover hour the previous calendar day's puzzle is still
        the active one.
        """
        local = self._local_now(now)
        puzzle_date = local.date()
        if local.hour < self.rollover_hour:
            puzzle_date -= timedelta(days=1)
        return puzzle_date.strftime('%Y-%m-%d')

    def time_until_next_rollover(self, now: Optional[datetime] = None) -> int:
        """
        Milliseconds until the next rollover (HH:00:00 local time).
        """
        local = self._local_now(now)
        target_date = local.date()
        if local.hour >= self.rollover_hour:
            target_date += timedelta(days=1)
        target = datetime(target_date.year, target_date.month, target_date.day,
                          self.rollover_hour, tzinfo=self.zone)

        # Same-tzinfo subtraction ignores DST offsets, so measure in UTC
        delta = target.astimezone(timezone.utc) - local.astimezone(timezone.utc)
        return int(delta.total_seconds() * 1000)


def format_countdown(ms: int) -> str:
    """Formats milliseconds as HH:MM:SS, clamped at zero."""
    total_seconds = max(int(ms), 0) // 1000
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
