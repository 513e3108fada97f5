"""
Dose Time Window
Decides whether today's dose is past its notification window
"""

from typing import Optional, Union
from datetime import datetime, date, time, timedelta
from zoneinfo import ZoneInfo

from config import settings


TimeLike = Union[str, time]


def local_now() -> datetime:
    """
    Current wall-clock time as a naive datetime.

    Scheduled times carry no zone, so they are compared against the server's
    local clock, or against APP_TIMEZONE when configured. Every patient is
    assumed to live in that one zone.
    """
    if settings.APP_TIMEZONE:
        return datetime.now(ZoneInfo(settings.APP_TIMEZONE)).replace(tzinfo=None)
    return datetime.now()


def today(now: Optional[datetime] = None) -> date:
    """Calendar day that logs are filed under"""
    return (now or local_now()).date()


def parse_scheduled_time(val: TimeLike) -> time:
    """Accept "HH:MM", "H:MM", "HH:MM:SS" or a time object"""
    if isinstance(val, time):
        return val.replace(second=0, microsecond=0)
    if isinstance(val, str):
        for fmt in ("%H:%M", "%H:%M:%S"):
            try:
                return datetime.strptime(val.strip(), fmt).time().replace(second=0)
            except ValueError:
                continue
        raise ValueError(f"Cannot parse scheduled_time string: {val!r}")
    raise TypeError(f"Unsupported scheduled_time type: {type(val)}")


def dose_deadline(
    scheduled_time: TimeLike,
    window_minutes: int,
    now: Optional[datetime] = None
) -> datetime:
    """
    Today's scheduled instant plus the window.

    The result may fall on the next calendar day (e.g. 23:50 + 8h).
    """
    if window_minutes < 0:
        raise ValueError(f"window_minutes must be non-negative, got {window_minutes}")

    now = now or local_now()
    scheduled = datetime.combine(now.date(), parse_scheduled_time(scheduled_time))
    return scheduled + timedelta(minutes=window_minutes)


def is_missed(
    scheduled_time: TimeLike,
    window_minutes: int,
    now: Optional[datetime] = None
) -> bool:
    """True once now is strictly after the deadline; exactly at it is not missed"""
    now = now or local_now()
    return now > dose_deadline(scheduled_time, window_minutes, now=now)
