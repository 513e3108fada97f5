"""
Display helpers shared by API responses and notification bodies
"""

import re

from tools.time_window import parse_scheduled_time


FREQUENCY_LABELS = {
    "once_daily": "Once Daily",
    "twice_daily": "Twice Daily",
    "three_times_daily": "3× Daily",
    "as_needed": "As Needed",
}

_ANGLE_BRACKETS = re.compile(r"[<>]")


def format_time(scheduled_time: str) -> str:
    """12-hour clock, e.g. 08:00 -> 8:00 AM, 13:05 -> 1:05 PM"""
    t = parse_scheduled_time(scheduled_time)
    hour = t.hour % 12 or 12
    period = "AM" if t.hour < 12 else "PM"
    return f"{hour}:{t.minute:02d} {period}"


def format_frequency(frequency) -> str:
    key = getattr(frequency, "value", frequency)
    return FREQUENCY_LABELS.get(key, key)


def normalize_time(scheduled_time: str) -> str:
    """Zero-pad to HH:MM so stored times sort lexically"""
    t = parse_scheduled_time(scheduled_time)
    return f"{t.hour:02d}:{t.minute:02d}"


def sanitize(value: str) -> str:
    """Trim and strip angle brackets from free text"""
    return _ANGLE_BRACKETS.sub("", value.strip())
