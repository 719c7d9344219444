# app/services/timefmt.py
"""
Conversions between the two time notations used for slots.

24-hour: zero-padded "HH:MM" (what an <input type="time"> produces)
12-hour: "H:MM AM" / "H:MM PM" (what customers see and what is stored)

to_12_hour / to_24_hour are lenient: anything they cannot parse comes back
unchanged. canonical_time is the strict variant used before writes.
"""
import re

from app.core.errors import InvalidTimeFormat

_TIME_24 = re.compile(r"^(\d{1,2}):(\d{2})$")
_TIME_12 = re.compile(r"^(\d{1,2}):(\d{2})\s*(AM|PM)$", re.IGNORECASE)


def _has_meridiem(value: str) -> bool:
    upper = value.upper()
    return "AM" in upper or "PM" in upper


def to_12_hour(time24: str) -> str:
    if _has_meridiem(time24):
        return time24
    match = _TIME_24.match(time24.strip())
    if not match:
        return time24
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return time24
    period = "PM" if hours >= 12 else "AM"
    display_hour = hours % 12 or 12
    return f"{display_hour}:{minutes:02d} {period}"


def to_24_hour(time12: str) -> str:
    if not _has_meridiem(time12):
        return time12
    match = _TIME_12.match(time12.strip())
    if not match:
        return time12
    hours, minutes, period = int(match.group(1)), int(match.group(2)), match.group(3).upper()
    if not 1 <= hours <= 12 or minutes > 59:
        return time12
    if period == "AM" and hours == 12:
        hours = 0
    elif period == "PM" and hours != 12:
        hours += 12
    return f"{hours:02d}:{minutes:02d}"


def canonical_time(value: str) -> str:
    """Return ``value`` as zero-padded 24-hour "HH:MM".

    Accepts either notation and raises InvalidTimeFormat for anything that is
    not a real time of day.
    """
    if not isinstance(value, str):
        raise InvalidTimeFormat(str(value))
    candidate = to_24_hour(value.strip())
    match = _TIME_24.match(candidate)
    if not match:
        raise InvalidTimeFormat(value)
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidTimeFormat(value)
    return f"{hours:02d}:{minutes:02d}"


def is_valid_time(value: str) -> bool:
    try:
        canonical_time(value)
    except InvalidTimeFormat:
        return False
    return True
