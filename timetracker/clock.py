"""Clock-time and calendar arithmetic.

Times of day are stored as ``HH:MM`` strings (24-hour, local wall clock)
and handled here as minutes since midnight. Weeks run Monday through
Sunday and are identified by their Monday.
"""
import math
import re
from datetime import date, datetime, time, timedelta

from timetracker.exceptions import InvalidClockFormat

_CLOCK_24H = re.compile(r"^([0-9]{1,2}):([0-9]{2})$")
_CLOCK_12H = re.compile(r"^([0-9]{1,2}):([0-9]{2})\s*(AM|PM)$")

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def parse_clock_time(text: str) -> int:
    """Parse ``HH:MM`` (24h) or ``h:mm AM/PM`` into minutes since midnight."""
    if not isinstance(text, str):
        raise InvalidClockFormat(str(text))
    value = text.strip().upper()

    match = _CLOCK_12H.match(value)
    if match:
        hour, minute, period = int(match.group(1)), int(match.group(2)), match.group(3)
        if not 1 <= hour <= 12 or minute > 59:
            raise InvalidClockFormat(text)
        if period == "AM" and hour == 12:
            hour = 0
        elif period == "PM" and hour != 12:
            hour += 12
        return hour * 60 + minute

    match = _CLOCK_24H.match(value)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if hour > 23 or minute > 59:
            raise InvalidClockFormat(text)
        return hour * 60 + minute

    raise InvalidClockFormat(text)


def format_clock_time(minutes: int, use_12h: bool = False) -> str:
    hour, minute = divmod(minutes, 60)
    if not use_12h:
        return f"{hour:02d}:{minute:02d}"
    period = "PM" if hour >= 12 else "AM"
    hour12 = 12 if hour == 0 else hour - 12 if hour > 12 else hour
    return f"{hour12}:{minute:02d} {period}"


def normalize_clock_time(text: str) -> str:
    """Validate any accepted input form and return it as ``HH:MM``."""
    return format_clock_time(parse_clock_time(text))


def display_clock_time(value: str | None, use_12h: bool = False) -> str | None:
    """Render a stored ``HH:MM`` value for display."""
    if value is None:
        return None
    return format_clock_time(parse_clock_time(value), use_12h=use_12h)


def format_clock_range(minutes: int) -> str:
    if minutes < 0:
        minutes = 0
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m"


def format_decimal_hours(minutes: int) -> str:
    return f"{minutes / 60:.1f}h"


def format_elapsed_clock(seconds: int) -> str:
    hours, rest = divmod(int(seconds), 3600)
    mins, secs = divmod(rest, 60)
    return f"{hours:02d}:{mins:02d}:{secs:02d}"


def seconds_of_day(value: datetime | time) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second


def now_clock_time(now: datetime) -> str:
    """Wall-clock ``HH:MM`` for a moment; seconds are truncated."""
    return format_clock_time(now.hour * 60 + now.minute)


def monday_of(day: date) -> date:
    # weekday(): Monday=0 .. Sunday=6, so Sunday belongs to the week before
    return day - timedelta(days=day.weekday())


def add_days(day: date, n: int) -> date:
    return day + timedelta(days=n)


def week_dates(monday: date) -> list[date]:
    return [add_days(monday, i) for i in range(7)]


def format_week_range(monday: date) -> str:
    """``Jan 1 – Jan 7`` style label for a Monday-keyed week."""
    sunday = add_days(monday, 6)
    return (
        f"{MONTH_NAMES[monday.month - 1][:3]} {monday.day} – "
        f"{MONTH_NAMES[sunday.month - 1][:3]} {sunday.day}"
    )


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
