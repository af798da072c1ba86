"""Time formatting utilities shared by the engine, adapters, and CLI."""

import re
from datetime import date, datetime

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

MINUTES_PER_DAY = 24 * 60


def time_to_minutes(value: str) -> int:
    """Convert an "HH:MM" string to minutes since midnight.

    "24:00" is accepted as the end-of-day boundary.

    Examples:
        >>> time_to_minutes("14:30")
        870
        >>> time_to_minutes("9:05")
        545
    """
    match = _CLOCK_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Invalid HH:MM time: {value!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes > 59 or hours > 24 or (hours == 24 and minutes):
        raise ValueError(f"Invalid HH:MM time: {value!r}")
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to a zero-padded "HH:MM" string.

    Examples:
        >>> minutes_to_time(870)
        '14:30'
    """
    if not 0 <= minutes <= MINUTES_PER_DAY:
        raise ValueError(f"Minute-of-day out of range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_time_12h(value: str) -> str:
    """Render a 24-hour "HH:MM" string as a 12-hour label.

    Examples:
        >>> format_time_12h("14:30")
        '2:30 PM'
        >>> format_time_12h("00:05")
        '12:05 AM'
    """
    minutes = time_to_minutes(value) % MINUTES_PER_DAY
    hours, mins = divmod(minutes, 60)
    period = "PM" if hours >= 12 else "AM"
    return f"{hours % 12 or 12}:{mins:02d} {period}"


def parse_date(value) -> date:
    """Accept a date object or a "YYYY-MM-DD" string and return a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid calendar date: {value!r}")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"Invalid calendar date: {value!r}") from None
