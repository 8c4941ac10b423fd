"""
Operating-hours helpers.

Hours are stored as a day-keyed map: {"monday": "10am-10pm", "sunday": "Closed"}.
A missing day means closed. Ranges whose end is before their start run past
midnight into the following day.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Any, Mapping, Optional

# Index matches datetime.weekday(): Monday == 0
WEEKDAYS = [
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
]

# Google Places numbers days from Sunday == 0
_GOOGLE_DAYS = [
    "sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday",
]

CLOSED = "Closed"
OPEN_24_HOURS = "Open 24 hours"

# "6am-2pm", "10:00am - 10:00pm"
_AMPM_RANGE = re.compile(
    r"(\d{1,2})(?::(\d{2}))?\s*(am|pm)\s*[-–]\s*(\d{1,2})(?::(\d{2}))?\s*(am|pm)",
    re.IGNORECASE,
)
# "09:00-22:00"
_24H_RANGE = re.compile(r"(\d{1,2}):(\d{2})\s*[-–]\s*(\d{1,2}):(\d{2})")


def _to_minutes(hour: str, minute: Optional[str], period: str) -> int:
    h = int(hour)
    m = int(minute) if minute else 0
    period = period.lower()
    if period == "pm" and h != 12:
        h += 12
    elif period == "am" and h == 12:
        h = 0
    return h * 60 + m


def parse_range(hours: Optional[str]) -> Optional[tuple[int, int]]:
    """
    Parse an hours string into (start, end) minutes past midnight.
    Returns None for closed, empty, or unparseable values.
    """
    if not hours:
        return None
    value = hours.strip()
    if value.lower() == CLOSED.lower():
        return None
    if value.lower() == OPEN_24_HOURS.lower():
        return (0, 24 * 60)

    match = _AMPM_RANGE.search(value)
    if match:
        s_hour, s_min, s_period, e_hour, e_min, e_period = match.groups()
        return _to_minutes(s_hour, s_min, s_period), _to_minutes(e_hour, e_min, e_period)

    match = _24H_RANGE.search(value)
    if match:
        s_hour, s_min, e_hour, e_min = (int(g) for g in match.groups())
        return s_hour * 60 + s_min, e_hour * 60 + e_min

    return None


def is_open_at(hours: Mapping[str, Any] | None, when: datetime) -> bool:
    """
    True only when the hours map says the place is open at `when`.
    Closed and unknown both return False.
    """
    if not hours:
        return False

    now_minutes = when.hour * 60 + when.minute
    today = WEEKDAYS[when.weekday()]
    yesterday = WEEKDAYS[(when - timedelta(days=1)).weekday()]

    today_range = parse_range(_day_value(hours, today))
    if today_range:
        start, end = today_range
        if end < start:
            if now_minutes >= start:
                return True
        elif start <= now_minutes < end:
            return True

    # Tail of yesterday's overnight range
    yesterday_range = parse_range(_day_value(hours, yesterday))
    if yesterday_range:
        start, end = yesterday_range
        if end < start and now_minutes < end:
            return True

    return False


def _day_value(hours: Mapping[str, Any], day: str) -> Optional[str]:
    value = hours.get(day)
    if value is None:
        value = hours.get(day.capitalize())
    return str(value) if value is not None else None


def _format_hhmm(value: str) -> str:
    """'0900' → '9am', '1730' → '5:30pm'."""
    hour = int(value[:2])
    minute = int(value[2:4])
    period = "pm" if hour >= 12 else "am"
    hour12 = hour - 12 if hour > 12 else (12 if hour == 0 else hour)
    if minute == 0:
        return f"{hour12}{period}"
    return f"{hour12}:{minute:02d}{period}"


def parse_google_periods(opening_hours: Optional[Mapping[str, Any]]) -> dict[str, str]:
    """
    Convert Google Places openingHours.periods into the day-keyed map.
    Every day starts as Closed; a period without a close time means 24 hours
    that day, unless it is the lone Sunday-midnight period (open every day).
    """
    if not opening_hours or not isinstance(opening_hours.get("periods"), list):
        return {}

    periods = opening_hours["periods"]
    # Google's always-open shape: one period opening Sunday 00:00, never closing
    if len(periods) == 1 and isinstance(periods[0], dict) and not periods[0].get("close"):
        only_open = periods[0].get("open") or {}
        if only_open.get("day") == 0 and only_open.get("time") == "0000":
            return {day: OPEN_24_HOURS for day in WEEKDAYS}

    hours = {day: CLOSED for day in _GOOGLE_DAYS}
    for period in periods:
        open_info = period.get("open") if isinstance(period, dict) else None
        if not open_info:
            continue
        day = open_info.get("day")
        open_time = open_info.get("time")
        if not isinstance(day, int) or not 0 <= day <= 6 or not open_time:
            continue

        close_time = (period.get("close") or {}).get("time")
        if close_time:
            hours[_GOOGLE_DAYS[day]] = f"{_format_hhmm(open_time)}-{_format_hhmm(close_time)}"
        else:
            hours[_GOOGLE_DAYS[day]] = OPEN_24_HOURS
    return hours
