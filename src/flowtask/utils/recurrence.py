"""Display formatting for recurrence descriptors.

Every function here is total: malformed input renders as a best-effort
string instead of raising, since the output only ever ends up on screen.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from flowtask.models.recurrence import Frequency, RecurrenceDescriptor
from flowtask.utils.text import capitalize_first
from flowtask.utils.weekdays import DAYS_OF_WEEK, MONTHS, WEEKDAY_NAME, find_weekday

FALLBACK_TIME_DISPLAY = "9:00 AM"

_TIME_SHAPE = re.compile(r"^\d{1,2}:\d{2}$")
_DISPLAY_TIME = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])\s*$")
_BIWEEKLY = re.compile(r"\bevery\s+(?:other|2nd|second)\b", re.IGNORECASE)
_DAY_WORD = re.compile(rf"\b(?:{WEEKDAY_NAME})\b", re.IGNORECASE)


def ordinal_suffix(n: int) -> str:
    """Return the English ordinal suffix for *n* (st, nd, rd, th)."""
    if 11 <= n % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")


def _clock(hours: int, minutes: int) -> str:
    period = "PM" if hours >= 12 else "AM"
    display_hours = hours % 12 or 12
    return f"{display_hours}:{minutes:02d} {period}"


def format_time_display(time: str | None) -> str:
    """Render ``HH:MM`` (24-hour) as ``h:MM AM/PM``.

    Anything that is not a valid ``H:MM``/``HH:MM`` time of day renders as
    ``9:00 AM``.
    """
    if not isinstance(time, str) or not _TIME_SHAPE.match(time):
        return FALLBACK_TIME_DISPLAY
    hours, minutes = (int(part) for part in time.split(":"))
    if hours > 23 or minutes > 59:
        return FALLBACK_TIME_DISPLAY
    return _clock(hours, minutes)


def parse_time_display(display: str) -> tuple[int, int] | None:
    """Inverse of :func:`format_time_display`: ``"6:00 PM"`` -> ``(18, 0)``."""
    match = _DISPLAY_TIME.match(display or "")
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if not 1 <= hours <= 12 or minutes > 59:
        return None
    is_pm = match.group(3).upper() == "PM"
    if is_pm and hours != 12:
        hours += 12
    elif not is_pm and hours == 12:
        hours = 0
    return hours, minutes


def is_biweekly(original_text: str | None) -> bool:
    """True for phrases like "every other tuesday" or "every 2nd friday"."""
    return bool(original_text and _BIWEEKLY.search(original_text))


def _get(data: Mapping[str, Any], camel: str, snake: str) -> Any:
    value = data.get(camel)
    return data.get(snake) if value is None else value


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _in_range(value: Any, low: int, high: int) -> int | None:
    number = _as_int(value)
    if number is None or not low <= number <= high:
        return None
    return number


def _fields(descriptor: RecurrenceDescriptor | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(descriptor, RecurrenceDescriptor):
        return descriptor.model_dump()
    if isinstance(descriptor, Mapping):
        return {
            "frequency": descriptor.get("frequency"),
            "time": descriptor.get("time"),
            "interval": descriptor.get("interval"),
            "day_of_week": _get(descriptor, "dayOfWeek", "day_of_week"),
            "day_of_month": _get(descriptor, "dayOfMonth", "day_of_month"),
            "month_of_year": _get(descriptor, "monthOfYear", "month_of_year"),
            "original_text": _get(descriptor, "originalText", "original_text"),
        }
    return {}


def format_recurrence(descriptor: RecurrenceDescriptor | Mapping[str, Any]) -> str:
    """Render a recurrence descriptor as a uniform display string.

    Accepts a validated :class:`RecurrenceDescriptor` or a raw record as
    stored (camelCase keys), however malformed.

    Examples:
        - Monthly on the 3rd at 6:00 PM
        - Yearly on August 3rd at 6:00 PM
        - Biweekly on Tuesday at 6:00 PM
        - Every 2 hours starting at 2:00 PM
    """
    fields = _fields(descriptor)
    frequency = fields.get("frequency")
    original_text = fields.get("original_text")
    if not isinstance(original_text, str):
        original_text = None
    time_display = format_time_display(fields.get("time"))

    interval = _as_int(fields.get("interval"))
    if interval is None or interval < 1:
        interval = 1

    match str(frequency or "").strip().lower():
        case Frequency.MINUTELY.value:
            unit = "minute" if interval == 1 else "minutes"
            return f"Every {interval} {unit} starting at {time_display}"

        case Frequency.HOURLY.value:
            every = "hour" if interval == 1 else f"{interval} hours"
            return f"Every {every} starting at {time_display}"

        case Frequency.DAILY.value:
            return f"Daily at {time_display}"

        case Frequency.WEEKDAYS.value:
            return f"Weekdays at {time_display}"

        case Frequency.WEEKENDS.value:
            return f"Weekends at {time_display}"

        case Frequency.WEEKLY.value:
            prefix = "Biweekly" if is_biweekly(original_text) else "Weekly"
            day = _in_range(fields.get("day_of_week"), 0, 6)
            if day is None:
                day = find_weekday(original_text)
            if day is not None:
                return f"{prefix} on {DAYS_OF_WEEK[day]} at {time_display}"
            return f"{prefix} at {time_display}"

        case Frequency.MONTHLY.value:
            day_of_month = _in_range(fields.get("day_of_month"), 1, 31)
            if day_of_month:
                suffix = ordinal_suffix(day_of_month)
                return f"Monthly on the {day_of_month}{suffix} at {time_display}"
            return f"Monthly at {time_display}"

        case Frequency.YEARLY.value:
            month = _in_range(fields.get("month_of_year"), 1, 12)
            day_of_month = _in_range(fields.get("day_of_month"), 1, 31)
            if month and day_of_month:
                suffix = ordinal_suffix(day_of_month)
                return (
                    f"Yearly on {MONTHS[month - 1]} {day_of_month}{suffix}"
                    f" at {time_display}"
                )
            return f"Yearly at {time_display}"

        case _:
            if original_text:
                return f"{capitalize_first(original_text)} at {time_display}"
            if frequency:
                return f"{frequency} at {time_display}"
            return f"Repeats at {time_display}"


def describe_pattern(original_text: str, time: str | None = None) -> str:
    """Preview text for a phrase detected while the user is still typing.

    ``describe_pattern("every tue", "18:00")`` -> ``"Every Tuesday at 6:00 PM"``.
    """
    phrase = _DAY_WORD.sub(
        lambda m: DAYS_OF_WEEK[find_weekday(m.group(0)) or 0],
        original_text.lower(),
    )
    text = capitalize_first(phrase)
    if time:
        text += f" at {format_time_display(time)}"
    return text


def format_reminder_date(when: datetime) -> str:
    """Render a one-shot reminder as ``Oct 16, 2026 at 5:00 PM``."""
    return f"{when:%b} {when.day}, {when.year} at {_clock(when.hour, when.minute)}"
