"""Weekday and month vocabulary shared by parsing and display code."""

from __future__ import annotations

import re

DAYS_OF_WEEK = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]

MONTHS = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

# Regex alternation for a weekday name or its common abbreviation.
WEEKDAY_NAME = (
    r"sun(?:day)?|mon(?:day)?|tue(?:s(?:day)?)?|wed(?:nesday)?"
    r"|thu(?:rs(?:day)?)?|fri(?:day)?|sat(?:urday)?"
)

# Regex alternation for a month name or its common abbreviation.
MONTH_NAME = (
    r"jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?"
    r"|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?"
)

# Sunday first, so "sun" is tried before anything else.
WEEKDAY_PATTERNS: list[tuple[re.Pattern[str], int]] = [
    (re.compile(r"\bsun(?:day)?\b", re.IGNORECASE), 0),
    (re.compile(r"\bmon(?:day)?\b", re.IGNORECASE), 1),
    (re.compile(r"\btue(?:s|sday)?\b", re.IGNORECASE), 2),
    (re.compile(r"\bwed(?:nesday)?\b", re.IGNORECASE), 3),
    (re.compile(r"\bthu(?:rs|rsday)?\b", re.IGNORECASE), 4),
    (re.compile(r"\bfri(?:day)?\b", re.IGNORECASE), 5),
    (re.compile(r"\bsat(?:urday)?\b", re.IGNORECASE), 6),
]


def find_weekday(text: str | None) -> int | None:
    """Return the first weekday (Sunday=0) named in *text*, or None."""
    if not text:
        return None
    for pattern, day in WEEKDAY_PATTERNS:
        if pattern.search(text):
            return day
    return None


def month_number(name: str) -> int | None:
    """Map a month name or abbreviation to 1-12."""
    prefix = name.strip().lower()[:3]
    for index, month in enumerate(MONTHS, start=1):
        if month.lower().startswith(prefix) and len(prefix) == 3:
            return index
    return None
