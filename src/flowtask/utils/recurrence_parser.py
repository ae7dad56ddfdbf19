"""Natural-language date and recurrence extraction.

Turns a free-form task title such as ``"every tuesday at 6pm call mom"`` into
a structured :class:`~flowtask.models.recurrence.ExtractionResult` plus the
title with the recognized phrase removed.

Recurrence patterns are tried first, from an ordered rule table. Only when no
rule matches is the text searched for a one-shot date: a clock time ("at 5",
"6:30pm") is taken out first, everyday day phrases are resolved locally and
the rest goes to ``dateparser``. The reference time is always passed in,
never read from the clock here.
"""

from __future__ import annotations

import calendar
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from dateparser.search import search_dates

from flowtask.models.recurrence import (
    DEFAULT_TIME,
    ExtractionKind,
    ExtractionResult,
    Frequency,
    RecurrenceDescriptor,
)
from flowtask.utils.text import capitalize_first, cut_spans
from flowtask.utils.weekdays import (
    DAYS_OF_WEEK,
    MONTH_NAME,
    MONTHS,
    WEEKDAY_NAME,
    find_weekday,
    month_number,
)

logger = logging.getLogger(__name__)

NUMBER_WORDS: dict[str, str] = {
    "one": "1",
    "two": "2",
    "three": "3",
    "four": "4",
    "five": "5",
    "six": "6",
    "seven": "7",
    "eight": "8",
    "nine": "9",
    "ten": "10",
    "eleven": "11",
    "twelve": "12",
}

_NUMBER_WORD_RE = re.compile(r"\b(" + "|".join(NUMBER_WORDS) + r")\b", re.IGNORECASE)
_COUNT = r"(?P<n>\d+|" + "|".join(NUMBER_WORDS) + r")"
_ORDINAL = r"(\d{1,2})(?:st|nd|rd|th)"

TIME_PATTERN = re.compile(
    r"\b(?:at\s+)?(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?\s*(?P<meridiem>am|pm)?\b",
    re.IGNORECASE,
)

DateSearch = Callable[[str, datetime], tuple[str, datetime] | None]


@dataclass(frozen=True)
class RecurrenceRule:
    """One row of the recurrence table.

    Attributes:
        name: Identifier used in logs and tests
        pattern: Case-insensitive, word-bounded regex
        frequency: Frequency stored on a match
        fields: Pulls extra descriptor fields (interval, day_of_week, ...)
            out of the match
    """

    name: str
    pattern: re.Pattern[str]
    frequency: str
    fields: Callable[[re.Match[str]], dict[str, Any]] | None = None

    def apply(self, match: re.Match[str]) -> dict[str, Any]:
        return self.fields(match) if self.fields else {}


def _count(match: re.Match[str]) -> int:
    raw = match.group("n")
    if raw is None:
        return 1
    value = int(NUMBER_WORDS.get(raw.lower(), raw))
    return max(value, 1)


def _interval(match: re.Match[str]) -> dict[str, Any]:
    return {"interval": _count(match)}


def _day_of_week(match: re.Match[str]) -> dict[str, Any]:
    return {"day_of_week": find_weekday(match.group("day"))}


def _day_of_month(match: re.Match[str]) -> dict[str, Any]:
    for group in match.groups():
        if group and group.isdigit() and 1 <= int(group) <= 31:
            return {"day_of_month": int(group)}
    return {}


def _month_and_day(match: re.Match[str]) -> dict[str, Any]:
    month = match.group("month")
    day = match.group("dom")
    if not month or not day or not 1 <= int(day) <= 31:
        return {}
    return {"month_of_year": month_number(month), "day_of_month": int(day)}


def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


def _build_rules(collapse_weekday_patterns: bool) -> tuple[RecurrenceRule, ...]:
    weekdays_freq = Frequency.DAILY if collapse_weekday_patterns else Frequency.WEEKDAYS
    weekends_freq = Frequency.WEEKLY if collapse_weekday_patterns else Frequency.WEEKENDS
    return (
        RecurrenceRule(
            "biweekly_day",
            _compile(rf"\bevery\s+(?:other|2nd|second)\s+(?P<day>{WEEKDAY_NAME})\b"),
            Frequency.WEEKLY.value,
            _day_of_week,
        ),
        RecurrenceRule(
            "every_n_minutes",
            _compile(rf"\bevery\s+(?:{_COUNT}\s+)?min(?:ute)?s?\b"),
            Frequency.MINUTELY.value,
            _interval,
        ),
        RecurrenceRule(
            "every_n_hours",
            _compile(rf"\bevery\s+(?:{_COUNT}\s+)?(?:hours?|hrs?)\b"),
            Frequency.HOURLY.value,
            _interval,
        ),
        RecurrenceRule(
            "weekdays",
            _compile(r"\b(?:every\s+weekday|weekdays)\b"),
            weekdays_freq.value,
        ),
        RecurrenceRule(
            "weekends",
            _compile(r"\b(?:every\s+weekend|weekends)\b"),
            weekends_freq.value,
        ),
        RecurrenceRule(
            "every_day_name",
            _compile(rf"\bevery\s+(?P<day>{WEEKDAY_NAME})\b"),
            Frequency.WEEKLY.value,
            _day_of_week,
        ),
        RecurrenceRule(
            "monthly",
            _compile(
                rf"\b(?:(?:on\s+)?the\s+{_ORDINAL}\s+(?:day\s+)?(?:of\s+)?every\s+month"
                rf"|every\s+month(?:\s+on\s+the\s+{_ORDINAL})?"
                rf"|monthly(?:\s+on\s+the\s+{_ORDINAL})?)\b"
            ),
            Frequency.MONTHLY.value,
            _day_of_month,
        ),
        RecurrenceRule(
            "daily",
            _compile(r"\b(?:every\s*day|daily)\b"),
            Frequency.DAILY.value,
        ),
        RecurrenceRule(
            "weekly",
            _compile(r"\b(?:every\s+week|weekly)\b"),
            Frequency.WEEKLY.value,
        ),
        RecurrenceRule(
            "yearly",
            _compile(
                rf"\b(?:every\s+year|yearly|annually)"
                rf"(?:\s+on\s+(?P<month>{MONTH_NAME})\s+(?P<dom>\d{{1,2}})(?:st|nd|rd|th)?)?\b"
            ),
            Frequency.YEARLY.value,
            _month_and_day,
        ),
    )


RECURRENCE_RULES = _build_rules(collapse_weekday_patterns=False)
LEGACY_RULES = _build_rules(collapse_weekday_patterns=True)


def rules_for(collapse_weekday_patterns: bool) -> tuple[RecurrenceRule, ...]:
    """Pick the rule table matching the configured weekday handling."""
    return LEGACY_RULES if collapse_weekday_patterns else RECURRENCE_RULES


def match_recurrence(
    text: str, rules: tuple[RecurrenceRule, ...] = RECURRENCE_RULES
) -> tuple[RecurrenceRule, re.Match[str]] | None:
    """Return the first rule (in table order) whose pattern occurs in *text*."""
    for rule in rules:
        match = rule.pattern.search(text)
        if match:
            return rule, match
    return None


def _clock(match: re.Match[str]) -> str | None:
    hours = int(match.group("hour"))
    minutes = int(match.group("minute")) if match.group("minute") else 0
    meridiem = (match.group("meridiem") or "").lower()
    if minutes > 59:
        return None

    if meridiem:
        if not 1 <= hours <= 12:
            return None
        if meridiem == "pm" and hours != 12:
            hours += 12
        elif meridiem == "am" and hours == 12:
            hours = 0
    elif 1 <= hours <= 11:
        hours += 12
    elif hours > 23:
        return None
    return f"{hours:02d}:{minutes:02d}"


def parse_time_of_day(
    text: str,
    exclude: tuple[int, int] | None = None,
    explicit_only: bool = False,
) -> tuple[str, tuple[int, int]] | None:
    """Find the first time-of-day expression in *text*.

    Bare hours 1-11 are read as PM. Candidates overlapping *exclude* (the
    recurrence phrase itself, e.g. the "3" in "every 3 hours") or outside
    the clock range are skipped. With *explicit_only* a bare number only
    counts when written as ``at H``, ``H:MM`` or with am/pm, so "in 3 days"
    is not a time.

    Returns:
        ``("HH:MM", (start, end))`` or None
    """
    for match in TIME_PATTERN.finditer(text):
        start, end = match.start(), match.start() + len(match.group(0).rstrip())
        if exclude and start < exclude[1] and end > exclude[0]:
            continue
        if explicit_only and not (
            match.group(0)[:2].lower() == "at" or match.group("minute") or match.group("meridiem")
        ):
            continue

        value = _clock(match)
        if value is not None:
            return value, (start, end)
    return None


def expand_number_words(text: str) -> tuple[str, list[tuple[int, int, int, int]]]:
    """Replace "one".."twelve" with digits.

    Returns:
        The expanded text and the replacements made, as
        ``(expanded_start, expanded_end, original_start, original_end)``
    """
    pieces: list[str] = []
    replaced: list[tuple[int, int, int, int]] = []
    cursor = 0
    length = 0
    for match in _NUMBER_WORD_RE.finditer(text):
        pieces.append(text[cursor : match.start()])
        length += match.start() - cursor
        digits = NUMBER_WORDS[match.group(1).lower()]
        replaced.append((length, length + len(digits), match.start(), match.end()))
        pieces.append(digits)
        length += len(digits)
        cursor = match.end()
    pieces.append(text[cursor:])
    return "".join(pieces), replaced


def _to_original(pos: int, replaced: list[tuple[int, int, int, int]], is_end: bool) -> int:
    shift = 0
    for exp_start, exp_end, orig_start, orig_end in replaced:
        if pos < exp_start or (is_end and pos == exp_start):
            break
        if pos < exp_end or (is_end and pos == exp_end):
            return orig_end if is_end else orig_start
        shift = orig_end - exp_end
    return pos + shift


DayPhrase = tuple[re.Pattern[str], Callable[[re.Match[str], datetime], datetime | None]]


def _months_ahead(when: datetime, months: int) -> datetime:
    index = when.month - 1 + months
    year, month = when.year + index // 12, index % 12 + 1
    day = min(when.day, calendar.monthrange(year, month)[1])
    return when.replace(year=year, month=month, day=day)


def _in_units(match: re.Match[str], now: datetime) -> datetime:
    count = int(match.group("n"))
    unit = match.group("unit").lower()
    if unit.startswith("week"):
        return now + timedelta(weeks=count)
    if unit.startswith("month"):
        return _months_ahead(now, count)
    return now + timedelta(days=count)


def _weekday_ahead(match: re.Match[str], now: datetime) -> datetime:
    # DAYS_OF_WEEK is Sunday first, datetime.weekday() is Monday first
    target = (find_weekday(match.group("day")) - 1) % 7
    ahead = (target - now.weekday()) % 7
    if ahead == 0 and (match.group("prefix") or "").lower() != "this":
        ahead = 7
    return now + timedelta(days=ahead)


def _day_of_month_ahead(match: re.Match[str], now: datetime) -> datetime | None:
    day = int(match.group("dom"))
    if not 1 <= day <= 31:
        return None
    year, month = now.year, now.month
    if day < now.day:
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    while day > calendar.monthrange(year, month)[1]:
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    return now.replace(year=year, month=month, day=day)


_FULL_DAY_NAME = "|".join(day.lower() for day in DAYS_OF_WEEK)

# Resolved locally, before dateparser. The earliest match in the text wins.
DAY_PHRASES: tuple[DayPhrase, ...] = (
    (_compile(r"\bday\s+after\s+tomorrow\b"), lambda m, now: now + timedelta(days=2)),
    (_compile(r"\btomorrow\b"), lambda m, now: now + timedelta(days=1)),
    (_compile(r"\b(?:today|tonight)\b"), lambda m, now: now),
    (_compile(r"\bin\s+(?P<n>\d+)\s+(?P<unit>days?|weeks?|months?)\b"), _in_units),
    (_compile(r"\bnext\s+week\b"), lambda m, now: now + timedelta(weeks=1)),
    (_compile(r"\bnext\s+month\b"), lambda m, now: _months_ahead(now, 1)),
    (_compile(rf"\b(?:(?P<prefix>next|this|on)\s+)?(?P<day>{_FULL_DAY_NAME})\b"), _weekday_ahead),
    (_compile(r"\b(?:on\s+)?the\s+(?P<dom>\d{1,2})(?:st|nd|rd|th)\b"), _day_of_month_ahead),
)

# Words dateparser happily turns into a date on their own ("may I help",
# "sat exam prep", "march on").
_VAGUE_WORDS = frozenset(
    [month.lower() for month in MONTHS]
    + [month[:3].lower() for month in MONTHS]
    + [day[:3].lower() for day in DAYS_OF_WEEK]
    + ["sept", "tues", "thur", "thurs", "on", "in", "at", "the", "of", "a", "i", "this"]
)
_PAST_WORDS = re.compile(r"\b(?:ago|yesterday|last)\b", re.IGNORECASE)
_YEAR = re.compile(r"\b\d{4}\b")
_MONTH_WORD = _compile(rf"\b(?:{MONTH_NAME})\b")


def match_day_phrase(text: str, now: datetime) -> tuple[str, datetime] | None:
    """Resolve the earliest phrase from :data:`DAY_PHRASES` found in *text*."""
    candidates = []
    for order, (pattern, resolve) in enumerate(DAY_PHRASES):
        for match in pattern.finditer(text):
            candidates.append((match.start(), order, match, resolve))
    for _, _, match, resolve in sorted(candidates, key=lambda c: (c[0], c[1])):
        when = resolve(match, now)
        if when is not None:
            return match.group(0), when
    return None


def _is_vague(matched: str) -> bool:
    stripped = matched.strip()
    if not stripped or stripped.isdigit():
        return True
    if any(ch.isdigit() for ch in stripped):
        return False
    return all(word in _VAGUE_WORDS for word in stripped.lower().split())


def _roll_forward(matched: str, when: datetime, base: datetime) -> datetime:
    if when.date() >= base.date() or _PAST_WORDS.search(matched) or _YEAR.search(matched):
        return when
    if _MONTH_WORD.search(matched):
        return _months_ahead(when, 12)
    return _months_ahead(when, 1)


def search_first_date(text: str, now: datetime) -> tuple[str, datetime] | None:
    """Resolve the first date expression in *text* relative to *now*.

    Everyday phrases ("tomorrow", "in 3 days", "next friday", "on the 15th")
    come from :data:`DAY_PHRASES`; anything else is handed to dateparser.
    Dateparser hits made only of month or weekday words are ignored, and a
    date already past is moved forward by a month (a year when a month was
    named).
    """
    found = match_day_phrase(text, now)
    if found is not None:
        return found

    base = now.replace(tzinfo=None)
    hits = search_dates(
        text,
        languages=["en"],
        settings={
            "RELATIVE_BASE": base,
            "PREFER_DATES_FROM": "future",
            "RETURN_AS_TIMEZONE_AWARE": False,
        },
    )
    for matched, when in hits or []:
        if _is_vague(matched):
            logger.debug("ignoring vague date word %r", matched)
            continue
        when = _roll_forward(matched, when, base)
        if when.tzinfo is None and now.tzinfo is not None:
            when = when.replace(tzinfo=now.tzinfo)
        return matched, when
    return None


def _locate(haystack: str, needle: str) -> int:
    index = haystack.find(needle)
    if index < 0:
        index = haystack.lower().find(needle.lower())
    return index


def _extract_recurrence(
    text: str,
    rules: tuple[RecurrenceRule, ...],
    default_time: str,
) -> ExtractionResult | None:
    found = match_recurrence(text, rules)
    if found is None:
        return None
    rule, match = found
    span = (match.start(), match.end())

    fields = {k: v for k, v in rule.apply(match).items() if v is not None}
    spans = [span]
    time_value = default_time
    time_span = ""
    timed = parse_time_of_day(text, exclude=span)
    if timed:
        time_value, time_range = timed
        spans.append(time_range)
        time_span = text[time_range[0] : time_range[1]]

    recurrence = RecurrenceDescriptor(
        frequency=rule.frequency,
        time=time_value,
        original_text=match.group(0),
        **fields,
    )
    logger.debug("recurrence rule %s matched %r", rule.name, match.group(0))
    return ExtractionResult(
        kind=ExtractionKind.RECURRENCE,
        matched_span=match.group(0),
        time_span=time_span,
        residual_text=capitalize_first(cut_spans(text, spans)),
        recurrence=recurrence,
    )


def _extract_date(text: str, now: datetime, date_search: DateSearch) -> ExtractionResult | None:
    expanded, replaced = expand_number_words(text)

    # The clock time is taken out first so a bare "at 5" is never read as a
    # month or a day.
    timed = parse_time_of_day(expanded, explicit_only=True)
    searchable = expanded
    if timed:
        t_start, t_end = timed[1]
        searchable = expanded[:t_start] + " " * (t_end - t_start) + expanded[t_end:]

    try:
        found = date_search(searchable, now)
    except Exception as e:
        logger.debug("date search failed for %r: %s", text, e)
        return None
    if not found and not timed:
        return None

    spans: list[tuple[int, int]] = []
    span_text = ""
    time_span = ""
    if found:
        matched, when = found
        index = _locate(searchable, matched)
        if index < 0:
            span_text = matched
        else:
            start = _to_original(index, replaced, is_end=False)
            end = _to_original(index + len(matched.rstrip()), replaced, is_end=True)
            spans.append((start, end))
            span_text = text[start:end]

    if timed:
        value, (t_start, t_end) = timed
        hours, minutes = (int(part) for part in value.split(":"))
        start = _to_original(t_start, replaced, is_end=False)
        end = _to_original(t_end, replaced, is_end=True)
        time_span = text[start:end]
        if spans and start < spans[0][1] and end > spans[0][0]:
            spans = [(min(start, spans[0][0]), max(end, spans[0][1]))]
        else:
            spans.append((start, end))

        if found:
            when = when.replace(hour=hours, minute=minutes, second=0, microsecond=0)
        else:
            # a time with no day means the next time the clock shows it
            when = now.replace(hour=hours, minute=minutes, second=0, microsecond=0)
            if when < now:
                when += timedelta(days=1)
            span_text = time_span

    logger.debug("date expression %r resolved to %s", span_text, when.isoformat())
    return ExtractionResult(
        kind=ExtractionKind.ABSOLUTE_DATE,
        matched_span=span_text,
        time_span=time_span,
        residual_text=capitalize_first(cut_spans(text, spans)),
        absolute_date=when,
    )


def extract(
    text: str,
    now: datetime,
    *,
    rules: tuple[RecurrenceRule, ...] = RECURRENCE_RULES,
    date_search: DateSearch = search_first_date,
    default_time: str = DEFAULT_TIME,
) -> ExtractionResult:
    """Extract a recurrence or one-shot date from *text*.

    Args:
        text: Raw task title as typed by the user
        now: Reference time for relative phrases ("tomorrow", "in 3 days")
        rules: Ordered recurrence rule table
        date_search: One-shot date resolver, ``(text, now) -> (span, datetime)``
        default_time: Anchor time when a recurrence names no time of day

    Returns:
        ExtractionResult; kind is ``none`` when nothing was recognized

    Example:
        >>> extract("every tuesday at 6pm call mom", now).recurrence.time
        '18:00'
    """
    if not text or not text.strip():
        return ExtractionResult(residual_text=text or "")

    result = _extract_recurrence(text, rules, default_time)
    if result is None:
        result = _extract_date(text, now, date_search)
    if result is None:
        return ExtractionResult(residual_text=text)
    return result
