"""Recognize and resolve reservation date/time expressions.

Two stages:
1. ``recognize_datetime`` turns free text ("tomorrow evening", "friday at 7")
   into ordered candidate interpretations. Ambiguous input yields several
   candidates ("at 7" is both 7:00 and 19:00).
2. ``resolve_time`` checks the candidates against a date window and a
   time-of-day range and returns the first one that fits.

Candidates are rendered as TIMEX3 strings (``2026-10-20TEV``,
``2026-10-20T19``) and as short natural-language values ("tomorrow
evening", "Friday 7PM") for prompts and confirmations.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

WEEKDAYS: dict[str, int] = {
    "monday": 0,
    "mon": 0,
    "tuesday": 1,
    "tues": 1,
    "tue": 1,
    "wednesday": 2,
    "wed": 2,
    "thursday": 3,
    "thurs": 3,
    "thur": 3,
    "thu": 3,
    "friday": 4,
    "fri": 4,
    "saturday": 5,
    "sat": 5,
    "sunday": 6,
    "sun": 6,
}

MONTHS: dict[str, int] = {
    "january": 1,
    "jan": 1,
    "february": 2,
    "feb": 2,
    "march": 3,
    "mar": 3,
    "april": 4,
    "apr": 4,
    "may": 5,
    "june": 6,
    "jun": 6,
    "july": 7,
    "jul": 7,
    "august": 8,
    "aug": 8,
    "september": 9,
    "sept": 9,
    "sep": 9,
    "october": 10,
    "oct": 10,
    "november": 11,
    "nov": 11,
    "december": 12,
    "dec": 12,
}

NUMBER_WORDS: dict[str, int] = {
    "zero": 0,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
    "thirteen": 13,
    "fourteen": 14,
    "fifteen": 15,
    "sixteen": 16,
    "seventeen": 17,
    "eighteen": 18,
    "nineteen": 19,
    "twenty": 20,
}

# TIMEX part-of-day code -> (start, end, display name)
PARTS_OF_DAY: dict[str, tuple[time, time, str]] = {
    "MO": (time(8), time(12), "morning"),
    "AF": (time(12), time(16), "afternoon"),
    "EV": (time(16), time(20), "evening"),
    "NI": (time(20), time(23, 59), "night"),
}

_PART_WORDS = {"morning": "MO", "afternoon": "AF", "evening": "EV", "night": "NI"}


def _alternation(words: Iterable[str]) -> str:
    return "|".join(sorted(words, key=len, reverse=True))


_MONTH_RE = _alternation(MONTHS)
_WEEKDAY_RE = _alternation(WEEKDAYS)
_NUMBER_RE = _alternation(NUMBER_WORDS)

_ISO_DATE = re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b")
_SLASH_DATE = re.compile(r"\b(\d{1,2})/(\d{1,2})(?:/(\d{2}|\d{4}))?\b")
_MONTH_DAY = re.compile(rf"\b({_MONTH_RE})\.?\s+(\d{{1,2}})(?:st|nd|rd|th)?\b")
_DAY_MONTH = re.compile(rf"\b(\d{{1,2}})(?:st|nd|rd|th)?\s+(?:of\s+)?({_MONTH_RE})\b")
_WEEKDAY = re.compile(rf"\b(?:(this|next)\s+)?({_WEEKDAY_RE})\b")
_IN_DAYS = re.compile(rf"\bin\s+(\d{{1,2}}|{_NUMBER_RE})\s+days?\b")
_RELATIVE_DAY = re.compile(r"\b(day after tomorrow|tomorrow|today|tonight)\b")

_CLOCK_MERIDIEM = re.compile(r"\b(\d{1,2})(?::(\d{2}))?\s*([ap])\.?\s?m\b\.?")
_CLOCK_24 = re.compile(r"\b(\d{1,2}):(\d{2})\b")
_OCLOCK = re.compile(r"\b(\d{1,2})\s*o'?\s?clock\b")
_AT_HOUR = re.compile(r"\b(?:at|around|about)\s+(\d{1,2})\b(?!\s*(?:people|guests|persons?))")
_NOON = re.compile(r"\b(noon|midday|midnight)\b")
_PART_OF_DAY = re.compile(rf"\b({_alternation(_PART_WORDS)})\b")


@dataclass(frozen=True)
class DateTimeCandidate:
    """One interpretation of a date/time expression.

    ``day`` is None for time-only input ("7pm"). ``start``/``end`` are None
    for date-only input. A point in time has ``start == end``; a part of day
    carries its TIMEX code in ``part_of_day``.
    """

    day: date | None = None
    start: time | None = None
    end: time | None = None
    part_of_day: str | None = None

    @property
    def has_time(self) -> bool:
        return self.start is not None

    @property
    def is_range(self) -> bool:
        return self.part_of_day is not None


@dataclass(frozen=True)
class DateTimeResolution:
    """A candidate that satisfied the constraints."""

    value: str
    timex: str
    start: datetime
    end: datetime


@dataclass(frozen=True)
class DateTimeConstraints:
    """Date window (end exclusive) and time-of-day range (end inclusive)."""

    earliest_day: date
    latest_day: date
    earliest_time: time
    latest_time: time

    @classmethod
    def for_window(
        cls,
        today: date,
        days: int,
        start_hour: int,
        end_hour: int,
    ) -> DateTimeConstraints:
        return cls(
            earliest_day=today,
            latest_day=today + timedelta(days=days),
            earliest_time=time(start_hour),
            latest_time=time(end_hour),
        )

    @classmethod
    def next_weeks_evenings(
        cls,
        today: date,
        weeks: int = 2,
        start_hour: int = 16,
        end_hour: int = 20,
    ) -> DateTimeConstraints:
        """Evenings from today through the next ``weeks`` weeks."""
        return cls.for_window(today, weeks * 7, start_hour, end_hour)

    def allows_day(self, day: date) -> bool:
        return self.earliest_day <= day < self.latest_day

    def days(self) -> list[date]:
        span = (self.latest_day - self.earliest_day).days
        return [self.earliest_day + timedelta(days=offset) for offset in range(span)]

    def fit_time(self, candidate: DateTimeCandidate) -> tuple[time, time] | None:
        """Intersect the candidate's time with the allowed range."""
        if candidate.start is None or candidate.end is None:
            return None

        if candidate.is_range:
            if candidate.start < self.latest_time and candidate.end > self.earliest_time:
                return max(candidate.start, self.earliest_time), min(
                    candidate.end, self.latest_time
                )
            return None

        if self.earliest_time <= candidate.start <= self.latest_time:
            return candidate.start, candidate.start
        return None


# =============================================================================
# Recognition
# =============================================================================


def recognize_datetime(text: str, now: datetime) -> list[DateTimeCandidate]:
    """Extract candidate date/time interpretations from free text.

    Args:
        text: User input, any casing
        now: Reference time for relative expressions

    Returns:
        Candidates in the order they should be tried. Empty when the text
        holds no date or time at all.
    """
    remaining = f" {text.lower().strip()} "
    today = now.date()

    dates, remaining, implied_part = _find_dates(remaining, today)
    times, remaining = _find_times(remaining)

    parts = [_PART_WORDS[m.group(1)] for m in _PART_OF_DAY.finditer(remaining)]
    part = parts[0] if parts else implied_part

    if part and times:
        # "tomorrow evening at 7" -> keep the readings that fall in the evening
        part_start, part_end, _ = PARTS_OF_DAY[part]
        inside = [t for t in times if part_start <= t <= part_end]
        times = inside or times
        part = None

    slots: list[tuple[time | None, time | None, str | None]]
    if times:
        slots = [(t, t, None) for t in times]
    elif part:
        part_start, part_end, _ = PARTS_OF_DAY[part]
        slots = [(part_start, part_end, part)]
    else:
        slots = [(None, None, None)]

    if not dates and slots == [(None, None, None)]:
        return []

    return [
        DateTimeCandidate(day=day, start=start, end=end, part_of_day=code)
        for day in (dates or [None])
        for start, end, code in slots
    ]


def _blank(text: str, match: re.Match[str]) -> str:
    start, end = match.span()
    return text[:start] + " " * (end - start) + text[end:]


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _upcoming_year(month: int, day: int, today: date) -> date | None:
    """This year's date, or next year's if it already passed."""
    candidate = _safe_date(today.year, month, day)
    if candidate is not None and candidate < today:
        candidate = _safe_date(today.year + 1, month, day)
    return candidate


def _find_dates(text: str, today: date) -> tuple[list[date], str, str | None]:
    found: list[tuple[int, list[date]]] = []
    implied_part: str | None = None

    for match in list(_RELATIVE_DAY.finditer(text)):
        word = match.group(1)
        offset = {"today": 0, "tonight": 0, "tomorrow": 1, "day after tomorrow": 2}[word]
        if word == "tonight":
            implied_part = "EV"
        found.append((match.start(), [today + timedelta(days=offset)]))
        text = _blank(text, match)

    for match in list(_IN_DAYS.finditer(text)):
        raw = match.group(1)
        count = int(raw) if raw.isdigit() else NUMBER_WORDS[raw]
        found.append((match.start(), [today + timedelta(days=count)]))
        text = _blank(text, match)

    for match in list(_ISO_DATE.finditer(text)):
        parsed = _safe_date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        if parsed:
            found.append((match.start(), [parsed]))
        text = _blank(text, match)

    for match in list(_SLASH_DATE.finditer(text)):
        month, day = int(match.group(1)), int(match.group(2))
        if match.group(3):
            year = int(match.group(3))
            parsed = _safe_date(year + 2000 if year < 100 else year, month, day)
        else:
            parsed = _upcoming_year(month, day, today)
        if parsed:
            found.append((match.start(), [parsed]))
        text = _blank(text, match)

    for pattern, month_group, day_group in ((_MONTH_DAY, 1, 2), (_DAY_MONTH, 2, 1)):
        for match in list(pattern.finditer(text)):
            parsed = _upcoming_year(
                MONTHS[match.group(month_group)], int(match.group(day_group)), today
            )
            if parsed:
                found.append((match.start(), [parsed]))
            text = _blank(text, match)

    for match in list(_WEEKDAY.finditer(text)):
        qualifier, name = match.group(1), match.group(2)
        upcoming = today + timedelta(days=(WEEKDAYS[name] - today.weekday()) % 7)
        if qualifier == "this":
            options = [upcoming]
        elif qualifier == "next":
            options = [upcoming + timedelta(days=7)]
        else:
            options = [upcoming, upcoming + timedelta(days=7)]
        found.append((match.start(), options))
        text = _blank(text, match)

    found.sort(key=lambda item: item[0])
    dates = [day for _, options in found for day in options]
    return dates, text, implied_part


def _ambiguous_hour(hour: int, minute: int = 0) -> list[time]:
    """Readings of an hour given without am/pm."""
    if hour == 12:
        return [time(12, minute)]
    if 1 <= hour <= 11:
        return [time(hour, minute), time(hour + 12, minute)]
    if 13 <= hour <= 23 or hour == 0:
        return [time(hour, minute)]
    return []


def _find_times(text: str) -> tuple[list[time], str]:
    found: list[tuple[int, list[time]]] = []

    for match in list(_CLOCK_MERIDIEM.finditer(text)):
        hour, minute = int(match.group(1)), int(match.group(2) or 0)
        if 1 <= hour <= 12 and minute < 60:
            hour = hour % 12 + (12 if match.group(3) == "p" else 0)
            found.append((match.start(), [time(hour, minute)]))
        text = _blank(text, match)

    for match in list(_CLOCK_24.finditer(text)):
        hour, minute = int(match.group(1)), int(match.group(2))
        if minute < 60:
            found.append((match.start(), _ambiguous_hour(hour, minute)))
        text = _blank(text, match)

    for pattern in (_OCLOCK, _AT_HOUR):
        for match in list(pattern.finditer(text)):
            found.append((match.start(), _ambiguous_hour(int(match.group(1)))))
            text = _blank(text, match)

    for match in list(_NOON.finditer(text)):
        found.append((match.start(), [time(0) if match.group(1) == "midnight" else time(12)]))
        text = _blank(text, match)

    found.sort(key=lambda item: item[0])
    return [t for _, options in found for t in options], text


# =============================================================================
# Resolution
# =============================================================================


def resolve_time(
    candidates: Iterable[DateTimeCandidate],
    constraints: DateTimeConstraints,
    now: datetime,
) -> DateTimeResolution | None:
    """Return the first candidate that satisfies the constraints.

    A slot must carry a time, fall inside the date window and the time
    range, and not be over already. Time-only candidates take the first
    day of the window that works. No disambiguation is attempted between
    several matching candidates.
    """
    for candidate in candidates:
        if not candidate.has_time:
            continue

        window = constraints.fit_time(candidate)
        if window is None:
            continue

        days = [candidate.day] if candidate.day else constraints.days()
        for day in days:
            if not constraints.allows_day(day):
                continue

            start = datetime.combine(day, window[0], tzinfo=now.tzinfo)
            end = datetime.combine(day, window[1], tzinfo=now.tzinfo)
            if end < now:
                continue

            return DateTimeResolution(
                value=to_natural_language(day, candidate, now.date()),
                timex=to_timex(day, candidate),
                start=start,
                end=end,
            )

    return None


def resolve_expressions(
    expressions: Iterable[str],
    constraints: DateTimeConstraints,
    now: datetime,
) -> DateTimeResolution | None:
    """Recognize each expression in turn and resolve the pooled candidates."""
    candidates: list[DateTimeCandidate] = []
    for expression in expressions:
        if isinstance(expression, str) and expression.strip():
            candidates.extend(recognize_datetime(expression, now))
    return resolve_time(candidates, constraints, now)


def to_timex(day: date, candidate: DateTimeCandidate) -> str:
    if candidate.part_of_day:
        return f"{day.isoformat()}T{candidate.part_of_day}"
    assert candidate.start is not None
    if candidate.start.minute:
        return f"{day.isoformat()}T{candidate.start:%H:%M}"
    return f"{day.isoformat()}T{candidate.start:%H}"


def to_natural_language(day: date, candidate: DateTimeCandidate, today: date) -> str:
    return f"{_describe_day(day, today)} {_describe_time(candidate)}"


def _describe_day(day: date, today: date) -> str:
    delta = (day - today).days
    if delta == 0:
        return "today"
    if delta == 1:
        return "tomorrow"
    if 1 < delta < 7:
        return day.strftime("%A")
    return f"{day:%A}, {day:%B} {day.day}"


def _describe_time(candidate: DateTimeCandidate) -> str:
    if candidate.part_of_day:
        return PARTS_OF_DAY[candidate.part_of_day][2]
    assert candidate.start is not None
    hour = candidate.start.hour % 12 or 12
    suffix = "PM" if candidate.start.hour >= 12 else "AM"
    if candidate.start.minute:
        return f"{hour}:{candidate.start.minute:02d}{suffix}"
    return f"{hour}{suffix}"
