"""Field validators for the reservation dialog.

Validators are pure functions: they take the user's reply (or a list of
seeded entity values) and return a ``ValidationResult``. They never raise;
anything unusable comes back as ``NOT_RECOGNIZED``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from contoso_cafe.core.datetime_resolver import (
    NUMBER_WORDS,
    DateTimeConstraints,
    recognize_datetime,
    resolve_expressions,
    resolve_time,
)

YES_WORDS = frozenset(
    {"yes", "y", "yeah", "yep", "yup", "sure", "ok", "okay", "confirm", "go ahead", "please do", "yes please"}
)
NO_WORDS = frozenset({"no", "n", "nope", "nah", "no thanks", "don't", "do not", "negative"})

_INTEGER = re.compile(r"-?\d+")
_WORD = re.compile(r"[a-z']+")
_TRAILING_PUNCTUATION = re.compile(r"[\s.!?,]+$")


class PromptStatus(str, Enum):
    RECOGNIZED = "recognized"
    NOT_RECOGNIZED = "not_recognized"
    TOO_SMALL = "too_small"
    TOO_BIG = "too_big"


@dataclass(frozen=True)
class ValidationResult:
    status: PromptStatus
    value: Any = None

    @property
    def succeeded(self) -> bool:
        return self.status is PromptStatus.RECOGNIZED

    @classmethod
    def ok(cls, value: Any) -> ValidationResult:
        return cls(PromptStatus.RECOGNIZED, value)

    @classmethod
    def not_recognized(cls) -> ValidationResult:
        return cls(PromptStatus.NOT_RECOGNIZED)


# =============================================================================
# Prompt validators
# =============================================================================


def validate_location(text: str | None, locations: Sequence[str]) -> ValidationResult:
    """Match a reply against the allowed locations.

    Accepts the location name in any casing, its 1-based position in the
    choice list, or a sentence naming exactly one location. The canonical
    spelling from ``locations`` is returned.
    """
    reply = (text or "").strip().lower()
    if not reply:
        return ValidationResult.not_recognized()

    for location in locations:
        if reply == location.lower():
            return ValidationResult.ok(location)

    if reply.isdecimal() and reply.isascii():
        index = int(reply)
        if 1 <= index <= len(locations):
            return ValidationResult.ok(locations[index - 1])
        return ValidationResult.not_recognized()

    named = [
        location
        for location in locations
        if re.search(rf"\b{re.escape(location.lower())}\b", reply)
    ]
    if len(named) == 1:
        return ValidationResult.ok(named[0])

    return ValidationResult.not_recognized()


def validate_date_time(
    text: str | None,
    constraints: DateTimeConstraints,
    now: datetime,
) -> ValidationResult:
    """Resolve a reply to an allowed reservation slot.

    The value is a ``DateTimeResolution`` for the first candidate that fits.
    """
    if not text or not text.strip():
        return ValidationResult.not_recognized()

    resolution = resolve_time(recognize_datetime(text, now), constraints, now)
    if resolution is None:
        return ValidationResult.not_recognized()
    return ValidationResult.ok(resolution)


def validate_date_candidates(
    expressions: Iterable[str],
    constraints: DateTimeConstraints,
    now: datetime,
) -> ValidationResult:
    """Resolve several date/time expressions as one candidate list."""
    resolution = resolve_expressions(expressions, constraints, now)
    if resolution is None:
        return ValidationResult.not_recognized()
    return ValidationResult.ok(resolution)


def parse_number(text: str | None) -> int | None:
    """First integer in the text, written as digits or as an English word."""
    if not text:
        return None

    reply = text.lower()
    digits = _INTEGER.search(reply)
    if digits:
        return int(digits.group())

    for word in _WORD.findall(reply):
        if word in NUMBER_WORDS:
            return NUMBER_WORDS[word]
    return None


def validate_guests(text: str | None, minimum: int = 1, maximum: int = 12) -> ValidationResult:
    """Check the party size is within ``[minimum, maximum]``."""
    count = parse_number(text)
    if count is None:
        return ValidationResult.not_recognized()
    if count < minimum:
        return ValidationResult(PromptStatus.TOO_SMALL, count)
    if count > maximum:
        return ValidationResult(PromptStatus.TOO_BIG, count)
    return ValidationResult.ok(count)


def validate_name(text: str | None) -> ValidationResult:
    name = (text or "").strip()
    if not name:
        return ValidationResult.not_recognized()
    return ValidationResult.ok(name)


def validate_confirmation(text: str | None) -> ValidationResult:
    """Interpret a yes/no reply. The value is a bool."""
    reply = _TRAILING_PUNCTUATION.sub("", (text or "").strip().lower())
    if not reply:
        return ValidationResult.not_recognized()

    if reply in YES_WORDS:
        return ValidationResult.ok(True)
    if reply in NO_WORDS:
        return ValidationResult.ok(False)

    first = reply.split()[0].strip(",.!")
    if first in YES_WORDS:
        return ValidationResult.ok(True)
    if first in NO_WORDS:
        return ValidationResult.ok(False)

    return ValidationResult.not_recognized()


# =============================================================================
# Seed validators (entities found by the recognizer)
# =============================================================================


def validate_seeded_location(
    seeds: Iterable[Any], locations: Sequence[str]
) -> ValidationResult:
    """First seed that names an allowed location."""
    for seed in seeds:
        if isinstance(seed, str):
            result = validate_location(seed, locations)
            if result.succeeded:
                return result
    return ValidationResult.not_recognized()


def validate_seeded_guests(
    seeds: Iterable[Any], minimum: int = 1, maximum: int = 12
) -> ValidationResult:
    """First seed that is a party size within range."""
    for seed in seeds:
        count = seed if isinstance(seed, int) and not isinstance(seed, bool) else parse_number(str(seed))
        if count is not None and minimum <= count <= maximum:
            return ValidationResult.ok(count)
    return ValidationResult.not_recognized()


def validate_seeded_name(seeds: Iterable[Any]) -> ValidationResult:
    """First non-blank name, trimmed."""
    for seed in seeds:
        if isinstance(seed, str) and seed.strip():
            return ValidationResult.ok(seed.strip())
    return ValidationResult.not_recognized()
