"""Tests for date/time recognition and resolution."""

from __future__ import annotations

from datetime import date, datetime, time

import pytest

from contoso_cafe.core.datetime_resolver import (
    DateTimeCandidate,
    DateTimeConstraints,
    recognize_datetime,
    resolve_expressions,
    resolve_time,
)
from tests.helpers import FIXED_NOW, TZ


@pytest.fixture
def constraints() -> DateTimeConstraints:
    return DateTimeConstraints.next_weeks_evenings(FIXED_NOW.date())


def resolve(text: str, constraints: DateTimeConstraints, now: datetime = FIXED_NOW):
    return resolve_time(recognize_datetime(text, now), constraints, now)


class TestConstraints:
    """Tests for the booking window."""

    def test_next_weeks_evenings_defaults(self) -> None:
        """Two weeks of evenings starting today."""
        c = DateTimeConstraints.next_weeks_evenings(date(2026, 10, 19))

        assert c.earliest_day == date(2026, 10, 19)
        assert c.latest_day == date(2026, 11, 2)
        assert c.earliest_time == time(16)
        assert c.latest_time == time(20)

    def test_window_end_is_exclusive(self, constraints: DateTimeConstraints) -> None:
        assert constraints.allows_day(date(2026, 11, 1))
        assert not constraints.allows_day(date(2026, 11, 2))
        assert not constraints.allows_day(date(2026, 10, 18))

    def test_for_window_matches_settings_shape(self) -> None:
        c = DateTimeConstraints.for_window(date(2026, 10, 19), days=7, start_hour=17, end_hour=21)

        assert len(c.days()) == 7
        assert c.earliest_time == time(17)
        assert c.latest_time == time(21)

    def test_point_time_bounds_are_inclusive(self, constraints: DateTimeConstraints) -> None:
        assert constraints.fit_time(DateTimeCandidate(start=time(16), end=time(16)))
        assert constraints.fit_time(DateTimeCandidate(start=time(20), end=time(20)))
        assert constraints.fit_time(DateTimeCandidate(start=time(20, 30), end=time(20, 30))) is None


class TestRecognize:
    """Tests for candidate extraction."""

    def test_no_date_or_time(self) -> None:
        assert recognize_datetime("hello there", FIXED_NOW) == []

    def test_ambiguous_hour_yields_both_readings(self) -> None:
        candidates = recognize_datetime("tomorrow at 7", FIXED_NOW)

        assert [c.start for c in candidates] == [time(7), time(19)]
        assert all(c.day == date(2026, 10, 20) for c in candidates)

    def test_part_of_day_narrows_ambiguous_hour(self) -> None:
        candidates = recognize_datetime("tomorrow evening at 7", FIXED_NOW)

        assert len(candidates) == 1
        assert candidates[0].start == time(19)
        assert not candidates[0].is_range

    def test_bare_weekday_yields_two_weeks(self) -> None:
        candidates = recognize_datetime("friday evening", FIXED_NOW)

        assert [c.day for c in candidates] == [date(2026, 10, 23), date(2026, 10, 30)]

    def test_date_only_has_no_time(self) -> None:
        candidates = recognize_datetime("tomorrow", FIXED_NOW)

        assert len(candidates) == 1
        assert not candidates[0].has_time


class TestResolve:
    """Tests for resolving candidates against the booking window."""

    def test_tomorrow_evening(self, constraints: DateTimeConstraints) -> None:
        resolution = resolve("tomorrow evening", constraints)

        assert resolution is not None
        assert resolution.timex == "2026-10-20TEV"
        assert resolution.value == "tomorrow evening"
        assert resolution.start == datetime(2026, 10, 20, 16, 0, tzinfo=TZ)
        assert resolution.end == datetime(2026, 10, 20, 20, 0, tzinfo=TZ)

    def test_first_valid_reading_wins(self, constraints: DateTimeConstraints) -> None:
        """'at 7' resolves to 7PM because 7AM is outside the evening."""
        resolution = resolve("tomorrow at 7", constraints)

        assert resolution is not None
        assert resolution.timex == "2026-10-20T19"
        assert resolution.value == "tomorrow 7PM"

    def test_minutes_in_timex(self, constraints: DateTimeConstraints) -> None:
        resolution = resolve("tomorrow 7:30pm", constraints)

        assert resolution is not None
        assert resolution.timex == "2026-10-20T19:30"
        assert resolution.value == "tomorrow 7:30PM"

    def test_tonight_is_today_evening(self, constraints: DateTimeConstraints) -> None:
        resolution = resolve("tonight", constraints)

        assert resolution is not None
        assert resolution.timex == "2026-10-19TEV"
        assert resolution.value == "today evening"

    def test_time_only_uses_first_open_day(self, constraints: DateTimeConstraints) -> None:
        resolution = resolve("7pm", constraints)

        assert resolution is not None
        assert resolution.timex == "2026-10-19T19"

    def test_time_only_skips_past_slot_today(self, constraints: DateTimeConstraints) -> None:
        evening = datetime(2026, 10, 19, 19, 30, tzinfo=TZ)

        resolution = resolve("5pm", constraints, now=evening)

        assert resolution is not None
        assert resolution.timex == "2026-10-20T17"
        assert resolution.value == "tomorrow 5PM"

    def test_past_slot_rejected(self, constraints: DateTimeConstraints) -> None:
        evening = datetime(2026, 10, 19, 19, 30, tzinfo=TZ)

        assert resolve("today at 6pm", constraints, now=evening) is None

    def test_evening_still_open_late_in_the_day(self, constraints: DateTimeConstraints) -> None:
        evening = datetime(2026, 10, 19, 19, 30, tzinfo=TZ)

        resolution = resolve("tonight", constraints, now=evening)

        assert resolution is not None
        assert resolution.timex == "2026-10-19TEV"

    @pytest.mark.parametrize(
        "text",
        [
            "tomorrow",
            "tomorrow morning",
            "tomorrow night",
            "noon tomorrow",
            "tomorrow at 8:30pm",
            "2026-11-02 at 7pm",
            "in 20 days at 7pm",
        ],
    )
    def test_outside_window_or_time_range(
        self, text: str, constraints: DateTimeConstraints
    ) -> None:
        assert resolve(text, constraints) is None

    def test_last_day_of_window(self, constraints: DateTimeConstraints) -> None:
        resolution = resolve("2026-11-01 at 7pm", constraints)

        assert resolution is not None
        assert resolution.timex == "2026-11-01T19"

    def test_weekday_names(self, constraints: DateTimeConstraints) -> None:
        this_week = resolve("friday at 7pm", constraints)
        next_week = resolve("next friday at 7pm", constraints)

        assert this_week is not None and this_week.timex == "2026-10-23T19"
        assert this_week.value == "Friday 7PM"
        assert next_week is not None and next_week.timex == "2026-10-30T19"
        assert next_week.value == "Friday, October 30 7PM"

    def test_calendar_dates(self, constraints: DateTimeConstraints) -> None:
        slash = resolve("10/25 at 6pm", constraints)
        month_name = resolve("October 21 at 5pm", constraints)

        assert slash is not None and slash.timex == "2026-10-25T18"
        assert month_name is not None and month_name.timex == "2026-10-21T17"

    def test_relative_days(self, constraints: DateTimeConstraints) -> None:
        resolution = resolve("in three days at 7pm", constraints)

        assert resolution is not None
        assert resolution.timex == "2026-10-22T19"
        assert resolution.value == "Thursday 7PM"

    def test_resolve_expressions_pools_candidates(
        self, constraints: DateTimeConstraints
    ) -> None:
        resolution = resolve_expressions(
            ["sometime soon", "tomorrow morning", "tomorrow at 6pm"],
            constraints,
            FIXED_NOW,
        )

        assert resolution is not None
        assert resolution.timex == "2026-10-20T18"
