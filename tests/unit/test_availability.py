"""Tests for the weekly availability check."""

from datetime import date

import pytest

from matchmaker.core.schemas import Availability, JobTimeWindow, TimeOfDay
from matchmaker.matching.availability import (
    availability_matches,
    required_time_of_day,
    required_weekday,
)

MONDAY = date(2024, 1, 15)


def _monday_morning() -> Availability:
    return Availability(days={"monday": ["morning"]})


# ---------------------------------------------------------------------------
# required_weekday
# ---------------------------------------------------------------------------
class TestRequiredWeekday:
    def test_iso_date(self) -> None:
        assert required_weekday(JobTimeWindow(date="2024-01-16")) == "tuesday"

    def test_iso_datetime(self) -> None:
        assert required_weekday(JobTimeWindow(date="2024-01-15T09:00:00")) == "monday"

    def test_no_date(self) -> None:
        assert required_weekday(JobTimeWindow()) is None

    def test_unparseable_date(self) -> None:
        assert required_weekday(JobTimeWindow(date="next week sometime")) is None

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("today", "monday"), ("Tomorrow", "tuesday"), (" TODAY ", "monday")],
    )
    def test_relative_dates(self, raw: str, expected: str) -> None:
        assert required_weekday(JobTimeWindow(date=raw), today=MONDAY) == expected

    def test_relative_wraps_week(self) -> None:
        sunday = date(2024, 1, 21)
        assert required_weekday(JobTimeWindow(date="tomorrow"), today=sunday) == "monday"


# ---------------------------------------------------------------------------
# required_time_of_day
# ---------------------------------------------------------------------------
class TestRequiredTimeOfDay:
    def test_explicit_wins(self) -> None:
        window = JobTimeWindow(time="9am", time_of_day="evening")
        assert required_time_of_day(window) is TimeOfDay.EVENING

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("9am", TimeOfDay.MORNING),
            ("early morning", TimeOfDay.MORNING),
            ("Afternoon please", TimeOfDay.AFTERNOON),
            ("7pm", TimeOfDay.EVENING),
            ("late at night", TimeOfDay.EVENING),
        ],
    )
    def test_inferred_from_text(self, text: str, expected: TimeOfDay) -> None:
        assert required_time_of_day(JobTimeWindow(time=text)) is expected

    def test_no_hint(self) -> None:
        assert required_time_of_day(JobTimeWindow(time="14:00")) is None

    def test_nothing_given(self) -> None:
        assert required_time_of_day(JobTimeWindow()) is None


# ---------------------------------------------------------------------------
# availability_matches
# ---------------------------------------------------------------------------
class TestAvailabilityMatches:
    def test_exact_slot_matches(self) -> None:
        window = JobTimeWindow(date="2024-01-15", time_of_day="morning")
        assert availability_matches(_monday_morning(), window) is True

    def test_wrong_weekday(self) -> None:
        window = JobTimeWindow(date="2024-01-16", time_of_day="morning")
        assert availability_matches(_monday_morning(), window) is False

    def test_wrong_slot(self) -> None:
        window = JobTimeWindow(date="2024-01-15", time_of_day="evening")
        assert availability_matches(_monday_morning(), window) is False

    def test_slot_inferred_from_time_text(self) -> None:
        window = JobTimeWindow(date="2024-01-15", time="10am")
        assert availability_matches(_monday_morning(), window) is True

    def test_no_window(self) -> None:
        assert availability_matches(_monday_morning(), None) is True

    def test_no_availability(self) -> None:
        window = JobTimeWindow(date="2024-01-16", time_of_day="evening")
        assert availability_matches(None, window) is True

    def test_window_without_signal(self) -> None:
        window = JobTimeWindow(flexible=True, notes="whenever")
        assert availability_matches(_monday_morning(), window) is True

    def test_weekday_only_does_not_filter(self) -> None:
        assert availability_matches(_monday_morning(), JobTimeWindow(date="2024-01-16")) is True

    def test_slot_only_does_not_filter(self) -> None:
        availability = Availability(days={"friday": ["evening"]})
        assert availability_matches(availability, JobTimeWindow(time_of_day="morning")) is True

    def test_unhinted_time_with_date_does_not_filter(self) -> None:
        window = JobTimeWindow(date="2024-01-16", time="14:00")
        assert availability_matches(_monday_morning(), window) is True

    def test_empty_days_with_full_slot(self) -> None:
        window = JobTimeWindow(date="2024-01-15", time_of_day="morning")
        assert availability_matches(Availability(days={}), window) is False
        assert availability_matches(Availability(short_notice=True), window) is False

    def test_empty_days_with_partial_slot(self) -> None:
        window = JobTimeWindow(date="2024-01-15")
        assert availability_matches(Availability(days={}), window) is True

    def test_relative_date_uses_today(self) -> None:
        window = JobTimeWindow(date="today", time_of_day="morning")
        assert availability_matches(_monday_morning(), window, today=MONDAY) is True
        assert availability_matches(_monday_morning(), window, today=date(2024, 1, 16)) is False
