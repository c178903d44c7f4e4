"""Recurring weekly availability check.

Compares the weekday and time-of-day a client asked for against the
freelancer's weekly pattern. Not a calendar: no specific dates beyond the
weekday, no timezones. Missing information on either side never excludes
a freelancer.
"""

import logging
from datetime import date, datetime, timedelta

from matchmaker.core.schemas import WEEKDAYS, Availability, JobTimeWindow, TimeOfDay

logger = logging.getLogger(__name__)

# Checked in order; the first hit wins.
_TIME_HINTS: list[tuple[tuple[str, ...], TimeOfDay]] = [
    (("morning", "am"), TimeOfDay.MORNING),
    (("afternoon",), TimeOfDay.AFTERNOON),
    (("evening", "pm", "night"), TimeOfDay.EVENING),
]

_RELATIVE_DAYS = {"today": 0, "tomorrow": 1}


def required_weekday(window: JobTimeWindow, today: date | None = None) -> str | None:
    """Weekday name for the job's date, or None if it can't be derived."""
    if not window.date:
        return None
    raw = window.date.strip()

    offset = _RELATIVE_DAYS.get(raw.lower())
    if offset is not None:
        day = (today or date.today()) + timedelta(days=offset)
        return WEEKDAYS[day.weekday()]

    try:
        parsed = datetime.fromisoformat(raw).date()
    except ValueError:
        logger.debug("Unparseable job date '%s' - no weekday filter", window.date)
        return None
    return WEEKDAYS[parsed.weekday()]


def required_time_of_day(window: JobTimeWindow) -> TimeOfDay | None:
    """Explicit time_of_day, else inferred from the free-text time."""
    if window.time_of_day is not None:
        return window.time_of_day
    if not window.time:
        return None
    text = window.time.lower()
    for hints, slot in _TIME_HINTS:
        if any(h in text for h in hints):
            return slot
    return None


def availability_matches(
    availability: Availability | None,
    window: JobTimeWindow | None,
    today: date | None = None,
) -> bool:
    """Return True if the freelancer's weekly pattern covers the job's slot.

    Only a job with both a weekday and a time of day is checked; a job
    missing either one matches every freelancer.

    today resolves relative dates ("today", "tomorrow"); defaults to the
    current local date.
    """
    if availability is None or window is None:
        return True

    weekday = required_weekday(window, today)
    slot = required_time_of_day(window)
    if weekday is None or slot is None:
        return True

    days = availability.days
    if not days:
        return False
    return slot in days.get(weekday, [])
