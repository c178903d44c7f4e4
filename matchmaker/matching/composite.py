"""Composite text for embeddings.

Jobs and freelancers are embedded into the same vector space, so both
sides serialise their fields in the same fixed order:

  primary text. Skills. Tasks. Availability. Location. Pricing/Budget

Fragments are joined with ". ". Absent fields are skipped, never
replaced by placeholder text.
"""

from matchmaker.core.errors import InvalidJobError
from matchmaker.core.schemas import (
    WEEKDAYS,
    Availability,
    FreelancerLocation,
    FreelancerProfileInput,
    JobLocation,
    JobQuery,
    JobTimeWindow,
    TravelRadius,
)

FRAGMENT_SEPARATOR = ". "

RADIUS_LABELS = {
    TravelRadius.NEARBY.value: "within 2 km",
    TravelRadius.CITY.value: "whole city",
    TravelRadius.CITY_PLUS.value: "city and surroundings",
}


def _primary(text: str) -> str:
    stripped = text.strip() if text else ""
    if not stripped:
        msg = "description must not be empty"
        raise InvalidJobError(msg)
    return stripped


def _time_window_fragment(window: JobTimeWindow | None) -> str | None:
    if window is None:
        return None
    parts: list[str] = []
    if window.date:
        parts.append(f"date: {window.date}")
    if window.start:
        parts.append(f"start: {window.start}")
    if window.end:
        parts.append(f"end: {window.end}")
    if window.time:
        parts.append(f"time: {window.time}")
    if window.time_of_day:
        parts.append(f"time: {window.time_of_day.value}")
    if window.flexible:
        parts.append("flexible timing")
    if window.notes:
        parts.append(f"notes: {window.notes}")
    return f"When: {', '.join(parts)}" if parts else None


def _job_location_fragment(location: JobLocation | None) -> str | None:
    if location is None:
        return None
    parts: list[str] = []
    if location.postcode:
        parts.append(f"postcode {location.postcode}")
    if location.address:
        parts.append(location.address)
    return f"Location: {', '.join(parts)}" if parts else None


def _availability_fragment(availability: Availability | None) -> str | None:
    if availability is None:
        return None
    parts: list[str] = []
    days = availability.days or {}
    for day in WEEKDAYS:
        slots = days.get(day)
        if slots:
            parts.append(f"{day.capitalize()} {', '.join(s.value for s in slots)}")
    if availability.short_notice:
        parts.append("available on short notice")
    return f"Available: {'; '.join(parts)}" if parts else None


def _freelancer_location_fragment(location: FreelancerLocation | None) -> str | None:
    if location is None:
        return None
    parts: list[str] = []
    if location.postcode:
        parts.append(f"postcode {location.postcode}")
    if location.travel_radius:
        label = RADIUS_LABELS.get(location.travel_radius, location.travel_radius)
        parts.append(f"travels {label}")
    return f"Location: {', '.join(parts)}" if parts else None


def _pricing_fragment(profile: FreelancerProfileInput) -> str | None:
    if profile.pricing_style == "hourly" and profile.hourly_rate:
        return f"Pricing: €{profile.hourly_rate:g} per hour"
    if profile.pricing_style == "per_task":
        return "Pricing: per task"
    return None


def _join(fragments: list[str | None]) -> str:
    return FRAGMENT_SEPARATOR.join(f for f in fragments if f)


def build_job_text(query: JobQuery) -> str:
    """Serialise a job into its composite embedding text.

    Raises:
        InvalidJobError: If the description is empty or whitespace.
    """
    return _join([
        _primary(query.description),
        _time_window_fragment(query.time_window),
        _job_location_fragment(query.location),
        f"Budget: {query.budget}" if query.budget else None,
    ])


def build_freelancer_text(profile: FreelancerProfileInput) -> str:
    """Serialise a freelancer profile into its composite embedding text.

    Raises:
        InvalidJobError: If the description is empty or whitespace.
    """
    return _join([
        _primary(profile.description),
        f"Skills: {', '.join(profile.skills)}" if profile.skills else None,
        f"Can help with: {', '.join(profile.example_tasks)}" if profile.example_tasks else None,
        _availability_fragment(profile.availability),
        _freelancer_location_fragment(profile.location),
        _pricing_fragment(profile),
    ])
