"""Core data models for the matching service.

Job and freelancer payloads arrive as loose JSON (database columns, YAML
files, CLI flags). They are validated here once so the matchers and the
ranker only ever see typed objects.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class TimeOfDay(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


class TravelRadius(str, Enum):
    NEARBY = "nearby"
    CITY = "city"
    CITY_PLUS = "city_plus"


def _as_text(v: Any) -> Any:
    """YAML turns postcodes into ints and dates into date objects; keep them as text."""
    if v is None or isinstance(v, str):
        return v
    if isinstance(v, (date, datetime)):
        return v.isoformat()
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


class _Payload(BaseModel):
    """Frozen model that accepts both snake_case and camelCase keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


# ---------------------------------------------------------------------------
# Job side
# ---------------------------------------------------------------------------


class JobTimeWindow(_Payload):
    """When the client wants the job done."""

    date: str | None = None
    start: str | None = None
    end: str | None = None
    time: str | None = None
    time_of_day: TimeOfDay | None = Field(default=None, alias="timeOfDay")
    flexible: bool = False
    notes: str | None = None

    @field_validator("date", "start", "end", "time", "notes", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _as_text(v)

    @field_validator("time_of_day", mode="before")
    @classmethod
    def lowercase_time_of_day(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v


class JobLocation(_Payload):
    """Where the job takes place."""

    postcode: str | None = None
    address: str | None = None

    @field_validator("postcode", "address", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _as_text(v)


class JobQuery(_Payload):
    """Ad-hoc matching request. Never persisted on its own."""

    description: str
    time_window: JobTimeWindow | None = Field(default=None, alias="timeWindow")
    location: JobLocation | None = None
    budget: str | None = None

    @field_validator("description")
    @classmethod
    def description_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = "description must not be empty"
            raise ValueError(msg)
        return v.strip()

    @field_validator("budget", mode="before")
    @classmethod
    def coerce_budget(cls, v: Any) -> Any:
        v = _as_text(v)
        if isinstance(v, str):
            return v.strip() or None
        return v


class JobRequest(_Payload):
    """A persisted job request row."""

    id: str
    client_profile_id: str
    description: str
    time_window: JobTimeWindow | None = None
    location: JobLocation | None = None
    budget: str | None = None
    status: str = "open"
    embedding: list[float] | None = None
    created_at: datetime = Field(default_factory=datetime.now)

    def to_query(self) -> JobQuery:
        return JobQuery(
            description=self.description,
            time_window=self.time_window,
            location=self.location,
            budget=self.budget,
        )


# ---------------------------------------------------------------------------
# Freelancer side
# ---------------------------------------------------------------------------


class Availability(_Payload):
    """Recurring weekly availability."""

    days: dict[str, list[TimeOfDay]] | None = None
    short_notice: bool = Field(default=False, alias="shortNotice")

    @field_validator("days", mode="before")
    @classmethod
    def normalise_days(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        days: dict[str, Any] = {}
        for day, slots in v.items():
            key = str(day).strip().lower()
            if key not in WEEKDAYS:
                msg = f"unknown weekday '{day}'"
                raise ValueError(msg)
            if isinstance(slots, list):
                slots = [s.strip().lower() if isinstance(s, str) else s for s in slots]
            days[key] = slots or []
        return days


class FreelancerLocation(_Payload):
    """Home postcode plus how far the freelancer is willing to travel.

    travel_radius stays free text: an unrecognised value is kept and
    fails open in the location matcher.
    """

    postcode: str | None = None
    travel_radius: str | None = Field(default=None, alias="travelRadius")

    @field_validator("postcode", "travel_radius", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _as_text(v)


class FreelancerProfileInput(_Payload):
    """Fields a freelancer submits when creating or updating a profile."""

    profile_id: str
    description: str
    skills: list[str] = Field(default_factory=list)
    example_tasks: list[str] = Field(default_factory=list, alias="exampleTasks")
    availability: Availability | None = None
    location: FreelancerLocation | None = None
    pricing_style: Literal["hourly", "per_task"] | None = Field(
        default=None, alias="pricingStyle"
    )
    hourly_rate: float | None = Field(default=None, ge=0.0, alias="hourlyRate")
    is_active: bool = Field(default=True, alias="isActive")

    @field_validator("description")
    @classmethod
    def description_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = "description must not be empty"
            raise ValueError(msg)
        return v.strip()


class FreelancerProfile(FreelancerProfileInput):
    """A persisted freelancer profile row."""

    id: str
    headline: str | None = None
    embedding: list[float] | None = None
    updated_at: datetime = Field(default_factory=datetime.now)


class FreelancerAttributes(_Payload):
    """Availability and location of one candidate, fetched in a batch."""

    availability: Availability | None = None
    location: FreelancerLocation | None = None


class DisplayProfile(_Payload):
    """Public display fields of a user profile."""

    id: str
    full_name: str | None = None
    profile_photo: str | None = None


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


class SearchHit(_Payload):
    """One row returned by the vector-similarity search."""

    id: str
    profile_id: str | None = None
    similarity: float
    headline: str | None = None
    skills: list[str] = Field(default_factory=list)
    description: str = ""


class ScoredMatch(_Payload):
    """Pairs a frozen SearchHit with its match flags and relevance score."""

    hit: SearchHit
    availability_match: bool
    location_match: bool
    relevance_score: float
    location: FreelancerLocation | None = None


class MatchResult(_Payload):
    """What callers of the ranker get back."""

    freelancer_profile_id: str
    headline: str | None = None
    skills: list[str] = Field(default_factory=list)
    similarity: float
    relevance_score: float
    explanation: str
    has_exact_availability_match: bool
    has_location_match: bool
    profile_photo: str | None = None
    full_name: str | None = None
    location: FreelancerLocation | None = None
