"""Tests for boundary validation of job and freelancer payloads."""

from datetime import date

import pytest
from pydantic import ValidationError

from matchmaker.core.schemas import (
    Availability,
    FreelancerLocation,
    FreelancerProfileInput,
    JobLocation,
    JobQuery,
    JobRequest,
    JobTimeWindow,
    SearchHit,
    TimeOfDay,
)


class TestJobQuery:
    def test_description_stripped(self) -> None:
        q = JobQuery(description="  Fix my tap  ")
        assert q.description == "Fix my tap"

    @pytest.mark.parametrize("description", ["", "   ", "\n\t"])
    def test_empty_description_rejected(self, description: str) -> None:
        with pytest.raises(ValidationError, match="description must not be empty"):
            JobQuery(description=description)

    def test_camel_case_aliases(self) -> None:
        q = JobQuery.model_validate({
            "description": "Paint a wall",
            "timeWindow": {"date": "2024-01-15", "timeOfDay": "Morning"},
        })
        assert q.time_window is not None
        assert q.time_window.time_of_day is TimeOfDay.MORNING

    def test_empty_budget_is_none(self) -> None:
        assert JobQuery(description="x", budget="  ").budget is None

    def test_frozen(self) -> None:
        q = JobQuery(description="x")
        with pytest.raises(ValidationError):
            q.description = "y"  # type: ignore[misc]


class TestJobTimeWindow:
    def test_yaml_date_object_becomes_text(self) -> None:
        w = JobTimeWindow.model_validate({"date": date(2024, 1, 15)})
        assert w.date == "2024-01-15"

    def test_unknown_time_of_day_rejected(self) -> None:
        with pytest.raises(ValidationError):
            JobTimeWindow(time_of_day="midnight")  # type: ignore[arg-type]

    def test_blank_time_of_day_is_none(self) -> None:
        assert JobTimeWindow.model_validate({"timeOfDay": " "}).time_of_day is None


class TestLocations:
    def test_numeric_postcode_becomes_text(self) -> None:
        assert JobLocation.model_validate({"postcode": 1312}).postcode == "1312"
        assert FreelancerLocation.model_validate({"postcode": 1312}).postcode == "1312"

    def test_unknown_travel_radius_kept(self) -> None:
        loc = FreelancerLocation.model_validate({"travelRadius": "anywhere"})
        assert loc.travel_radius == "anywhere"


class TestAvailability:
    def test_days_normalised(self) -> None:
        a = Availability.model_validate({
            "days": {"Monday": ["Morning", "evening"], "friday": None},
            "shortNotice": True,
        })
        assert a.days == {
            "monday": [TimeOfDay.MORNING, TimeOfDay.EVENING],
            "friday": [],
        }
        assert a.short_notice is True

    def test_unknown_weekday_rejected(self) -> None:
        with pytest.raises(ValidationError, match="unknown weekday"):
            Availability.model_validate({"days": {"funday": ["morning"]}})

    def test_unknown_slot_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Availability.model_validate({"days": {"monday": ["brunch"]}})


class TestFreelancerProfileInput:
    def test_minimal(self) -> None:
        p = FreelancerProfileInput(profile_id="p1", description="Gardener")
        assert p.skills == []
        assert p.is_active is True
        assert p.pricing_style is None

    def test_empty_description_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FreelancerProfileInput(profile_id="p1", description=" ")

    def test_invalid_pricing_style(self) -> None:
        with pytest.raises(ValidationError):
            FreelancerProfileInput.model_validate(
                {"profile_id": "p1", "description": "x", "pricingStyle": "daily"}
            )

    def test_negative_rate_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FreelancerProfileInput(profile_id="p1", description="x", hourly_rate=-1)


class TestJobRequest:
    def test_to_query(self) -> None:
        job = JobRequest(
            id="j1",
            client_profile_id="c1",
            description="Mow the lawn",
            location=JobLocation(postcode="1312AB"),
            budget="€40",
        )
        q = job.to_query()
        assert q.description == "Mow the lawn"
        assert q.location == JobLocation(postcode="1312AB")
        assert q.time_window is None
        assert q.budget == "€40"


class TestSearchHit:
    def test_defaults(self) -> None:
        hit = SearchHit(id="f1", similarity=0.5)
        assert hit.skills == []
        assert hit.description == ""
        assert hit.profile_id is None
