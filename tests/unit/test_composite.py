"""Tests for composite embedding text of jobs and freelancers."""

import pytest

from matchmaker.core.errors import InvalidJobError
from matchmaker.core.schemas import FreelancerProfileInput, JobQuery
from matchmaker.matching.composite import build_freelancer_text, build_job_text


def _freelancer(**overrides: object) -> FreelancerProfileInput:
    defaults: dict[str, object] = {
        "profile_id": "p1",
        "description": "Experienced handyman",
    }
    defaults.update(overrides)
    return FreelancerProfileInput.model_validate(defaults)


# ---------------------------------------------------------------------------
# Job text
# ---------------------------------------------------------------------------
class TestBuildJobText:
    def test_description_only(self) -> None:
        assert build_job_text(JobQuery(description="  Fix my tap ")) == "Fix my tap"

    def test_full_job(self) -> None:
        query = JobQuery.model_validate({
            "description": "Fix my tap",
            "time_window": {
                "date": "2024-01-15",
                "start": "09:00",
                "end": "11:00",
                "time": "9am",
                "timeOfDay": "morning",
                "flexible": True,
                "notes": "ring twice",
            },
            "location": {"postcode": "1312AB", "address": "Main St 1"},
            "budget": "€50",
        })
        assert build_job_text(query) == (
            "Fix my tap. "
            "When: date: 2024-01-15, start: 09:00, end: 11:00, time: 9am, "
            "time: morning, flexible timing, notes: ring twice. "
            "Location: postcode 1312AB, Main St 1. "
            "Budget: €50"
        )

    def test_absent_subfields_skipped(self) -> None:
        query = JobQuery.model_validate({
            "description": "Fix my tap",
            "time_window": {"flexible": False},
            "location": {"address": "Main St 1"},
        })
        assert build_job_text(query) == "Fix my tap. Location: Main St 1"

    def test_empty_description_raises(self) -> None:
        query = JobQuery.model_construct(description="   ")
        with pytest.raises(InvalidJobError, match="description must not be empty"):
            build_job_text(query)


# ---------------------------------------------------------------------------
# Freelancer text
# ---------------------------------------------------------------------------
class TestBuildFreelancerText:
    def test_description_only(self) -> None:
        assert build_freelancer_text(_freelancer()) == "Experienced handyman"

    def test_full_profile_in_fixed_order(self) -> None:
        profile = _freelancer(
            skills=["plumbing", "tiling"],
            example_tasks=["fix a tap", "retile a bathroom"],
            availability={
                "days": {"friday": ["evening"], "monday": ["morning", "afternoon"]},
                "shortNotice": True,
            },
            location={"postcode": "1312AB", "travelRadius": "nearby"},
            pricing_style="hourly",
            hourly_rate=35,
        )
        assert build_freelancer_text(profile) == (
            "Experienced handyman. "
            "Skills: plumbing, tiling. "
            "Can help with: fix a tap, retile a bathroom. "
            "Available: Monday morning, afternoon; Friday evening; available on short notice. "
            "Location: postcode 1312AB, travels within 2 km. "
            "Pricing: €35 per hour"
        )

    def test_empty_days_skipped(self) -> None:
        profile = _freelancer(availability={"days": {"monday": []}})
        assert build_freelancer_text(profile) == "Experienced handyman"

    @pytest.mark.parametrize(
        ("radius", "label"),
        [
            ("city", "travels whole city"),
            ("city_plus", "travels city and surroundings"),
            ("boat", "travels boat"),
        ],
    )
    def test_radius_labels(self, radius: str, label: str) -> None:
        profile = _freelancer(location={"travelRadius": radius})
        assert build_freelancer_text(profile) == f"Experienced handyman. Location: {label}"

    def test_per_task_pricing(self) -> None:
        profile = _freelancer(pricing_style="per_task")
        assert build_freelancer_text(profile).endswith("Pricing: per task")

    def test_hourly_without_rate_skipped(self) -> None:
        profile = _freelancer(pricing_style="hourly")
        assert "Pricing" not in build_freelancer_text(profile)

    def test_fractional_rate(self) -> None:
        profile = _freelancer(pricing_style="hourly", hourly_rate=37.5)
        assert build_freelancer_text(profile).endswith("Pricing: €37.5 per hour")

    def test_deterministic(self) -> None:
        profile = _freelancer(skills=["a", "b"], location={"postcode": "1300"})
        assert build_freelancer_text(profile) == build_freelancer_text(profile)
