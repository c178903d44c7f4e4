"""Tests for the postcode-prefix travel radius check."""

import pytest

from matchmaker.core.config import LocationConfig
from matchmaker.core.schemas import FreelancerLocation, JobLocation
from matchmaker.matching.location import location_matches, postcode_prefix


def _check(freelancer_postcode: str | None, radius: str | None, job_postcode: str | None) -> bool:
    return location_matches(
        FreelancerLocation(postcode=freelancer_postcode, travel_radius=radius),
        JobLocation(postcode=job_postcode),
    )


class TestPostcodePrefix:
    @pytest.mark.parametrize(
        ("postcode", "expected"),
        [
            ("1312AB", 1312),
            (" 1312 AB", 1312),
            ("1312", 1312),
            ("13", 13),
            ("AB12", None),
            ("", None),
            (None, None),
        ],
    )
    def test_prefix(self, postcode: str | None, expected: int | None) -> None:
        assert postcode_prefix(postcode) == expected


class TestNearby:
    def test_within_two(self) -> None:
        assert _check("1310AB", "nearby", "1312CD") is True

    def test_three_apart(self) -> None:
        assert _check("1310AB", "nearby", "1313CD") is False

    def test_symmetric(self) -> None:
        assert _check("1313AB", "nearby", "1310CD") is False
        assert _check("1312AB", "nearby", "1310CD") is True


class TestCity:
    def test_job_in_city_range(self) -> None:
        assert _check("1000AA", "city", "1399ZZ") is True

    def test_job_at_upper_bound_excluded(self) -> None:
        assert _check("1350AA", "city", "1400AA") is False

    def test_job_below_range(self) -> None:
        assert _check("1350AA", "city", "1299AA") is False

    def test_custom_range(self) -> None:
        config = LocationConfig(city_postcode_min=1000, city_postcode_max=1100)
        assert location_matches(
            FreelancerLocation(postcode="1050", travel_radius="city"),
            JobLocation(postcode="1099"),
            config,
        ) is True


class TestCityPlus:
    def test_within_ten(self) -> None:
        assert _check("1300AA", "city_plus", "1310AA") is True

    def test_eleven_apart(self) -> None:
        assert _check("1300AA", "city_plus", "1311AA") is False


class TestFailOpen:
    def test_missing_locations(self) -> None:
        assert location_matches(None, JobLocation(postcode="1312")) is True
        assert location_matches(FreelancerLocation(postcode="1312", travel_radius="nearby"), None) is True

    def test_missing_postcode(self) -> None:
        assert _check(None, "nearby", "9999") is True
        assert _check("1312", "nearby", None) is True

    def test_non_numeric_postcode(self) -> None:
        assert _check("ABCD", "nearby", "9999") is True

    def test_unknown_radius(self) -> None:
        assert _check("1000", "anywhere", "9999") is True

    def test_missing_radius(self) -> None:
        assert _check("1000", None, "9999") is True
