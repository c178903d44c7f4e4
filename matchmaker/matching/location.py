"""Travel-radius check based on postcode prefixes.

The distance between two postcodes is approximated by the difference of
their four-digit numeric prefixes. That only holds inside one city's
postcode numbering; it is not a geographic distance.
"""

import re

from matchmaker.core.config import LocationConfig
from matchmaker.core.schemas import FreelancerLocation, JobLocation, TravelRadius

_PREFIX_RE = re.compile(r"\d+")


def postcode_prefix(postcode: str | None) -> int | None:
    """Leading digits within the first four characters, or None."""
    if not postcode:
        return None
    match = _PREFIX_RE.match(postcode.strip()[:4])
    return int(match.group()) if match else None


def location_matches(
    freelancer_location: FreelancerLocation | None,
    job_location: JobLocation | None,
    config: LocationConfig | None = None,
) -> bool:
    """Return True if the freelancer's travel radius covers the job postcode.

    Fails open: missing locations, missing or non-numeric postcodes, and
    unknown radius values all return True.
    """
    if freelancer_location is None or job_location is None:
        return True

    job_prefix = postcode_prefix(job_location.postcode)
    freelancer_prefix = postcode_prefix(freelancer_location.postcode)
    if job_prefix is None or freelancer_prefix is None:
        return True

    config = config or LocationConfig()
    distance = abs(job_prefix - freelancer_prefix)
    radius = freelancer_location.travel_radius

    if radius == TravelRadius.NEARBY.value:
        return distance <= config.nearby_max_distance
    if radius == TravelRadius.CITY.value:
        return config.city_postcode_min <= job_prefix < config.city_postcode_max
    if radius == TravelRadius.CITY_PLUS.value:
        return distance <= config.city_plus_max_distance
    return True
