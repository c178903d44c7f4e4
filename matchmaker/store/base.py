"""Abstract base class for the record store the ranker reads from."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from matchmaker.core.schemas import DisplayProfile, FreelancerAttributes, JobRequest, SearchHit


class MatchStore(ABC):
    """Vector search plus the batched lookups the ranker needs."""

    @abstractmethod
    async def search_freelancers(
        self,
        query_embedding: Sequence[float],
        threshold: float,
        max_results: int,
    ) -> list[SearchHit]:
        """Return up to max_results hits with similarity >= threshold, most similar first."""

    @abstractmethod
    async def get_freelancer_attributes(
        self,
        freelancer_ids: Sequence[str],
    ) -> dict[str, FreelancerAttributes]:
        """Fetch availability and location for many freelancers in one lookup."""

    @abstractmethod
    async def get_display_profiles(
        self,
        profile_ids: Sequence[str],
    ) -> dict[str, DisplayProfile]:
        """Fetch name and photo for many profiles in one lookup."""

    @abstractmethod
    async def get_job_request(self, job_id: str) -> JobRequest | None:
        """Load a stored job request, or None if it doesn't exist."""
