"""Freelancer ranking: vector search, exact-match boosts, filters, explanations.

Data flow:
  1. Query embedding (live for ad-hoc jobs, stored for saved job requests)
  2. Vector search, over-fetching limit x over_fetch_factor candidates
  3. One batched lookup of availability/location for every hit
  4. Match flags + relevance score; hard filter on requested slot/location
  5. Sort by relevance desc, candidate id asc
  6. Truncate to limit
  7. Explanations, fanned out concurrently, kept in rank order
  8. One batched lookup of display fields (name, photo)

Boosts only apply for a query field that is actually present, so a query
without a time window or location is ranked purely by similarity.
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from datetime import date
from typing import Any, TypeVar

from pydantic import ValidationError

from matchmaker.core.config import LocationConfig, MatchingConfig, Settings
from matchmaker.core.errors import (
    InvalidJobError,
    JobNotFoundError,
    MissingEmbeddingError,
    ProviderTimeoutError,
    RecordStoreError,
    VectorSearchError,
)
from matchmaker.core.schemas import (
    FreelancerAttributes,
    JobQuery,
    MatchResult,
    ScoredMatch,
    SearchHit,
)
from matchmaker.embedding.base import EmbeddingProvider, embed_text
from matchmaker.matching.availability import availability_matches
from matchmaker.matching.composite import build_job_text
from matchmaker.matching.explainer import Explainer, explain_all
from matchmaker.matching.location import location_matches
from matchmaker.store.base import MatchStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def score_hit(
    hit: SearchHit,
    attributes: FreelancerAttributes | None,
    query: JobQuery,
    matching: MatchingConfig,
    location_config: LocationConfig,
    today: date | None = None,
) -> ScoredMatch:
    """Compute match flags and relevance score for one search hit."""
    attributes = attributes or FreelancerAttributes()
    has_availability = availability_matches(attributes.availability, query.time_window, today)
    has_location = location_matches(attributes.location, query.location, location_config)

    score = hit.similarity
    if query.time_window is not None and has_availability:
        score += matching.availability_boost
    if query.location is not None and has_location:
        score += matching.location_boost

    return ScoredMatch(
        hit=hit,
        availability_match=has_availability,
        location_match=has_location,
        relevance_score=score,
        location=attributes.location,
    )


def rank_hits(
    hits: Sequence[SearchHit],
    attributes: Mapping[str, FreelancerAttributes],
    query: JobQuery,
    *,
    limit: int,
    threshold: float,
    matching: MatchingConfig,
    location_config: LocationConfig,
    today: date | None = None,
) -> list[ScoredMatch]:
    """Score, filter, sort, and truncate search hits. Pure; no I/O."""
    above = [h for h in hits if h.similarity >= threshold]
    if len(above) < len(hits):
        logger.warning(
            "Vector search returned %d hits below threshold %.2f - dropped",
            len(hits) - len(above), threshold,
        )

    scored = [
        score_hit(h, attributes.get(h.id), query, matching, location_config, today)
        for h in above
    ]

    if matching.hard_filter:
        kept = [
            s for s in scored
            if (query.time_window is None or s.availability_match)
            and (query.location is None or s.location_match)
        ]
        if len(kept) < len(scored):
            logger.debug("Availability/location filter removed %d candidates", len(scored) - len(kept))
        scored = kept

    scored.sort(key=lambda s: (-s.relevance_score, s.hit.id))
    return scored[:limit]


def _coerce_query(query: JobQuery | Mapping[str, Any]) -> JobQuery:
    if isinstance(query, JobQuery):
        return query
    try:
        return JobQuery.model_validate(query)
    except ValidationError as e:
        raise InvalidJobError(str(e)) from e


class MatchRanker:
    """Finds and ranks freelancers for a job.

    Usage::

        ranker = MatchRanker.from_settings(settings, store, embedder, explainer)
        matches = await ranker.find_matches_for_job({"description": "Fix my sink"})
        matches = await ranker.find_matches_for_job_request(job_id)
    """

    def __init__(
        self,
        store: MatchStore,
        embedder: EmbeddingProvider,
        explainer: Explainer,
        *,
        matching: MatchingConfig | None = None,
        location: LocationConfig | None = None,
        embedding_model: str | None = None,
        embedding_timeout_s: float = 30.0,
        explanation_concurrency: int = 5,
        explanation_timeout_s: float = 30.0,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._store = store
        self._embedder = embedder
        self._explainer = explainer
        self._matching = matching or MatchingConfig()
        self._location = location or LocationConfig()
        self._embedding_model = embedding_model
        self._embedding_timeout_s = embedding_timeout_s
        self._explanation_concurrency = explanation_concurrency
        self._explanation_timeout_s = explanation_timeout_s
        self._clock = clock

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: MatchStore,
        embedder: EmbeddingProvider,
        explainer: Explainer,
    ) -> "MatchRanker":
        return cls(
            store,
            embedder,
            explainer,
            matching=settings.matching,
            location=settings.location,
            embedding_model=settings.embedding.model,
            embedding_timeout_s=settings.embedding.timeout_s,
            explanation_concurrency=settings.explanation.max_concurrency,
            explanation_timeout_s=settings.explanation.timeout_s,
        )

    async def find_matches_for_job(
        self,
        query: JobQuery | Mapping[str, Any],
        limit: int | None = None,
        threshold: float | None = None,
    ) -> list[MatchResult]:
        """Match an ad-hoc job; embeds its composite text live.

        Raises:
            InvalidJobError: Empty description or malformed fields.
            EmbeddingError, VectorSearchError, RecordStoreError,
            ExplanationError, ProviderTimeoutError: An external call failed.
        """
        limit, threshold = self._resolve(limit, threshold)
        job = _coerce_query(query)
        text = build_job_text(job)
        embedding = await self._embed(text)
        return await self._rank(embedding, job, limit, threshold)

    async def find_matches_for_job_request(
        self,
        job_id: str,
        limit: int | None = None,
        threshold: float | None = None,
    ) -> list[MatchResult]:
        """Match a stored job request using its stored embedding.

        Raises:
            JobNotFoundError: No job request with that id.
            MissingEmbeddingError: The job has never been embedded.
            RecordStoreError: The job could not be loaded or is malformed.
            VectorSearchError, ExplanationError, ProviderTimeoutError:
                An external call failed.
        """
        limit, threshold = self._resolve(limit, threshold)
        job = await self._load(self._store.get_job_request(job_id), f"job request {job_id}")
        if job is None:
            msg = f"Job request not found: {job_id}"
            raise JobNotFoundError(msg)
        if not job.embedding:
            msg = f"Job request {job_id} does not have an embedding"
            raise MissingEmbeddingError(msg)
        return await self._rank(job.embedding, job.to_query(), limit, threshold)

    def _resolve(self, limit: int | None, threshold: float | None) -> tuple[int, float]:
        limit = limit if limit is not None else self._matching.limit
        threshold = threshold if threshold is not None else self._matching.threshold
        if limit < 1:
            msg = f"limit must be >= 1, got {limit}"
            raise InvalidJobError(msg)
        return limit, threshold

    async def _embed(self, text: str) -> list[float]:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(embed_text, self._embedder, text, self._embedding_model),
                timeout=self._embedding_timeout_s,
            )
        except TimeoutError:
            msg = (
                f"Embedding provider '{self._embedder.provider_id}' timed out "
                f"after {self._embedding_timeout_s}s"
            )
            raise ProviderTimeoutError(msg) from None

    async def _search(self, embedding: Sequence[float], threshold: float, count: int) -> list[SearchHit]:
        try:
            return await asyncio.wait_for(
                self._store.search_freelancers(embedding, threshold, count),
                timeout=self._matching.search_timeout_s,
            )
        except TimeoutError:
            msg = f"Vector search timed out after {self._matching.search_timeout_s}s"
            raise ProviderTimeoutError(msg) from None
        except Exception as e:
            msg = f"Vector search failed: {e}"
            raise VectorSearchError(msg) from e

    async def _load(self, lookup: Awaitable[T], what: str) -> T:
        try:
            return await asyncio.wait_for(lookup, timeout=self._matching.search_timeout_s)
        except TimeoutError:
            msg = f"Loading {what} timed out after {self._matching.search_timeout_s}s"
            raise ProviderTimeoutError(msg) from None
        except Exception as e:
            msg = f"Failed to load {what}: {e}"
            raise RecordStoreError(msg) from e

    async def _rank(
        self,
        embedding: Sequence[float],
        query: JobQuery,
        limit: int,
        threshold: float,
    ) -> list[MatchResult]:
        count = limit * self._matching.over_fetch_factor
        hits = await self._search(embedding, threshold, count)
        logger.info("Vector search: %d candidates (requested %d)", len(hits), count)
        if not hits:
            return []

        attributes = await self._load(
            self._store.get_freelancer_attributes([h.id for h in hits]),
            "freelancer attributes",
        )

        ranked = rank_hits(
            hits,
            attributes,
            query,
            limit=limit,
            threshold=threshold,
            matching=self._matching,
            location_config=self._location,
            today=self._clock(),
        )
        logger.info("After filtering and ranking: %d", len(ranked))
        if not ranked:
            return []

        explanations = await explain_all(
            self._explainer,
            query.description,
            [s.hit for s in ranked],
            max_concurrency=self._explanation_concurrency,
            timeout_s=self._explanation_timeout_s,
        )

        profile_ids = [s.hit.profile_id for s in ranked if s.hit.profile_id]
        display = (
            await self._load(self._store.get_display_profiles(profile_ids), "display profiles")
            if profile_ids else {}
        )

        results: list[MatchResult] = []
        for scored, explanation in zip(ranked, explanations):
            hit = scored.hit
            profile = display.get(hit.profile_id) if hit.profile_id else None
            results.append(MatchResult(
                freelancer_profile_id=hit.id,
                headline=hit.headline,
                skills=hit.skills,
                similarity=hit.similarity,
                relevance_score=scored.relevance_score,
                explanation=explanation,
                has_exact_availability_match=scored.availability_match,
                has_location_match=scored.location_match,
                profile_photo=profile.profile_photo if profile else None,
                full_name=profile.full_name if profile else None,
                location=scored.location,
            ))
        return results


def export_matches_json(matches: list[MatchResult]) -> str:
    """Export match results as a JSON string."""
    data = [m.model_dump(mode="json") for m in matches]
    return json.dumps(data, indent=2)
