"""Creating and updating freelancer profiles.

Each save re-embeds the profile's composite text and asks the LLM for a
headline. Skill tags are generated only when the freelancer supplied none.
"""

import logging
import sqlite3
import uuid
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from matchmaker.core.db import get_freelancer_profile, upsert_freelancer_profile
from matchmaker.core.errors import InvalidJobError, UpstreamError
from matchmaker.core.schemas import FreelancerProfile, FreelancerProfileInput
from matchmaker.embedding.base import EmbeddingProvider, embed_text
from matchmaker.llm.base import LLMProvider, parse_json_response
from matchmaker.matching.composite import build_freelancer_text

logger = logging.getLogger(__name__)

FREELANCER_ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert marketplace assistant that analyzes freelancer profiles.\n"
    "Your role is to:\n"
    "1. Extract key skills and expertise\n"
    "2. Generate concise, compelling headlines (max 10 words)\n"
    "3. Suggest relevant skill tags (1-5 tags)\n"
    "Be precise and remove redundancy."
)


HEADLINE_MAX_TOKENS = 32
SKILL_TAGS_MAX_TOKENS = 128


class SkillTags(BaseModel):
    skills: list[str] = Field(min_length=1, max_length=5)


def generate_headline(llm: LLMProvider, description: str, model: str | None = None) -> str:
    """Short, punchy headline (max 10 words) for a profile description."""
    prompt = (
        "Generate a short, punchy headline (max 10 words) for this freelancer "
        f"profile:\n\n{description}"
    )
    try:
        raw = llm.complete(
            prompt,
            system=FREELANCER_ANALYSIS_SYSTEM_PROMPT,
            model=model,
            max_tokens=HEADLINE_MAX_TOKENS,
        )
    except Exception as e:
        msg = f"Headline generation failed ({llm.provider_id}): {e}"
        raise UpstreamError(msg) from e
    return raw.strip().strip('"')


def generate_skill_tags(llm: LLMProvider, description: str, model: str | None = None) -> list[str]:
    """Extract 1-5 skill tags from a profile description."""
    prompt = (
        "Extract 1-5 concise skill tags for this freelancer profile.\n"
        'Return ONLY a JSON object: {"skills": ["tag", ...]}\n\n'
        f"{description}"
    )
    try:
        raw = llm.complete(
            prompt,
            system=FREELANCER_ANALYSIS_SYSTEM_PROMPT,
            model=model,
            max_tokens=SKILL_TAGS_MAX_TOKENS,
            json_output=True,
        )
        tags = SkillTags.model_validate(parse_json_response(raw))
    except Exception as e:
        msg = f"Skill tag generation failed ({llm.provider_id}): {e}"
        raise UpstreamError(msg) from e
    return [s.strip() for s in tags.skills if s.strip()]


def save_freelancer_profile(
    conn: sqlite3.Connection,
    embedder: EmbeddingProvider,
    draft: FreelancerProfileInput | Mapping[str, Any],
    *,
    llm: LLMProvider | None = None,
    embedding_model: str | None = None,
    llm_model: str | None = None,
) -> FreelancerProfile:
    """Embed and upsert a freelancer profile (one per profile_id).

    Without an llm the headline is left empty and skills are taken as given.

    Raises:
        InvalidJobError: Empty description or malformed fields.
        EmbeddingError: The embedding provider failed.
        UpstreamError: Headline or skill tag generation failed.
    """
    if not isinstance(draft, FreelancerProfileInput):
        try:
            draft = FreelancerProfileInput.model_validate(draft)
        except ValidationError as e:
            raise InvalidJobError(str(e)) from e

    text = build_freelancer_text(draft)
    embedding = embed_text(embedder, text, embedding_model)

    headline: str | None = None
    skills = list(draft.skills)
    if llm is not None:
        headline = generate_headline(llm, draft.description, llm_model)
        if not skills:
            skills = generate_skill_tags(llm, draft.description, llm_model)

    existing = get_freelancer_profile(conn, draft.profile_id)
    profile = FreelancerProfile(
        **draft.model_dump(exclude={"skills"}),
        id=existing.id if existing else str(uuid.uuid4()),
        skills=skills,
        headline=headline,
        embedding=embedding,
        updated_at=datetime.now(),
    )
    stored = upsert_freelancer_profile(conn, profile)
    logger.info(
        "%s freelancer profile %s (%d skills)",
        "Updated" if existing else "Created", stored.id, len(stored.skills),
    )
    return stored
