"""Regenerate stored embeddings from current composite text.

Run after changing the composite-text format or the embedding model so
jobs and freelancers stay comparable. One bad record does not stop the
run; each outcome is reported.
"""

import logging
import sqlite3

from pydantic import BaseModel

from matchmaker.core.db import (
    list_freelancer_profiles,
    list_job_requests,
    update_freelancer_embedding,
    update_job_embedding,
)
from matchmaker.embedding.base import EmbeddingProvider, embed_text
from matchmaker.matching.composite import build_freelancer_text, build_job_text

logger = logging.getLogger(__name__)


class ReembedResult(BaseModel):
    record_id: str
    success: bool
    error: str | None = None


def reembed_jobs(
    conn: sqlite3.Connection,
    embedder: EmbeddingProvider,
    model: str | None = None,
) -> list[ReembedResult]:
    """Re-embed every stored job request."""
    results: list[ReembedResult] = []
    for job in list_job_requests(conn):
        try:
            embedding = embed_text(embedder, build_job_text(job.to_query()), model)
            update_job_embedding(conn, job.id, embedding)
        except Exception as e:
            logger.warning("Re-embedding job %s failed: %s", job.id, e)
            results.append(ReembedResult(record_id=job.id, success=False, error=str(e)))
            continue
        results.append(ReembedResult(record_id=job.id, success=True))
    logger.info(
        "Re-embedded %d/%d jobs", sum(r.success for r in results), len(results),
    )
    return results


def reembed_freelancers(
    conn: sqlite3.Connection,
    embedder: EmbeddingProvider,
    model: str | None = None,
) -> list[ReembedResult]:
    """Re-embed every stored freelancer profile."""
    results: list[ReembedResult] = []
    for profile in list_freelancer_profiles(conn):
        try:
            embedding = embed_text(embedder, build_freelancer_text(profile), model)
            update_freelancer_embedding(conn, profile.id, embedding)
        except Exception as e:
            logger.warning("Re-embedding freelancer %s failed: %s", profile.id, e)
            results.append(ReembedResult(record_id=profile.id, success=False, error=str(e)))
            continue
        results.append(ReembedResult(record_id=profile.id, success=True))
    logger.info(
        "Re-embedded %d/%d freelancers", sum(r.success for r in results), len(results),
    )
    return results
