"""Creating job requests with an embedding of their composite text."""

import logging
import sqlite3
import uuid
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from matchmaker.core.db import insert_job_request, update_job_embedding
from matchmaker.core.errors import InvalidJobError
from matchmaker.core.schemas import JobQuery, JobRequest
from matchmaker.embedding.base import EmbeddingProvider, embed_text
from matchmaker.matching.composite import build_job_text

logger = logging.getLogger(__name__)


def create_job_request(
    conn: sqlite3.Connection,
    embedder: EmbeddingProvider,
    client_profile_id: str,
    query: JobQuery | Mapping[str, Any],
    *,
    model: str | None = None,
) -> JobRequest:
    """Insert a job request, then embed it and store the embedding.

    The row is written before the embedding call, so a provider failure
    leaves a job without embedding; matching it later raises
    MissingEmbeddingError until it is re-embedded.

    Raises:
        InvalidJobError: Empty description or malformed fields.
        EmbeddingError: The embedding provider failed.
    """
    if not isinstance(query, JobQuery):
        try:
            query = JobQuery.model_validate(query)
        except ValidationError as e:
            raise InvalidJobError(str(e)) from e

    text = build_job_text(query)

    job = JobRequest(
        id=str(uuid.uuid4()),
        client_profile_id=client_profile_id,
        description=query.description,
        time_window=query.time_window,
        location=query.location,
        budget=query.budget,
    )
    insert_job_request(conn, job)
    logger.info("Created job request %s for client %s", job.id, client_profile_id)

    embedding = embed_text(embedder, text, model)
    update_job_embedding(conn, job.id, embedding)
    logger.debug("Stored %d-dim embedding for job %s", len(embedding), job.id)

    return job.model_copy(update={"embedding": embedding})
