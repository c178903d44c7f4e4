"""SQLite record store for profiles, freelancer profiles, and job requests.

Embeddings and loosely structured payloads (availability, location, time
window) are stored as JSON text and validated back into models on read.
"""

import json
import logging
import math
import sqlite3
from collections.abc import Iterable, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from matchmaker.core.schemas import (
    DisplayProfile,
    FreelancerAttributes,
    FreelancerProfile,
    JobRequest,
    SearchHit,
)

logger = logging.getLogger(__name__)

_PROFILES_TABLE = """
CREATE TABLE IF NOT EXISTS profiles (
    id              TEXT PRIMARY KEY,
    role            TEXT NOT NULL DEFAULT 'client',
    full_name       TEXT,
    profile_photo   TEXT
);
"""

_FREELANCER_PROFILES_TABLE = """
CREATE TABLE IF NOT EXISTS freelancer_profiles (
    id              TEXT PRIMARY KEY,
    profile_id      TEXT NOT NULL UNIQUE,
    description     TEXT NOT NULL,
    headline        TEXT,
    skills          TEXT NOT NULL DEFAULT '[]',
    example_tasks   TEXT NOT NULL DEFAULT '[]',
    availability    TEXT,
    location        TEXT,
    pricing_style   TEXT,
    hourly_rate     REAL,
    is_active       INTEGER NOT NULL DEFAULT 1,
    embedding       TEXT,
    updated_at      TEXT NOT NULL
);
"""

_JOB_REQUESTS_TABLE = """
CREATE TABLE IF NOT EXISTS job_requests (
    id                  TEXT PRIMARY KEY,
    client_profile_id   TEXT NOT NULL,
    description         TEXT NOT NULL,
    time_window         TEXT,
    location            TEXT,
    budget              TEXT,
    status              TEXT NOT NULL DEFAULT 'open',
    embedding           TEXT,
    created_at          TEXT NOT NULL
);
"""


def init_db(path: str | Path) -> sqlite3.Connection:
    """Create the database and tables, returning a connection.

    The connection may be handed to worker threads (see SqliteMatchStore).
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute(_PROFILES_TABLE)
    conn.execute(_FREELANCER_PROFILES_TABLE)
    conn.execute(_JOB_REQUESTS_TABLE)
    conn.commit()
    return conn


def _dump(value: Any) -> str | None:
    if value is None:
        return None
    if hasattr(value, "model_dump"):
        value = value.model_dump(mode="json", exclude_none=True)
    return json.dumps(value)


def _load(raw: str | None) -> Any:
    return json.loads(raw) if raw else None


def _placeholders(ids: Sequence[str]) -> str:
    return ",".join("?" for _ in ids)


# ---------------------------------------------------------------------------
# Display profiles
# ---------------------------------------------------------------------------


def upsert_profile(conn: sqlite3.Connection, profile: DisplayProfile, role: str = "client") -> None:
    """Insert or update a display profile."""
    conn.execute(
        """
        INSERT INTO profiles (id, role, full_name, profile_photo)
        VALUES (?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            role = excluded.role,
            full_name = excluded.full_name,
            profile_photo = excluded.profile_photo
        """,
        (profile.id, role, profile.full_name, profile.profile_photo),
    )
    conn.commit()


def get_display_profiles(
    conn: sqlite3.Connection,
    profile_ids: Iterable[str],
) -> dict[str, DisplayProfile]:
    """Fetch display fields for many profiles in one query."""
    ids = sorted(set(profile_ids))
    if not ids:
        return {}
    rows = conn.execute(
        f"SELECT id, full_name, profile_photo FROM profiles WHERE id IN ({_placeholders(ids)})",
        ids,
    ).fetchall()
    return {
        row["id"]: DisplayProfile(
            id=row["id"],
            full_name=row["full_name"],
            profile_photo=row["profile_photo"],
        )
        for row in rows
    }


# ---------------------------------------------------------------------------
# Freelancer profiles
# ---------------------------------------------------------------------------


def _row_to_freelancer(row: sqlite3.Row) -> FreelancerProfile:
    return FreelancerProfile.model_validate({
        "id": row["id"],
        "profile_id": row["profile_id"],
        "description": row["description"],
        "headline": row["headline"],
        "skills": _load(row["skills"]) or [],
        "example_tasks": _load(row["example_tasks"]) or [],
        "availability": _load(row["availability"]),
        "location": _load(row["location"]),
        "pricing_style": row["pricing_style"],
        "hourly_rate": row["hourly_rate"],
        "is_active": bool(row["is_active"]),
        "embedding": _load(row["embedding"]),
        "updated_at": datetime.fromisoformat(row["updated_at"]),
    })


def upsert_freelancer_profile(
    conn: sqlite3.Connection,
    profile: FreelancerProfile,
) -> FreelancerProfile:
    """Insert a freelancer profile, or update the one with the same profile_id.

    An existing row keeps its id; the returned profile carries that id.
    """
    row = conn.execute(
        """
        INSERT INTO freelancer_profiles
            (id, profile_id, description, headline, skills, example_tasks,
             availability, location, pricing_style, hourly_rate, is_active,
             embedding, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(profile_id) DO UPDATE SET
            description = excluded.description,
            headline = excluded.headline,
            skills = excluded.skills,
            example_tasks = excluded.example_tasks,
            availability = excluded.availability,
            location = excluded.location,
            pricing_style = excluded.pricing_style,
            hourly_rate = excluded.hourly_rate,
            is_active = excluded.is_active,
            embedding = excluded.embedding,
            updated_at = excluded.updated_at
        RETURNING id
        """,
        (
            profile.id,
            profile.profile_id,
            profile.description,
            profile.headline,
            _dump(profile.skills),
            _dump(profile.example_tasks),
            _dump(profile.availability),
            _dump(profile.location),
            profile.pricing_style,
            profile.hourly_rate,
            int(profile.is_active),
            _dump(profile.embedding),
            profile.updated_at.isoformat(),
        ),
    ).fetchone()
    conn.commit()
    return profile.model_copy(update={"id": row["id"]})


def get_freelancer_profile(
    conn: sqlite3.Connection,
    profile_id: str,
) -> FreelancerProfile | None:
    """Look up a freelancer profile by its owner's profile id."""
    row = conn.execute(
        "SELECT * FROM freelancer_profiles WHERE profile_id = ?",
        (profile_id,),
    ).fetchone()
    return _row_to_freelancer(row) if row is not None else None


def list_freelancer_profiles(conn: sqlite3.Connection) -> list[FreelancerProfile]:
    """Return every freelancer profile, oldest update first."""
    rows = conn.execute(
        "SELECT * FROM freelancer_profiles ORDER BY updated_at, id"
    ).fetchall()
    return [_row_to_freelancer(r) for r in rows]


def update_freelancer_embedding(
    conn: sqlite3.Connection,
    freelancer_id: str,
    embedding: list[float],
) -> None:
    conn.execute(
        "UPDATE freelancer_profiles SET embedding = ? WHERE id = ?",
        (_dump(embedding), freelancer_id),
    )
    conn.commit()


def get_freelancer_attributes(
    conn: sqlite3.Connection,
    freelancer_ids: Iterable[str],
) -> dict[str, FreelancerAttributes]:
    """Fetch availability and location for many freelancers in one query."""
    ids = sorted(set(freelancer_ids))
    if not ids:
        return {}
    rows = conn.execute(
        "SELECT id, availability, location FROM freelancer_profiles "
        f"WHERE id IN ({_placeholders(ids)})",
        ids,
    ).fetchall()
    return {
        row["id"]: FreelancerAttributes.model_validate({
            "availability": _load(row["availability"]),
            "location": _load(row["location"]),
        })
        for row in rows
    }


# ---------------------------------------------------------------------------
# Job requests
# ---------------------------------------------------------------------------


def _row_to_job(row: sqlite3.Row) -> JobRequest:
    return JobRequest.model_validate({
        "id": row["id"],
        "client_profile_id": row["client_profile_id"],
        "description": row["description"],
        "time_window": _load(row["time_window"]),
        "location": _load(row["location"]),
        "budget": row["budget"],
        "status": row["status"],
        "embedding": _load(row["embedding"]),
        "created_at": datetime.fromisoformat(row["created_at"]),
    })


def insert_job_request(conn: sqlite3.Connection, job: JobRequest) -> None:
    conn.execute(
        """
        INSERT INTO job_requests
            (id, client_profile_id, description, time_window, location,
             budget, status, embedding, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            job.id,
            job.client_profile_id,
            job.description,
            _dump(job.time_window),
            _dump(job.location),
            job.budget,
            job.status,
            _dump(job.embedding),
            job.created_at.isoformat(),
        ),
    )
    conn.commit()


def update_job_embedding(
    conn: sqlite3.Connection,
    job_id: str,
    embedding: list[float],
) -> None:
    conn.execute(
        "UPDATE job_requests SET embedding = ? WHERE id = ?",
        (_dump(embedding), job_id),
    )
    conn.commit()


def get_job_request(conn: sqlite3.Connection, job_id: str) -> JobRequest | None:
    row = conn.execute("SELECT * FROM job_requests WHERE id = ?", (job_id,)).fetchone()
    return _row_to_job(row) if row is not None else None


def list_job_requests(
    conn: sqlite3.Connection,
    client_profile_id: str | None = None,
) -> list[JobRequest]:
    """Return job requests, newest first, optionally for one client."""
    if client_profile_id is None:
        rows = conn.execute(
            "SELECT * FROM job_requests ORDER BY created_at DESC, id"
        ).fetchall()
    else:
        rows = conn.execute(
            "SELECT * FROM job_requests WHERE client_profile_id = ? "
            "ORDER BY created_at DESC, id",
            (client_profile_id,),
        ).fetchall()
    return [_row_to_job(r) for r in rows]


# ---------------------------------------------------------------------------
# Vector search
# ---------------------------------------------------------------------------


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity in [-1, 1]; 0.0 when either vector is all zeros."""
    if len(a) != len(b):
        msg = f"Embedding dimension mismatch: {len(a)} != {len(b)}"
        raise ValueError(msg)
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    if norm == 0.0:
        return 0.0
    return dot / norm


def match_freelancers(
    conn: sqlite3.Connection,
    query_embedding: Sequence[float],
    match_threshold: float,
    match_count: int,
) -> list[SearchHit]:
    """Return active freelancers with similarity >= threshold, most similar first.

    Brute-force cosine over every stored embedding. Rows whose embedding has
    a different dimension (stored under another model, not yet re-embedded)
    are skipped with a warning.
    """
    rows = conn.execute(
        """
        SELECT id, profile_id, headline, skills, description, embedding
        FROM freelancer_profiles
        WHERE is_active = 1 AND embedding IS NOT NULL
        """
    ).fetchall()

    hits: list[SearchHit] = []
    skipped = 0
    for row in rows:
        embedding = _load(row["embedding"])
        if len(embedding) != len(query_embedding):
            skipped += 1
            continue
        similarity = cosine_similarity(query_embedding, embedding)
        if similarity < match_threshold:
            continue
        hits.append(SearchHit(
            id=row["id"],
            profile_id=row["profile_id"],
            similarity=similarity,
            headline=row["headline"],
            skills=_load(row["skills"]) or [],
            description=row["description"],
        ))

    if skipped:
        logger.warning(
            "Skipped %d freelancer embeddings with dimension != %d - run reembed",
            skipped, len(query_embedding),
        )

    hits.sort(key=lambda h: (-h.similarity, h.id))
    return hits[:match_count]
