"""Tests for the SQLite-backed MatchStore."""

import asyncio
import json
import time
from unittest.mock import MagicMock, patch

import pytest

from matchmaker.core.config import MatchingConfig
from matchmaker.core.db import init_db, upsert_freelancer_profile, upsert_profile
from matchmaker.core.errors import ProviderTimeoutError, RecordStoreError
from matchmaker.core.schemas import DisplayProfile, FreelancerProfile, SearchHit
from matchmaker.matching.explainer import Explainer
from matchmaker.matching.ranker import MatchRanker
from matchmaker.store.sqlite import SqliteMatchStore

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _freelancer(fid: str, profile_id: str, embedding: list[float]) -> FreelancerProfile:
    return FreelancerProfile.model_validate({
        "id": fid,
        "profile_id": profile_id,
        "description": "Handyman",
        "availability": {"days": {"monday": ["morning"]}},
        "location": {"postcode": "1312AB", "travelRadius": "nearby"},
        "embedding": embedding,
    })


def _slow_search(delay: float):  # type: ignore[no-untyped-def]
    def search(conn, query_embedding, threshold, count) -> list[SearchHit]:  # type: ignore[no-untyped-def]
        time.sleep(delay)
        return []
    return search


class _NoExplainer(Explainer):
    async def explain(self, job_text: str, candidate_text: str, skills: list[str]) -> str:
        return ""


def _embedder() -> MagicMock:
    embedder = MagicMock()
    embedder.provider_id = "fake"
    embedder.embed.return_value = [1.0, 0.0]
    return embedder


@pytest.fixture()
def db(tmp_path):  # type: ignore[no-untyped-def]
    conn = init_db(tmp_path / "test.db")
    yield conn
    conn.close()


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

class TestSqliteMatchStore:
    async def test_search(self, db) -> None:  # type: ignore[no-untyped-def]
        upsert_freelancer_profile(db, _freelancer("f1", "p1", [1.0, 0.0]))
        upsert_freelancer_profile(db, _freelancer("f2", "p2", [0.0, 1.0]))

        hits = await SqliteMatchStore(db).search_freelancers([1.0, 0.0], 0.5, 10)

        assert [h.id for h in hits] == ["f1"]

    async def test_batched_lookups(self, db) -> None:  # type: ignore[no-untyped-def]
        upsert_freelancer_profile(db, _freelancer("f1", "p1", [1.0, 0.0]))
        upsert_profile(db, DisplayProfile(id="p1", full_name="Anna"))
        store = SqliteMatchStore(db)

        attributes = await store.get_freelancer_attributes(["f1"])
        display = await store.get_display_profiles(["p1"])

        assert attributes["f1"].location is not None
        assert attributes["f1"].location.postcode == "1312AB"
        assert display["p1"].full_name == "Anna"

    async def test_missing_job(self, db) -> None:  # type: ignore[no-untyped-def]
        assert await SqliteMatchStore(db).get_job_request("nope") is None


# ---------------------------------------------------------------------------
# Queries run off the event loop
# ---------------------------------------------------------------------------

class TestSqliteMatchStoreThreading:
    async def test_event_loop_not_blocked(self, db) -> None:  # type: ignore[no-untyped-def]
        store = SqliteMatchStore(db)
        with patch("matchmaker.store.sqlite.match_freelancers", _slow_search(0.3)):
            task = asyncio.ensure_future(store.search_freelancers([1.0, 0.0], 0.0, 5))
            started = time.monotonic()
            await asyncio.sleep(0.01)
            elapsed = time.monotonic() - started
            await task

        assert elapsed < 0.2

    async def test_search_timeout_fires(self, db) -> None:  # type: ignore[no-untyped-def]
        ranker = MatchRanker(
            SqliteMatchStore(db),
            _embedder(),
            _NoExplainer(),
            matching=MatchingConfig(search_timeout_s=0.05),
        )
        with (
            patch("matchmaker.store.sqlite.match_freelancers", _slow_search(0.5)),
            pytest.raises(ProviderTimeoutError, match="Vector search timed out"),
        ):
            await ranker.find_matches_for_job({"description": "Fix my tap"})

    async def test_malformed_stored_job(self, db) -> None:  # type: ignore[no-untyped-def]
        db.execute(
            "INSERT INTO job_requests (id, client_profile_id, description, time_window, "
            "status, embedding, created_at) VALUES (?, ?, ?, ?, ?, ?, ?)",
            ("j1", "c1", "Fix my tap", json.dumps({"time_of_day": "midnight"}),
             "open", json.dumps([1.0, 0.0]), "2024-01-15T09:00:00"),
        )
        db.commit()
        ranker = MatchRanker(SqliteMatchStore(db), _embedder(), _NoExplainer())

        with pytest.raises(RecordStoreError, match="Failed to load job request j1"):
            await ranker.find_matches_for_job_request("j1")
