"""MatchStore backed by the SQLite record store."""

import asyncio
import sqlite3
import threading
from collections.abc import Callable, Sequence
from typing import TypeVar

from matchmaker.core.db import (
    get_display_profiles,
    get_freelancer_attributes,
    get_job_request,
    match_freelancers,
)
from matchmaker.core.schemas import DisplayProfile, FreelancerAttributes, JobRequest, SearchHit
from matchmaker.store.base import MatchStore

T = TypeVar("T")


class SqliteMatchStore(MatchStore):
    """Async facade over matchmaker.core.db.

    Queries run in a worker thread so the caller's timeouts can fire and
    the event loop keeps serving other tasks. The connection must be
    opened with check_same_thread=False (init_db does this); a lock keeps
    one query on it at a time.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._lock = threading.Lock()

    def _locked(self, fn: Callable[..., T], *args: object) -> T:
        with self._lock:
            return fn(self._conn, *args)

    async def _run(self, fn: Callable[..., T], *args: object) -> T:
        return await asyncio.to_thread(self._locked, fn, *args)

    async def search_freelancers(
        self,
        query_embedding: Sequence[float],
        threshold: float,
        max_results: int,
    ) -> list[SearchHit]:
        return await self._run(match_freelancers, query_embedding, threshold, max_results)

    async def get_freelancer_attributes(
        self,
        freelancer_ids: Sequence[str],
    ) -> dict[str, FreelancerAttributes]:
        return await self._run(get_freelancer_attributes, list(freelancer_ids))

    async def get_display_profiles(
        self,
        profile_ids: Sequence[str],
    ) -> dict[str, DisplayProfile]:
        return await self._run(get_display_profiles, list(profile_ids))

    async def get_job_request(self, job_id: str) -> JobRequest | None:
        return await self._run(get_job_request, job_id)
