from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable

from app.core.errors import CompanyNotFound
from app.services.records import RawRecord


log = logging.getLogger(__name__)

CompanyId = int | str
FetchCompany = Callable[[str], Awaitable[Any]]


def cache_key(company_id: CompanyId) -> str:
    # 42 and "42" address the same entry
    return str(company_id).strip()


class CompanyCache:
    """
    In-memory company records keyed by id, owned by one application instance.

    Entries are never expired; they are replaced wholesale by a fresh fetch
    and removed only by clear(). Concurrent misses for the same id share
    one upstream call.
    """

    def __init__(self) -> None:
        self._entries: dict[str, RawRecord] = {}
        self._inflight: dict[str, asyncio.Task] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, company_id: object) -> bool:
        return cache_key(company_id) in self._entries  # type: ignore[arg-type]

    def size(self) -> int:
        return len(self._entries)

    def get(self, company_id: CompanyId) -> RawRecord | None:
        return self._entries.get(cache_key(company_id))

    def put(self, company_id: CompanyId, record: RawRecord) -> None:
        self._entries[cache_key(company_id)] = record

    def prime(self, records: Iterable[Any]) -> int:
        stored = 0
        for r in records:
            if isinstance(r, dict) and r.get("id") is not None:
                self.put(r["id"], r)
                stored += 1
        return stored

    def clear(self) -> int:
        removed = len(self._entries)
        self._entries.clear()
        # fetches started before the clear must not repopulate it
        self._inflight.clear()
        log.info("company cache cleared: %d entries", removed)
        return removed

    async def get_or_fetch(self, company_id: CompanyId, fetch: FetchCompany) -> RawRecord:
        key = cache_key(company_id)
        cached = self._entries.get(key)
        if cached is not None:
            return cached

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch_and_store(key, fetch))
            self._inflight[key] = task
        return await asyncio.shield(task)

    async def _fetch_and_store(self, key: str, fetch: FetchCompany) -> RawRecord:
        log.debug("company cache miss: %s", key)
        current = asyncio.current_task()
        try:
            record = await fetch(key)
        finally:
            registered = self._inflight.get(key) is current
            if registered:
                self._inflight.pop(key, None)
        if not isinstance(record, dict) or not record:
            raise CompanyNotFound(key)
        if registered:
            self._entries[key] = record
        return record
