from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from app.services.records import RawRecord


log = logging.getLogger(__name__)

FetchPage = Callable[[int], Awaitable[list[RawRecord]]]
Sleep = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class AccumulationResult:
    records: list[RawRecord] = field(default_factory=list)
    pages_processed: int = 0
    per_page: int = 0
    search: str | None = None

    @property
    def total(self) -> int:
        return len(self.records)


async def accumulate(
    fetch_page: FetchPage,
    *,
    per_page: int,
    max_records: int,
    hard_page_cap: int,
    delay_seconds: float,
    search: str | None = None,
    sleep: Sleep = asyncio.sleep,
) -> AccumulationResult:
    """
    Fetch pages 1..N sequentially until max_records are collected, an empty
    page comes back, or hard_page_cap pages were requested.

    An empty page is the only exhaustion signal; KeyCRM's totals are not trusted.
    Any exception from fetch_page propagates and nothing partial is returned.
    """
    acc: list[RawRecord] = []
    page = 1
    log.info("accumulate: start (max=%d, per_page=%d, search=%r)", max_records, per_page, search)

    while len(acc) < max_records and page <= hard_page_cap:
        records = await fetch_page(page)
        log.info("accumulate: page %d -> %d records", page, len(records))

        if not records:
            log.info("accumulate: page %d empty, stopping", page)
            break

        acc.extend(records)
        page += 1

        # Pace requests to stay under KeyCRM's rate limit (429 otherwise)
        if len(acc) < max_records and page <= hard_page_cap:
            await sleep(delay_seconds)

    result = AccumulationResult(
        records=acc[:max_records],
        pages_processed=page - 1,
        per_page=per_page,
        search=search or None,
    )
    log.info("accumulate: done (total=%d, pages=%d)", result.total, result.pages_processed)
    return result
