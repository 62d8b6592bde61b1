from typing import Any

from fastapi import APIRouter, Depends, Query, Request
import logging

from app.api.deps import get_keycrm, get_settings, parse_max
from app.core.config import Settings
from app.schemas.buyers import BuyerDuplicatesOut, BuyersAllOut, BuyersPageOut
from app.services import keycrm_api
from app.services.keycrm_client import KeyCrmClient
from app.services.normalize import find_duplicates, map_buyer
from app.services.pagination import AccumulationResult, accumulate
from app.services.records import to_records


log = logging.getLogger(__name__)
router = APIRouter()


async def _accumulate_buyers(client: KeyCrmClient, settings: Settings, search: str, max_value: str | None) -> AccumulationResult:
    per_page = settings.buyers_per_page

    async def fetch_page(page: int):
        return await keycrm_api.fetch_buyer_page(client, page, per_page, search)

    return await accumulate(
        fetch_page,
        per_page=per_page,
        max_records=parse_max(max_value, settings.buyers_default_max),
        hard_page_cap=settings.buyers_page_cap,
        delay_seconds=settings.buyers_page_delay_seconds,
        search=search,
    )


@router.get("/buyers", response_model=BuyersPageOut)
async def list_buyers(request: Request, client: KeyCrmClient = Depends(get_keycrm)) -> BuyersPageOut:
    """
    Transparent proxy to KeyCRM GET /buyer; the query string is forwarded as-is.
    Example: /buyers?search=%2B380501234567&page=1&per_page=100
    """
    raw = to_records(await keycrm_api.list_buyers(client, request.query_params.multi_items()))
    data = [map_buyer(b) for b in raw]
    return BuyersPageOut(count=len(data), data=data, raw=raw)


@router.get("/buyers/raw")
async def list_buyers_raw(request: Request, client: KeyCrmClient = Depends(get_keycrm)) -> Any:
    return await keycrm_api.list_buyers(client, request.query_params.multi_items())


@router.get("/buyers/all", response_model=BuyersAllOut)
async def list_all_buyers(
    search: str = "",
    max_value: str | None = Query(default=None, alias="max"),
    client: KeyCrmClient = Depends(get_keycrm),
    settings: Settings = Depends(get_settings),
) -> BuyersAllOut:
    result = await _accumulate_buyers(client, settings, search, max_value)
    data = [map_buyer(b) for b in result.records]
    log.info("buyers/all: collected %d buyers over %d pages", len(data), result.pages_processed)

    return BuyersAllOut(
        total=len(data),
        pages_processed=result.pages_processed,
        per_page=result.per_page,
        search=result.search,
        data=data,
    )


@router.get("/buyers/duplicates", response_model=BuyerDuplicatesOut)
async def list_buyer_duplicates(
    search: str = "",
    max_value: str | None = Query(default=None, alias="max"),
    client: KeyCrmClient = Depends(get_keycrm),
    settings: Settings = Depends(get_settings),
) -> BuyerDuplicatesOut:
    result = await _accumulate_buyers(client, settings, search, max_value)
    groups = find_duplicates(map_buyer(b) for b in result.records)
    log.info("buyers/duplicates: %d shared keys among %d buyers", len(groups), result.total)

    return BuyerDuplicatesOut(total=result.total, pages_processed=result.pages_processed, groups=groups)
