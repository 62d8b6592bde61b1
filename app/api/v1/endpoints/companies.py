from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request
import logging

from app.api.deps import get_company_cache, get_keycrm, get_settings, parse_max
from app.core.config import Settings
from app.core.errors import KeyCrmError
from app.schemas.common import ErrorOut
from app.schemas.companies import CacheClearOut, CompaniesAllOut
from app.services import keycrm_api
from app.services.company_cache import CompanyCache
from app.services.keycrm_client import KeyCrmClient
from app.services.pagination import accumulate


log = logging.getLogger(__name__)
router = APIRouter()


@router.get("/companies")
async def list_companies(request: Request, client: KeyCrmClient = Depends(get_keycrm)) -> Any:
    # page / per_page (and anything else) forwarded; custom fields always requested
    return await keycrm_api.list_companies(client, request.query_params.multi_items())


@router.get("/companies/all", response_model=CompaniesAllOut)
async def list_all_companies(
    max_value: str | None = Query(default=None, alias="max"),
    client: KeyCrmClient = Depends(get_keycrm),
    cache: CompanyCache = Depends(get_company_cache),
    settings: Settings = Depends(get_settings),
) -> CompaniesAllOut:
    per_page = settings.companies_per_page

    async def fetch_page(page: int):
        records = await keycrm_api.fetch_company_page(client, page, per_page)
        cache.prime(records)
        return records

    result = await accumulate(
        fetch_page,
        per_page=per_page,
        max_records=parse_max(max_value, settings.companies_default_max),
        hard_page_cap=settings.companies_page_cap,
        delay_seconds=settings.companies_page_delay_seconds,
    )
    log.info("companies/all: collected %d companies, cache size %d", result.total, cache.size())

    return CompaniesAllOut(
        total=result.total,
        cached=cache.size(),
        pages_processed=result.pages_processed,
        data=result.records,
    )


@router.get("/companies/{company_id}", responses={400: {"model": ErrorOut}, 404: {"model": ErrorOut}})
async def get_company(
    company_id: str,
    client: KeyCrmClient = Depends(get_keycrm),
    cache: CompanyCache = Depends(get_company_cache),
) -> Any:
    company_id = company_id.strip()
    if not company_id:
        raise HTTPException(status_code=400, detail="Company id is required")

    async def fetch(cid: str):
        return await keycrm_api.get_company(client, cid)

    try:
        return await cache.get_or_fetch(company_id, fetch)
    except KeyCrmError as e:
        # Upstream failures and genuine misses are both reported as not found
        log.warning("company %s lookup failed: %s", company_id, e)
        raise HTTPException(status_code=404, detail=f"Company {company_id} not found")


@router.post("/cache/clear", response_model=CacheClearOut)
async def clear_cache(cache: CompanyCache = Depends(get_company_cache)) -> CacheClearOut:
    return CacheClearOut(cleared=cache.clear())
