from __future__ import annotations
from typing import Any
from urllib.parse import quote

from app.services.keycrm_client import KeyCrmClient, QueryParams
from app.services.records import RawRecord, to_records


BUYERS_PATH = "/buyer"
COMPANIES_PATH = "/companies"
COMPANY_INCLUDE = "custom_fields"


def page_params(page: int, per_page: int, search: str | None = None) -> dict[str, str]:
    params: dict[str, str] = {}
    if search:
        params["search"] = search
    params["page"] = str(page)
    params["per_page"] = str(per_page)
    return params


async def list_buyers(client: KeyCrmClient, params: QueryParams | None = None) -> Any:
    return await client.call(BUYERS_PATH, params=params)


async def fetch_buyer_page(client: KeyCrmClient, page: int, per_page: int, search: str | None = None) -> list[RawRecord]:
    return to_records(await list_buyers(client, page_params(page, per_page, search)))


async def list_companies(client: KeyCrmClient, params: QueryParams | None = None) -> Any:
    merged: dict[str, Any] = dict(params or {})
    merged.setdefault("include", COMPANY_INCLUDE)
    return await client.call(COMPANIES_PATH, params=merged)


async def fetch_company_page(client: KeyCrmClient, page: int, per_page: int) -> list[RawRecord]:
    return to_records(await list_companies(client, page_params(page, per_page)))


async def get_company(client: KeyCrmClient, company_id: str) -> Any:
    return await client.call(f"{COMPANIES_PATH}/{quote(company_id, safe='')}", params={"include": COMPANY_INCLUDE})
